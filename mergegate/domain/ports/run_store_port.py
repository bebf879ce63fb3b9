from abc import ABC, abstractmethod
from uuid import UUID

from mergegate.domain.entities.run_outcome import RunOutcome


class RunStorePort(ABC):
    """Port for run history persistence."""

    @abstractmethod
    async def save(self, outcome: RunOutcome) -> None:
        """Persist a finalized outcome."""

    @abstractmethod
    async def load(self, run_id: UUID) -> RunOutcome | None:
        """Load an outcome by run ID."""

    @abstractmethod
    async def list_runs(self) -> list[UUID]:
        """List stored run IDs, oldest first."""
