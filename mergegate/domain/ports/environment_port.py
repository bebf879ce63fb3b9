from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import BaseModel, Field

from mergegate.domain.entities.check_definition import CheckDefinition
from mergegate.domain.entities.trigger_event import TriggerEvent


class ProvisioningError(Exception):
    """Raised when an isolated environment for a check cannot be prepared.

    This indicates infrastructure trouble (checkout, toolchain install),
    not a defect in the change under test.
    """

    def __init__(self, check_name: str, step: str, detail: str) -> None:
        self.check_name = check_name
        self.step = step
        self.detail = detail
        super().__init__(f"{step} failed for check '{check_name}': {detail}")


class Workspace(BaseModel, frozen=True):
    """An isolated checkout prepared for a single check."""

    check_name: str
    path: Path
    env: dict[str, str] = Field(default_factory=dict)


class EnvironmentPort(ABC):
    """Port for provisioning per-check execution environments."""

    @abstractmethod
    async def provision(self, definition: CheckDefinition, event: TriggerEvent) -> Workspace:
        """Check out the event's commit and install the check's toolchain.

        Raises ProvisioningError on failure.
        """

    @abstractmethod
    async def release(self, workspace: Workspace) -> None:
        """Dispose of a workspace. Must not raise for an already-removed workspace."""
