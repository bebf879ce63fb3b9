import asyncio
from collections.abc import Iterable
from uuid import UUID

from loguru import logger


class RunTracker:
    """Tracks in-flight check tasks per concurrency key.

    Starting a run for a key that already has one in flight cancels the
    older run's tasks.
    """

    def __init__(self) -> None:
        self._runs: dict[str, tuple[UUID, list[asyncio.Task]]] = {}

    def start(self, key: str, run_id: UUID, tasks: Iterable[asyncio.Task]) -> None:
        self.cancel(key, reason=f"superseded by run {run_id}")
        self._runs[key] = (run_id, list(tasks))

    def finish(self, key: str, run_id: UUID) -> None:
        current = self._runs.get(key)
        if current is not None and current[0] == run_id:
            del self._runs[key]

    def cancel(self, key: str, reason: str = "cancelled") -> bool:
        """Cancel the in-flight run for key. Returns False if none was running."""
        current = self._runs.pop(key, None)
        if current is None:
            return False
        run_id, tasks = current
        pending = [t for t in tasks if not t.done()]
        if pending:
            logger.info("Cancelling run {} ({} checks in flight): {}", run_id, len(pending), reason)
        for task in pending:
            task.cancel(reason)
        return True

    def active(self) -> dict[str, UUID]:
        return {key: run_id for key, (run_id, _) in self._runs.items()}
