from datetime import UTC, datetime
from uuid import UUID

from pydantic import BaseModel, Field

from mergegate.domain.entities.check_result import CheckResult
from mergegate.domain.entities.trigger_event import TriggerEvent
from mergegate.domain.value_objects import CheckStatus, RunStatus


class RunOutcome(BaseModel, frozen=True):
    """Gate decision for one trigger event.

    ``results`` is keyed by check name in registry order. Accepted iff every
    result PASSED; any FAILED or ERRORED result rejects the run.
    """

    id: UUID
    event: TriggerEvent
    results: dict[str, CheckResult]
    status: RunStatus
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def accepted(self) -> bool:
        return self.status == RunStatus.PASSED

    @property
    def failing_checks(self) -> list[str]:
        return [n for n, r in self.results.items() if r.status == CheckStatus.FAILED]

    @property
    def errored_checks(self) -> list[str]:
        return [n for n, r in self.results.items() if r.status == CheckStatus.ERRORED]

    @property
    def rejected_checks(self) -> list[str]:
        return [n for n, r in self.results.items() if r.status.is_rejection]

    def rejection_summary(self) -> str:
        if self.accepted:
            return "All checks passed"
        parts: list[str] = []
        if self.failing_checks:
            parts.append(f"failed: {', '.join(self.failing_checks)}")
        if self.errored_checks:
            parts.append(f"errored: {', '.join(self.errored_checks)}")
        return "Rejected (" + "; ".join(parts) + ")"


class RunProgress(BaseModel, frozen=True):
    """In-flight view of a run; checks without a result are PENDING."""

    results: dict[str, CheckResult]
    status: RunStatus

    @property
    def finished(self) -> int:
        return sum(1 for r in self.results.values() if r.is_final)
