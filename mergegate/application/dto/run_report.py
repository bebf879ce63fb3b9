from uuid import UUID

from pydantic import BaseModel

from mergegate.domain.entities.check_result import CheckResult
from mergegate.domain.entities.run_outcome import RunOutcome
from mergegate.domain.value_objects import CheckStatus, ErrorKind, RunStatus

# Commit-status style state per check, as shown next to a change
COMMIT_STATES = {
    CheckStatus.PENDING: "pending",
    CheckStatus.RUNNING: "pending",
    CheckStatus.PASSED: "success",
    CheckStatus.FAILED: "failure",
    CheckStatus.ERRORED: "error",
}


class CheckReport(BaseModel):
    name: str
    status: CheckStatus
    state: str
    description: str
    failed_command: str | None = None
    exit_code: int | None = None
    error_kind: ErrorKind | None = None
    duration_ms: int | None = None

    @classmethod
    def from_result(cls, result: CheckResult) -> "CheckReport":
        return cls(
            name=result.check_name,
            status=result.status,
            state=COMMIT_STATES[result.status],
            description=describe_result(result),
            failed_command=result.failed_command,
            exit_code=result.exit_code,
            error_kind=result.error_kind,
            duration_ms=result.duration_ms,
        )


class RunReport(BaseModel):
    run_id: UUID
    event: str
    status: RunStatus
    accepted: bool
    summary: str
    failing: list[str]
    errored: list[str]
    checks: list[CheckReport]

    @classmethod
    def from_outcome(cls, outcome: RunOutcome) -> "RunReport":
        return cls(
            run_id=outcome.id,
            event=outcome.event.describe(),
            status=outcome.status,
            accepted=outcome.accepted,
            summary=outcome.rejection_summary(),
            failing=outcome.failing_checks,
            errored=outcome.errored_checks,
            checks=[CheckReport.from_result(r) for r in outcome.results.values()],
        )


def describe_result(result: CheckResult) -> str:
    if result.status == CheckStatus.PASSED:
        return "Passed"
    if result.status == CheckStatus.FAILED:
        return result.detail or "Failed"
    if result.status == CheckStatus.ERRORED:
        kind = result.error_kind.value if result.error_kind else "error"
        return f"Infrastructure {kind}: {result.detail}" if result.detail else kind
    return result.status.value.capitalize()
