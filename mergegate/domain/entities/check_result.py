from datetime import UTC, datetime

from pydantic import BaseModel

from mergegate.domain.value_objects import CheckStatus, ErrorKind


class CheckResultFinalizedError(Exception):
    """Raised when a finalized CheckResult would be modified."""

    def __init__(self, check_name: str, status: CheckStatus) -> None:
        self.check_name = check_name
        self.status = status
        super().__init__(f"Result for check '{check_name}' is already final ({status.value})")


class CheckResult(BaseModel):
    """Outcome of running one check.

    Moves PENDING -> RUNNING -> PASSED | FAILED | ERRORED. Once a final
    status is recorded every mark_* call raises CheckResultFinalizedError.
    """

    check_name: str
    status: CheckStatus = CheckStatus.PENDING
    failed_command: str | None = None
    exit_code: int | None = None
    error_kind: ErrorKind | None = None
    detail: str = ""
    output_tail: str = ""
    started_at: datetime | None = None
    finished_at: datetime | None = None

    @property
    def is_final(self) -> bool:
        return self.status.is_final

    @property
    def duration_ms(self) -> int | None:
        if self.started_at is None or self.finished_at is None:
            return None
        return int((self.finished_at - self.started_at).total_seconds() * 1000)

    def mark_running(self) -> None:
        self._ensure_open()
        self.status = CheckStatus.RUNNING
        if self.started_at is None:
            self.started_at = datetime.now(UTC)

    def mark_passed(self, output_tail: str = "") -> None:
        self._finalize(CheckStatus.PASSED, output_tail=output_tail)

    def mark_failed(self, command: str, exit_code: int, output_tail: str = "") -> None:
        self._finalize(
            CheckStatus.FAILED,
            output_tail=output_tail,
            detail=f"`{command}` exited with code {exit_code}",
        )
        self.failed_command = command
        self.exit_code = exit_code

    def mark_errored(self, kind: ErrorKind, detail: str, output_tail: str = "") -> None:
        self._finalize(CheckStatus.ERRORED, output_tail=output_tail, detail=detail)
        self.error_kind = kind

    def _finalize(self, status: CheckStatus, output_tail: str, detail: str = "") -> None:
        self._ensure_open()
        now = datetime.now(UTC)
        if self.started_at is None:
            self.started_at = now
        self.status = status
        self.finished_at = now
        self.output_tail = output_tail
        self.detail = detail

    def _ensure_open(self) -> None:
        if self.is_final:
            raise CheckResultFinalizedError(self.check_name, self.status)

    @classmethod
    def errored(cls, check_name: str, kind: ErrorKind, detail: str) -> "CheckResult":
        result = cls(check_name=check_name)
        result.mark_errored(kind, detail)
        return result
