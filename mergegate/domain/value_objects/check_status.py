from enum import Enum


class CheckStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    ERRORED = "errored"

    @property
    def is_final(self) -> bool:
        return self in (CheckStatus.PASSED, CheckStatus.FAILED, CheckStatus.ERRORED)

    @property
    def is_rejection(self) -> bool:
        return self in (CheckStatus.FAILED, CheckStatus.ERRORED)


class RunStatus(str, Enum):
    PENDING = "pending"
    PASSED = "passed"
    FAILED = "failed"


class ErrorKind(str, Enum):
    """Why a check ended up ERRORED rather than PASSED/FAILED."""

    PROVISIONING = "provisioning"  # checkout, toolchain install, process spawn
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"  # superseded by a newer event
    INTERNAL = "internal"
