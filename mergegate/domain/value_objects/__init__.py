from mergegate.domain.value_objects.branch import normalize_branch
from mergegate.domain.value_objects.check_status import CheckStatus, ErrorKind, RunStatus
from mergegate.domain.value_objects.event_kind import EventKind
from mergegate.domain.value_objects.gate_config import (
    DEFAULT_CHECK_TIMEOUT_S,
    DEFAULT_MSRV,
    DEFAULT_TRUNK_BRANCH,
    GateConfig,
)
from mergegate.domain.value_objects.toolchain import TOOLCHAIN_CHANNEL_PATTERN, ToolchainSpec

__all__ = [
    "CheckStatus",
    "DEFAULT_CHECK_TIMEOUT_S",
    "DEFAULT_MSRV",
    "DEFAULT_TRUNK_BRANCH",
    "ErrorKind",
    "EventKind",
    "GateConfig",
    "RunStatus",
    "TOOLCHAIN_CHANNEL_PATTERN",
    "ToolchainSpec",
    "normalize_branch",
]
