from mergegate.domain.entities.check_definition import CheckDefinition
from mergegate.domain.entities.check_registry import (
    CheckRegistry,
    ConfigurationError,
    RegistryFrozenError,
)
from mergegate.domain.entities.check_result import CheckResult, CheckResultFinalizedError
from mergegate.domain.entities.run_outcome import RunOutcome, RunProgress
from mergegate.domain.entities.trigger_event import TriggerEvent

__all__ = [
    "CheckDefinition",
    "CheckRegistry",
    "CheckResult",
    "CheckResultFinalizedError",
    "ConfigurationError",
    "RegistryFrozenError",
    "RunOutcome",
    "RunProgress",
    "TriggerEvent",
]
