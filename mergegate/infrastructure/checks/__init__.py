from mergegate.infrastructure.checks.command_check_runner import CommandCheckRunner
from mergegate.infrastructure.checks.default_registry import get_default_registry

__all__ = ["CommandCheckRunner", "get_default_registry"]
