from mergegate.cli.formatters.outcome_formatter import (
    STATUS_STYLES,
    format_check_update,
    format_outcome,
    format_registry,
    format_status,
)

__all__ = [
    "STATUS_STYLES",
    "format_check_update",
    "format_outcome",
    "format_registry",
    "format_status",
]
