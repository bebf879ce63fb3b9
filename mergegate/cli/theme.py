"""CLI theme configuration - all colors in one place.

Colors use Rich markup syntax (e.g., "green", "bold red", "grey62").
"""


class Theme:
    """Terminal color theme for mergegate CLI."""

    # -------------------------------------------------------------------------
    # Messages
    # -------------------------------------------------------------------------
    SUCCESS = "green"
    ERROR = "red"
    ERROR_BOLD = "bold red"
    INFO = "cyan"
    HEADER = "bold"
    DIM = "grey62"

    # -------------------------------------------------------------------------
    # Check status
    # -------------------------------------------------------------------------
    CHECK_PENDING = "grey62"
    CHECK_RUNNING = "bold yellow"
    CHECK_PASSED = "bold green"
    CHECK_FAILED = "bold red"
    CHECK_ERRORED = "bold magenta"

    # -------------------------------------------------------------------------
    # Tables and panels
    # -------------------------------------------------------------------------
    TABLE_SECONDARY = "grey62"
    BORDER_SUCCESS = "green"
    BORDER_ERROR = "red"
    BORDER_WARNING = "yellow"


# Default theme instance - import this in other modules
theme = Theme()
