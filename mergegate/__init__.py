"""mergegate - build-verification gate for trunk branches."""

__version__ = "0.1.0"
