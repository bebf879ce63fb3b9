from mergegate.application.services.run_tracker import RunTracker

__all__ = ["RunTracker"]
