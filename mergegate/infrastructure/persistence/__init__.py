from mergegate.infrastructure.persistence.json_run_store import JsonRunStore

__all__ = ["JsonRunStore"]
