from mergegate.application.dto.run_report import COMMIT_STATES, CheckReport, RunReport

__all__ = [
    "COMMIT_STATES",
    "CheckReport",
    "RunReport",
]
