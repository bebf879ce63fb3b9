from mergegate.infrastructure.config.workflow_loader import (
    LoadedWorkflow,
    WorkflowFileError,
    load_workflow,
)

__all__ = ["LoadedWorkflow", "WorkflowFileError", "load_workflow"]
