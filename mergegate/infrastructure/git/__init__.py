from mergegate.infrastructure.git.repo_root import (
    get_default_state_dir,
    get_repo_root,
    resolve_commit,
)

__all__ = ["get_default_state_dir", "get_repo_root", "resolve_commit"]
