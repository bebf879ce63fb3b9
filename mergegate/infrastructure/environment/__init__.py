from mergegate.infrastructure.environment.git_workspace import GitWorkspaceProvisioner
from mergegate.infrastructure.environment.rustup_installer import RustupInstaller

__all__ = ["GitWorkspaceProvisioner", "RustupInstaller"]
