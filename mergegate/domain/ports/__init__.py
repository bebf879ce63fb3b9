from mergegate.domain.ports.check_runner_port import CheckRunnerPort
from mergegate.domain.ports.environment_port import EnvironmentPort, ProvisioningError, Workspace
from mergegate.domain.ports.run_store_port import RunStorePort

__all__ = [
    # Check runner port
    "CheckRunnerPort",
    # Environment port
    "EnvironmentPort",
    "ProvisioningError",
    "Workspace",
    # Run store port
    "RunStorePort",
]
