from abc import ABC, abstractmethod

from mergegate.domain.entities.check_definition import CheckDefinition
from mergegate.domain.entities.check_result import CheckResult
from mergegate.domain.ports.environment_port import Workspace


class CheckRunnerPort(ABC):
    """Port for running one check inside a provisioned workspace."""

    @abstractmethod
    async def run_check(
        self,
        definition: CheckDefinition,
        workspace: Workspace,
    ) -> CheckResult:
        """Run every command of the check and return a finalized result.

        Must not retry. Cancellation of the calling task must stop any
        process the runner started.
        """
