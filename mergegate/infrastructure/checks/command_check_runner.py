import os

from loguru import logger

from mergegate.domain.entities.check_definition import CheckDefinition
from mergegate.domain.entities.check_result import CheckResult
from mergegate.domain.ports.check_runner_port import CheckRunnerPort
from mergegate.domain.ports.environment_port import Workspace
from mergegate.domain.value_objects import ErrorKind
from mergegate.infrastructure.process import output_tail, run_process


class CommandCheckRunner(CheckRunnerPort):
    """Runs a check's commands sequentially through the shell.

    The first non-zero exit fails the check and names the command; a
    command that cannot be started errors the check instead.
    """

    def __init__(self, output_tail_chars: int = 4000) -> None:
        self.output_tail_chars = output_tail_chars

    async def run_check(
        self,
        definition: CheckDefinition,
        workspace: Workspace,
    ) -> CheckResult:
        result = CheckResult(check_name=definition.name)
        result.mark_running()

        env = dict(os.environ)
        env.update(definition.env)
        env.update(workspace.env)

        transcript: list[str] = []
        for command in definition.commands:
            logger.info("Check '{}': running `{}`", definition.name, command)
            try:
                proc = await run_process(command, cwd=workspace.path, env=env)
            except OSError as e:
                logger.error("Check '{}' could not start `{}`: {}", definition.name, command, e)
                result.mark_errored(
                    ErrorKind.PROVISIONING,
                    f"Could not start `{command}`: {e}",
                    output_tail=self._tail(transcript),
                )
                return result

            transcript.append(f"$ {command}\n{proc.output}")
            if proc.returncode != 0:
                logger.warning(
                    "Check '{}' failed: `{}` exited with {} after {}ms",
                    definition.name,
                    command,
                    proc.returncode,
                    proc.duration_ms,
                )
                result.mark_failed(command, proc.returncode, output_tail=self._tail(transcript))
                return result

        logger.info("Check '{}' passed", definition.name)
        result.mark_passed(output_tail=self._tail(transcript))
        return result

    def _tail(self, transcript: list[str]) -> str:
        return output_tail("\n".join(transcript), self.output_tail_chars)
