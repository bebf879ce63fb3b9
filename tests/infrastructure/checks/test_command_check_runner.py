import asyncio
from collections.abc import Callable
from pathlib import Path

import pytest

from mergegate.domain.entities.check_definition import CheckDefinition
from mergegate.domain.ports.environment_port import Workspace
from mergegate.domain.value_objects import CheckStatus, ErrorKind
from mergegate.infrastructure.checks.command_check_runner import CommandCheckRunner


@pytest.fixture
def runner() -> CommandCheckRunner:
    return CommandCheckRunner()


@pytest.fixture
def workspace(tmp_path: Path) -> Workspace:
    return Workspace(check_name="test-check", path=tmp_path, env={"RUSTUP_TOOLCHAIN": "stable"})


class TestCommandCheckRunner:
    async def test_successful_commands_pass(
        self,
        runner: CommandCheckRunner,
        workspace: Workspace,
        definition_factory: Callable[..., CheckDefinition],
    ) -> None:
        definition = definition_factory("test-check", commands=("echo hello", "echo world"))

        result = await runner.run_check(definition, workspace)

        assert result.status == CheckStatus.PASSED
        assert result.check_name == "test-check"
        assert "hello" in result.output_tail
        assert "world" in result.output_tail
        assert result.duration_ms is not None and result.duration_ms >= 0

    async def test_first_failing_command_fails_check(
        self,
        runner: CommandCheckRunner,
        workspace: Workspace,
        definition_factory: Callable[..., CheckDefinition],
    ) -> None:
        marker = workspace.path / "ran-third"
        definition = definition_factory(
            "test-check",
            commands=("true", "echo boom >&2; exit 3", f"touch {marker}"),
        )

        result = await runner.run_check(definition, workspace)

        assert result.status == CheckStatus.FAILED
        assert result.failed_command == "echo boom >&2; exit 3"
        assert result.exit_code == 3
        assert "boom" in result.output_tail
        assert not marker.exists()

    async def test_missing_executable_is_a_failure(
        self,
        runner: CommandCheckRunner,
        workspace: Workspace,
        definition_factory: Callable[..., CheckDefinition],
    ) -> None:
        definition = definition_factory("test-check", commands=("no-such-binary-xyz --all",))

        result = await runner.run_check(definition, workspace)

        assert result.status == CheckStatus.FAILED
        assert result.exit_code == 127

    async def test_missing_workspace_is_errored(
        self,
        runner: CommandCheckRunner,
        tmp_path: Path,
        definition_factory: Callable[..., CheckDefinition],
    ) -> None:
        workspace = Workspace(check_name="test-check", path=tmp_path / "gone")

        result = await runner.run_check(definition_factory("test-check"), workspace)

        assert result.status == CheckStatus.ERRORED
        assert result.error_kind == ErrorKind.PROVISIONING

    async def test_environment_layers(
        self,
        runner: CommandCheckRunner,
        workspace: Workspace,
        definition_factory: Callable[..., CheckDefinition],
    ) -> None:
        definition = definition_factory(
            "test-check",
            commands=("echo $CARGO_TERM_COLOR:$RUSTUP_TOOLCHAIN",),
            env={"CARGO_TERM_COLOR": "always", "RUSTUP_TOOLCHAIN": "ignored"},
        )

        result = await runner.run_check(definition, workspace)

        assert "always:stable" in result.output_tail

    async def test_runs_in_workspace(
        self,
        runner: CommandCheckRunner,
        workspace: Workspace,
        definition_factory: Callable[..., CheckDefinition],
    ) -> None:
        result = await runner.run_check(
            definition_factory("test-check", commands=("pwd",)), workspace
        )

        assert str(workspace.path.resolve()) in result.output_tail

    async def test_output_tail_is_bounded(
        self,
        workspace: Workspace,
        definition_factory: Callable[..., CheckDefinition],
    ) -> None:
        runner = CommandCheckRunner(output_tail_chars=50)
        definition = definition_factory("test-check", commands=("seq 1 1000",))

        result = await runner.run_check(definition, workspace)

        assert result.output_tail.startswith("...")
        assert len(result.output_tail) == 53
        assert "1000" in result.output_tail

    async def test_cancellation_kills_running_command(
        self,
        runner: CommandCheckRunner,
        workspace: Workspace,
        definition_factory: Callable[..., CheckDefinition],
    ) -> None:
        definition = definition_factory("test-check", commands=("sleep 30",))

        task = asyncio.create_task(runner.run_check(definition, workspace))
        await asyncio.sleep(0.3)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await asyncio.wait_for(task, timeout=5)
