import asyncio
from collections.abc import Callable
from pathlib import Path

import pytest

from mergegate.domain.entities.check_definition import CheckDefinition
from mergegate.domain.entities.check_registry import CheckRegistry
from mergegate.domain.entities.check_result import CheckResult
from mergegate.domain.entities.trigger_event import TriggerEvent
from mergegate.domain.ports.check_runner_port import CheckRunnerPort
from mergegate.domain.ports.environment_port import EnvironmentPort, ProvisioningError, Workspace
from mergegate.domain.value_objects import EventKind, GateConfig, ToolchainSpec

CHECK_NAMES = ["test", "msrv", "rustfmt", "clippy"]

# Behaviours understood by FakeCheckRunner, keyed by check name
PASS = "pass"
FAIL = "fail"
HANG = "hang"
CRASH = "crash"


class FakeEnvironment(EnvironmentPort):
    """Records provision/release calls; can refuse to provision chosen checks."""

    def __init__(self, root: Path, broken: set[str] | None = None) -> None:
        self.root = root
        self.broken = broken or set()
        self.provisioned: list[str] = []
        self.released: list[str] = []

    async def provision(self, definition: CheckDefinition, event: TriggerEvent) -> Workspace:
        if definition.name in self.broken:
            raise ProvisioningError(definition.name, "Toolchain install", "rustup exited with 1")
        self.provisioned.append(definition.name)
        return Workspace(check_name=definition.name, path=self.root / definition.name)

    async def release(self, workspace: Workspace) -> None:
        self.released.append(workspace.check_name)


class FakeCheckRunner(CheckRunnerPort):
    def __init__(self, behaviours: dict[str, str] | None = None, delay: float = 0) -> None:
        self.behaviours = behaviours or {}
        self.delay = delay
        self.started: list[str] = []
        self.all_started = asyncio.Event()
        self.expected = 0

    async def run_check(self, definition: CheckDefinition, workspace: Workspace) -> CheckResult:
        self.started.append(definition.name)
        if self.expected and len(self.started) >= self.expected:
            self.all_started.set()
        behaviour = self.behaviours.get(definition.name, PASS)
        if self.delay:
            await asyncio.sleep(self.delay)

        result = CheckResult(check_name=definition.name)
        result.mark_running()
        if behaviour == HANG:
            await asyncio.sleep(3600)
        if behaviour == CRASH:
            raise RuntimeError("runner blew up")
        if behaviour == FAIL:
            result.mark_failed(definition.commands[0], 101, output_tail="error[E0308]")
        else:
            result.mark_passed(output_tail="ok")
        return result


def make_definition(name: str, **overrides: object) -> CheckDefinition:
    values: dict[str, object] = {
        "name": name,
        "commands": ("cargo test --all",),
        "toolchain": ToolchainSpec(channel="stable"),
    }
    values.update(overrides)
    return CheckDefinition(**values)  # type: ignore[arg-type]


@pytest.fixture
def config() -> GateConfig:
    return GateConfig(trunk_branch="master", check_timeout_s=30)


@pytest.fixture
def registry() -> CheckRegistry:
    return CheckRegistry(make_definition(name) for name in CHECK_NAMES)


@pytest.fixture
def definition_factory() -> Callable[..., CheckDefinition]:
    return make_definition


@pytest.fixture
def push_event() -> TriggerEvent:
    return TriggerEvent(kind=EventKind.PUSH, branch="master", commit="a1b2c3d4e5f6")


@pytest.fixture
def pr_event() -> TriggerEvent:
    return TriggerEvent(kind=EventKind.PULL_REQUEST, branch="master", pull_request=42)


@pytest.fixture
def environment(tmp_path: Path) -> FakeEnvironment:
    return FakeEnvironment(tmp_path)


@pytest.fixture
def temp_state_dir(tmp_path: Path) -> Path:
    state_dir = tmp_path / ".mergegate"
    state_dir.mkdir()
    return state_dir


@pytest.fixture
def runner_factory() -> type[FakeCheckRunner]:
    return FakeCheckRunner


@pytest.fixture
def environment_factory() -> type[FakeEnvironment]:
    return FakeEnvironment
