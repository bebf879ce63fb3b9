"""End-to-end gate runs against a real git repository and real shell commands."""

import subprocess
from pathlib import Path

import pytest

from mergegate.application.gate_evaluator import GateEvaluator
from mergegate.domain.entities.check_definition import CheckDefinition
from mergegate.domain.entities.check_registry import CheckRegistry
from mergegate.domain.entities.trigger_event import TriggerEvent
from mergegate.domain.ports.environment_port import ProvisioningError
from mergegate.domain.value_objects import (
    CheckStatus,
    ErrorKind,
    EventKind,
    GateConfig,
    RunStatus,
    ToolchainSpec,
)
from mergegate.infrastructure.checks.command_check_runner import CommandCheckRunner
from mergegate.infrastructure.environment.git_workspace import GitWorkspaceProvisioner
from mergegate.infrastructure.persistence.json_run_store import JsonRunStore


class StubInstaller:
    def __init__(self, unavailable: set[str] | None = None) -> None:
        self.unavailable = unavailable or set()

    async def install(self, toolchain: ToolchainSpec, check_name: str) -> None:
        if toolchain.channel in self.unavailable:
            raise ProvisioningError(check_name, "Toolchain install", f"{toolchain} unavailable")


def _git(cwd: Path, *args: str) -> str:
    return subprocess.run(
        ["git", *args], cwd=cwd, check=True, capture_output=True, text=True
    ).stdout.strip()


@pytest.fixture
def crate(tmp_path: Path) -> Path:
    repo = tmp_path / "crate"
    repo.mkdir()
    _git(repo, "init", "--quiet", "--initial-branch=master")
    (repo / "Cargo.toml").write_text('[package]\nname = "demo"\n')
    (repo / "src").mkdir()
    (repo / "src" / "lib.rs").write_text("pub fn add(a: u32, b: u32) -> u32 { a + b }\n")
    _git(repo, "add", ".")
    _git(repo, "-c", "user.email=gate@example.com", "-c", "user.name=Gate", "commit", "-qm", "init")
    return repo


def _registry() -> CheckRegistry:
    # Shell stand-ins for the cargo commands, keyed to repository contents
    return CheckRegistry(
        [
            CheckDefinition(
                name="test",
                commands=("test -f Cargo.toml", "grep -q 'pub fn add' src/lib.rs"),
                toolchain=ToolchainSpec(channel="stable"),
            ),
            CheckDefinition(
                name="msrv",
                commands=('test "$RUSTUP_TOOLCHAIN" = 1.67.0',),
                toolchain=ToolchainSpec(channel="1.67.0"),
            ),
            CheckDefinition(
                name="rustfmt",
                commands=("! grep -q '  $' src/lib.rs",),
                toolchain=ToolchainSpec(channel="nightly", components=("rustfmt",)),
            ),
            CheckDefinition(
                name="clippy",
                commands=("! grep -rq 'unwrap()' src",),
                toolchain=ToolchainSpec(channel="stable", components=("clippy",)),
            ),
        ]
    )


def _evaluator(
    crate: Path, tmp_path: Path, installer: StubInstaller | None = None
) -> GateEvaluator:
    return GateEvaluator(
        config=GateConfig(check_timeout_s=60),
        registry=_registry(),
        check_runner=CommandCheckRunner(),
        environment=GitWorkspaceProvisioner(
            crate, installer=installer or StubInstaller(), work_root=tmp_path / "workspaces"
        ),
        run_store=JsonRunStore(tmp_path / ".mergegate"),
    )


class TestGateEndToEnd:
    async def test_clean_commit_is_accepted(self, crate: Path, tmp_path: Path) -> None:
        evaluator = _evaluator(crate, tmp_path)
        event = TriggerEvent(
            kind=EventKind.PUSH, branch="master", commit=_git(crate, "rev-parse", "HEAD")
        )

        outcome = await evaluator.evaluate(event)

        assert outcome is not None
        assert outcome.status == RunStatus.PASSED
        assert list((tmp_path / "workspaces").iterdir()) == []
        stored = await JsonRunStore(tmp_path / ".mergegate").load(outcome.id)
        assert stored == outcome

    async def test_forbidden_call_fails_only_clippy(self, crate: Path, tmp_path: Path) -> None:
        (crate / "src" / "lib.rs").write_text(
            "pub fn first(v: Vec<u32>) -> u32 { *v.first().unwrap() }\n"
        )
        _git(crate, "-c", "user.email=g@e.com", "-c", "user.name=G", "commit", "-qam", "unwrap")

        outcome = await _evaluator(crate, tmp_path).evaluate(
            TriggerEvent(
                kind=EventKind.PULL_REQUEST,
                branch="master",
                commit=_git(crate, "rev-parse", "HEAD"),
                pull_request=3,
            )
        )

        assert outcome is not None
        assert outcome.failing_checks == ["test", "clippy"]
        assert outcome.results["clippy"].failed_command == "! grep -rq 'unwrap()' src"
        assert outcome.results["rustfmt"].status == CheckStatus.PASSED

    async def test_unavailable_toolchain_errors_its_check(
        self, crate: Path, tmp_path: Path
    ) -> None:
        evaluator = _evaluator(crate, tmp_path, StubInstaller(unavailable={"nightly"}))

        outcome = await evaluator.evaluate(TriggerEvent(kind=EventKind.PUSH, branch="master"))

        assert outcome is not None
        assert outcome.errored_checks == ["rustfmt"]
        assert outcome.results["rustfmt"].error_kind == ErrorKind.PROVISIONING
        assert outcome.failing_checks == []

    async def test_bad_commit_errors_every_check(self, crate: Path, tmp_path: Path) -> None:
        outcome = await _evaluator(crate, tmp_path).evaluate(
            TriggerEvent(kind=EventKind.PUSH, branch="master", commit="0" * 40)
        )

        assert outcome is not None
        assert outcome.status == RunStatus.FAILED
        assert outcome.errored_checks == ["test", "msrv", "rustfmt", "clippy"]
        assert all("Checkout failed" in r.detail for r in outcome.results.values())
