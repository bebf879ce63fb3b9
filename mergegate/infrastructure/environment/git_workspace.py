import asyncio
import shutil
import tempfile
from pathlib import Path
from typing import Protocol

from loguru import logger

from mergegate.domain.entities.check_definition import CheckDefinition
from mergegate.domain.entities.trigger_event import TriggerEvent
from mergegate.domain.ports.environment_port import EnvironmentPort, ProvisioningError, Workspace
from mergegate.domain.value_objects import ToolchainSpec
from mergegate.infrastructure.environment.retry import provisioning_retry
from mergegate.infrastructure.environment.rustup_installer import RustupInstaller
from mergegate.infrastructure.process import output_tail, run_process


class ToolchainInstaller(Protocol):
    async def install(self, toolchain: ToolchainSpec, check_name: str) -> None:
        """Install toolchain, raising ProvisioningError on failure."""
        ...


class GitWorkspaceProvisioner(EnvironmentPort):
    """Gives every check its own clone of the source repository.

    The clone is detached at the event's commit (or the tip of the target
    branch when no commit is given) and the check's toolchain is pinned
    through RUSTUP_TOOLCHAIN.
    """

    def __init__(
        self,
        source: Path | str,
        installer: ToolchainInstaller | None = None,
        work_root: Path | None = None,
        attempts: int = 1,
    ) -> None:
        self.source = str(source)
        self.installer = installer or RustupInstaller(attempts=attempts)
        self.work_root = work_root
        self.attempts = attempts

    async def provision(self, definition: CheckDefinition, event: TriggerEvent) -> Workspace:
        try:
            ref = event.checkout_ref
        except ValueError as e:
            raise ProvisioningError(definition.name, "Checkout", str(e)) from e

        if self.work_root is not None:
            self.work_root.mkdir(parents=True, exist_ok=True)
        path = Path(
            tempfile.mkdtemp(
                prefix=f"mergegate-{definition.name}-",
                dir=str(self.work_root) if self.work_root else None,
            )
        )

        try:
            async for attempt in provisioning_retry(self.attempts):
                with attempt:
                    await self._checkout(path, definition.name, ref)
            await self.installer.install(definition.toolchain, definition.name)
        except BaseException:
            await asyncio.to_thread(shutil.rmtree, path, ignore_errors=True)
            raise

        logger.debug("Provisioned workspace for '{}' at {}", definition.name, path)
        return Workspace(
            check_name=definition.name,
            path=path,
            env={"RUSTUP_TOOLCHAIN": definition.toolchain.channel},
        )

    async def release(self, workspace: Workspace) -> None:
        await asyncio.to_thread(shutil.rmtree, workspace.path, ignore_errors=True)
        logger.debug("Released workspace for '{}'", workspace.check_name)

    async def _checkout(self, path: Path, check_name: str, ref: str) -> None:
        # A retried attempt starts from an empty directory
        for child in path.iterdir():
            if child.is_dir():
                await asyncio.to_thread(shutil.rmtree, child, ignore_errors=True)
            else:
                child.unlink()

        await self._git(check_name, ["clone", "--quiet", "--no-checkout", self.source, str(path)])
        await self._git(
            check_name,
            ["checkout", "--quiet", "--detach", ref],
            cwd=path,
        )

    async def _git(self, check_name: str, args: list[str], cwd: Path | None = None) -> None:
        try:
            proc = await run_process(["git", *args], cwd=cwd or Path.cwd())
        except OSError as e:
            raise ProvisioningError(check_name, "Checkout", str(e)) from e
        if proc.returncode != 0:
            raise ProvisioningError(
                check_name,
                "Checkout",
                f"git {args[0]} exited with {proc.returncode}: {output_tail(proc.stderr, 500)}",
            )
