import asyncio

from loguru import logger

from mergegate.domain.ports.environment_port import ProvisioningError
from mergegate.domain.value_objects import ToolchainSpec
from mergegate.infrastructure.environment.retry import provisioning_retry
from mergegate.infrastructure.process import output_tail, run_process


class RustupInstaller:
    """Installs toolchains and components with rustup.

    Each distinct (channel, components) pair is installed at most once per
    process. Installs are serialized per channel, so concurrent checks on
    the same channel wait on one another instead of racing rustup, even
    when they ask for different components.
    """

    def __init__(self, rustup: str = "rustup", attempts: int = 1) -> None:
        self.rustup = rustup
        self.attempts = attempts
        self._installed: set[ToolchainSpec] = set()
        self._locks: dict[str, asyncio.Lock] = {}

    def install_command(self, toolchain: ToolchainSpec) -> list[str]:
        argv = [
            self.rustup,
            "toolchain",
            "install",
            toolchain.channel,
            "--profile",
            "minimal",
            "--no-self-update",
        ]
        for component in toolchain.components:
            argv.extend(["--component", component])
        return argv

    async def install(self, toolchain: ToolchainSpec, check_name: str) -> None:
        lock = self._locks.setdefault(toolchain.channel, asyncio.Lock())
        async with lock:
            if toolchain in self._installed:
                return
            async for attempt in provisioning_retry(self.attempts):
                with attempt:
                    await self._install_once(toolchain, check_name)
            self._installed.add(toolchain)

    async def _install_once(self, toolchain: ToolchainSpec, check_name: str) -> None:
        logger.info("Installing toolchain {} for check '{}'", toolchain, check_name)
        try:
            proc = await run_process(self.install_command(toolchain), cwd=".")
        except OSError as e:
            raise ProvisioningError(check_name, "Toolchain install", str(e)) from e
        if proc.returncode != 0:
            raise ProvisioningError(
                check_name,
                "Toolchain install",
                f"rustup exited with {proc.returncode}: {output_tail(proc.output, 500)}",
            )
