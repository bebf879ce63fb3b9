"""The four checks gating the trunk branch."""

from mergegate.domain.entities.check_definition import CheckDefinition
from mergegate.domain.entities.check_registry import CheckRegistry
from mergegate.domain.value_objects import GateConfig, ToolchainSpec

CARGO_ENV = {"CARGO_TERM_COLOR": "always"}

# Only the banned-API lint is enforced; the default clippy lint set is noisy.
CLIPPY_DISALLOWED_METHODS = "cargo clippy --all -- -A clippy::all -D clippy::disallowed_methods"


def get_default_registry(config: GateConfig | None = None) -> CheckRegistry:
    """Build the frozen default registry: test, msrv, rustfmt, clippy."""
    config = config or GateConfig()
    registry = CheckRegistry()

    # Full test suite on latest stable
    registry.register(
        CheckDefinition(
            name="test",
            title="cargo test",
            commands=("cargo test --all",),
            toolchain=ToolchainSpec(channel=config.stable_toolchain),
            env=dict(CARGO_ENV),
        )
    )

    # Same suite on the minimum supported version
    registry.register(
        CheckDefinition(
            name="msrv",
            title=f"Check MSRV: {config.msrv}",
            commands=("cargo test --all",),
            toolchain=ToolchainSpec(channel=config.msrv),
            env=dict(CARGO_ENV),
        )
    )

    # Formatting must produce zero diffs
    registry.register(
        CheckDefinition(
            name="rustfmt",
            title="rustfmt",
            commands=("cargo fmt --all -- --check",),
            toolchain=ToolchainSpec(channel=config.nightly_toolchain, components=("rustfmt",)),
            env=dict(CARGO_ENV),
        )
    )

    # Banned API usage only
    registry.register(
        CheckDefinition(
            name="clippy",
            title="cargo clippy (forbidden methods)",
            commands=(CLIPPY_DISALLOWED_METHODS,),
            toolchain=ToolchainSpec(channel=config.stable_toolchain, components=("clippy",)),
            env=dict(CARGO_ENV),
        )
    )

    return registry.freeze()
