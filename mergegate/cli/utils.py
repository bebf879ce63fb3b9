"""CLI utility functions."""

from pathlib import Path

import typer

from mergegate.domain.value_objects import EventKind, GateConfig
from mergegate.infrastructure.checks.default_registry import get_default_registry
from mergegate.infrastructure.config.workflow_loader import LoadedWorkflow, load_workflow


def parse_event_kind(value: str) -> EventKind:
    try:
        return EventKind(value.lower().replace("-", "_"))
    except ValueError:
        raise typer.BadParameter(
            f"Invalid event: {value}. Must be one of: push, pull_request"
        ) from None


def load_gate_setup(
    workflow: Path | None = None,
    trunk: str | None = None,
    msrv: str | None = None,
    timeout_minutes: float | None = None,
    provision_attempts: int | None = None,
) -> LoadedWorkflow:
    """Build config and registry: defaults, then the workflow file, then flags.

    Raises:
        ConfigurationError: If the workflow file is unusable.
        ValidationError: If a flag value is out of range.
    """
    if workflow is not None and msrv is not None:
        raise typer.BadParameter("--msrv cannot be combined with --workflow")

    overrides: dict[str, object] = {}
    if msrv is not None:
        overrides["msrv"] = msrv
    if timeout_minutes is not None:
        overrides["check_timeout_s"] = int(timeout_minutes * 60)
    if provision_attempts is not None:
        overrides["provision_attempts"] = provision_attempts

    base = GateConfig(**overrides)  # type: ignore[arg-type]
    if workflow is not None:
        loaded = load_workflow(workflow, base)
        config = loaded.config
        registry = loaded.registry
    else:
        config = base
        registry = get_default_registry(config)

    if trunk is not None:
        config = GateConfig(**{**config.model_dump(), "trunk_branch": trunk})
    return LoadedWorkflow(config=config, registry=registry)
