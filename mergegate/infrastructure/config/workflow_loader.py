"""Load gate configuration from a GitHub-Actions style workflow file.

Only the parts that carry gate semantics are read: the branch filter of the
``push``/``pull_request`` triggers, workflow and job ``env``, job
``timeout-minutes``, toolchain setup steps and ``run`` steps. Checkout,
caching and other platform actions are provided by the environment
adapters and skipped here.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from mergegate.domain.entities.check_definition import CheckDefinition
from mergegate.domain.entities.check_registry import CheckRegistry, ConfigurationError
from mergegate.domain.value_objects import GateConfig, ToolchainSpec, normalize_branch

TOOLCHAIN_ACTIONS = ("dtolnay/rust-toolchain", "actions-rs/toolchain")
TRIGGER_EVENTS = ("push", "pull_request")
# Cargo subcommands shipped as rustup components
CARGO_COMPONENTS = {"cargo clippy": "clippy", "cargo fmt": "rustfmt"}


class WorkflowFileError(ConfigurationError):
    """Raised when a workflow file cannot be read or understood."""

    def __init__(self, path: Path, problems: list[str]) -> None:
        self.path = path
        super().__init__([f"{path}: {p}" for p in problems])


@dataclass
class LoadedWorkflow:
    config: GateConfig
    registry: CheckRegistry


def load_workflow(path: Path, base: GateConfig | None = None) -> LoadedWorkflow:
    """Read a workflow file into a GateConfig and a frozen CheckRegistry.

    The registry is not validated here; the evaluator validates it before
    any check starts.
    """
    base = base or GateConfig()
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise WorkflowFileError(path, [f"cannot read file: {e}"]) from e
    except yaml.YAMLError as e:
        raise WorkflowFileError(path, [f"invalid YAML: {e}"]) from e

    if not isinstance(data, dict):
        raise WorkflowFileError(path, ["top level must be a mapping"])

    problems: list[str] = []
    # YAML 1.1 reads a bare `on:` key as boolean True
    triggers = data.get("on", data.get(True))
    trunk = _trunk_branch(triggers, problems) or base.trunk_branch

    jobs = data.get("jobs")
    if not isinstance(jobs, dict) or not jobs:
        problems.append("workflow defines no jobs")
        jobs = {}

    workflow_env = _string_env(data.get("env"), "workflow", problems)

    registry = CheckRegistry()
    for job_id, job in jobs.items():
        definition = _job_to_check(str(job_id), job, workflow_env, base, problems)
        if definition is None:
            continue
        if definition.name in registry:
            problems.append(f"duplicate job id '{definition.name}'")
            continue
        registry.register(definition)

    if problems:
        raise WorkflowFileError(path, problems)

    update: dict[str, Any] = {"trunk_branch": trunk}
    msrv = registry.get("msrv")
    if msrv is not None and msrv.toolchain.is_pinned_version:
        update["msrv"] = msrv.toolchain.channel

    logger.info("Loaded {} checks from {} (trunk '{}')", len(registry), path, trunk)
    return LoadedWorkflow(config=base.model_copy(update=update), registry=registry.freeze())


def _trunk_branch(triggers: Any, problems: list[str]) -> str | None:
    """Single branch both triggers filter on, or None when unfiltered."""
    if not isinstance(triggers, dict):
        return None

    branches: set[str] = set()
    for event in TRIGGER_EVENTS:
        trigger = triggers.get(event)
        if not isinstance(trigger, dict):
            continue
        names = trigger.get("branches") or []
        if isinstance(names, str):
            names = [names]
        branches.update(normalize_branch(str(n)) for n in names)

    if len(branches) > 1:
        problems.append(
            f"triggers target several branches ({', '.join(sorted(branches))}); "
            "exactly one trunk branch is supported"
        )
        return None
    return next(iter(branches), None)


def _job_to_check(
    job_id: str,
    job: Any,
    workflow_env: dict[str, str],
    base: GateConfig,
    problems: list[str],
) -> CheckDefinition | None:
    if not isinstance(job, dict):
        problems.append(f"job '{job_id}' must be a mapping")
        return None

    env = dict(workflow_env)
    env.update(_string_env(job.get("env"), f"job '{job_id}'", problems))

    channel = base.stable_toolchain
    components: list[str] = []
    commands: list[str] = []

    for index, step in enumerate(job.get("steps") or []):
        if not isinstance(step, dict):
            problems.append(f"job '{job_id}' step {index} must be a mapping")
            continue

        uses = step.get("uses")
        if uses:
            action, _, ref = str(uses).partition("@")
            if action in TOOLCHAIN_ACTIONS:
                options = step.get("with") or {}
                if not isinstance(options, dict):
                    problems.append(f"job '{job_id}' step {index} with must be a mapping")
                    continue
                toolchain = options.get("toolchain", ref or base.stable_toolchain)
                if isinstance(toolchain, float):
                    problems.append(
                        f"job '{job_id}' toolchain {toolchain!r} was read as a number; quote it"
                    )
                    continue
                channel = str(toolchain)
                components.extend(_split_components(options.get("components")))
            else:
                logger.debug("Job '{}': skipping platform step {}", job_id, uses)
            continue

        run = step.get("run")
        if run is not None:
            commands.append(str(run).strip())
            env.update(_string_env(step.get("env"), f"job '{job_id}' step {index}", problems))

    # Components the commands need even when the setup step omits them
    for tool, component in CARGO_COMPONENTS.items():
        if component not in components and any(tool in c for c in commands):
            components.append(component)

    timeout = job.get("timeout-minutes")
    if timeout is not None and (isinstance(timeout, bool) or not isinstance(timeout, int | float)):
        problems.append(f"job '{job_id}' timeout-minutes must be a number")
        timeout = None
    return CheckDefinition(
        name=job_id,
        title=str(job.get("name") or ""),
        commands=tuple(commands),
        toolchain=ToolchainSpec(channel=channel, components=tuple(components)),
        env=env,
        timeout_s=int(timeout * 60) if timeout is not None else None,
    )


def _split_components(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return [str(v).strip() for v in value if str(v).strip()]
    return [c.strip() for c in str(value).split(",") if c.strip()]


def _string_env(value: Any, where: str, problems: list[str]) -> dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        problems.append(f"{where} env must be a mapping")
        return {}
    return {str(k): _env_value(v) for k, v in value.items()}


def _env_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
