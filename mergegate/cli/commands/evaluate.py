import asyncio
import json
from pathlib import Path

import typer
from loguru import logger
from pydantic import ValidationError
from rich.console import Console

from mergegate.application.dto.run_report import RunReport
from mergegate.application.gate_evaluator import GateEvaluator
from mergegate.cli.formatters.outcome_formatter import format_check_update, format_outcome
from mergegate.cli.theme import theme
from mergegate.cli.utils import load_gate_setup, parse_event_kind
from mergegate.domain.entities.check_registry import CheckRegistry, ConfigurationError
from mergegate.domain.entities.trigger_event import TriggerEvent
from mergegate.domain.value_objects import EventKind, GateConfig
from mergegate.infrastructure.checks.command_check_runner import CommandCheckRunner
from mergegate.infrastructure.environment.git_workspace import GitWorkspaceProvisioner
from mergegate.infrastructure.git.repo_root import get_default_state_dir, resolve_commit
from mergegate.infrastructure.persistence.json_run_store import JsonRunStore

console = Console()

EXIT_ACCEPTED = 0
EXIT_REJECTED = 1
EXIT_CONFIG_ERROR = 2


def evaluate_event(
    branch: str = typer.Option(..., "--branch", "-b", help="Branch the event targets"),
    event: str = typer.Option("push", "--event", "-e", help="Event kind: push, pull_request"),
    commit: str | None = typer.Option(None, "--commit", "-c", help="Commit to check out"),
    pull_request: int | None = typer.Option(None, "--pr", help="Pull request number"),
    repo: Path = typer.Option(Path("."), "--repo", "-r", help="Repository to check out"),
    workflow: Path | None = typer.Option(None, "--workflow", "-w", help="Workflow YAML file"),
    trunk: str | None = typer.Option(None, "--trunk", help="Override the trunk branch"),
    msrv: str | None = typer.Option(None, "--msrv", help="Override the MSRV toolchain"),
    timeout: float | None = typer.Option(None, "--timeout", "-t", help="Per-check timeout in minutes"),
    provision_attempts: int | None = typer.Option(
        None, "--provision-attempts", help="Attempts for checkout and toolchain install"
    ),
    state_dir: Path | None = typer.Option(None, "--state-dir", help="State directory"),
    json_output: bool = typer.Option(False, "--json", help="Print the report as JSON"),
    show_output: bool = typer.Option(False, "--show-output", help="Show output of rejected checks"),
    save: bool = typer.Option(True, "--save/--no-save", help="Record the run in history"),
) -> None:
    """Evaluate the gate for a push or pull-request event."""
    kind = parse_event_kind(event)
    if kind == EventKind.PULL_REQUEST and commit is None:
        raise typer.BadParameter("--commit is required for pull_request events")

    try:
        setup = load_gate_setup(workflow, trunk, msrv, timeout, provision_attempts)
    except ConfigurationError as e:
        _print_config_error(e)
        raise typer.Exit(EXIT_CONFIG_ERROR) from None
    except ValidationError as e:
        for error in e.errors():
            typer.echo(f"Error: {error.get('msg', str(error))}", err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR) from None

    exit_code = asyncio.run(
        _evaluate(
            setup.config,
            setup.registry,
            kind=kind,
            branch=branch,
            commit=commit,
            pull_request=pull_request,
            repo=repo,
            state_dir=state_dir,
            json_output=json_output,
            show_output=show_output,
            save=save,
        )
    )
    raise typer.Exit(exit_code)


async def _evaluate(
    config: GateConfig,
    registry: CheckRegistry,
    kind: EventKind,
    branch: str,
    commit: str | None,
    pull_request: int | None,
    repo: Path,
    state_dir: Path | None,
    json_output: bool,
    show_output: bool,
    save: bool,
) -> int:
    repo = repo.resolve()
    if state_dir is None:
        state_dir = await get_default_state_dir(repo)

    # Pin pushes to the branch tip so every check sees the same commit
    if commit is None and kind == EventKind.PUSH:
        commit = await resolve_commit(repo, branch)

    trigger = TriggerEvent(kind=kind, branch=branch, commit=commit, pull_request=pull_request)
    evaluator = GateEvaluator(
        config=config,
        registry=registry,
        check_runner=CommandCheckRunner(output_tail_chars=config.output_tail_chars),
        environment=GitWorkspaceProvisioner(
            repo,
            work_root=state_dir / "workspaces",
            attempts=config.provision_attempts,
        ),
        run_store=JsonRunStore(state_dir) if save else None,
    )

    if not json_output:
        console.print(f"[{theme.HEADER}]Evaluating gate for {trigger.describe()}[/]")

    try:
        outcome = await evaluator.evaluate(
            trigger,
            on_result=None if json_output else lambda r: format_check_update(console, r),
        )
    except ConfigurationError as e:
        _print_config_error(e)
        return EXIT_CONFIG_ERROR

    if outcome is None:
        message = f"Branch '{trigger.target_branch}' is not the trunk ('{config.trunk_branch}')"
        if json_output:
            typer.echo(json.dumps({"run": None, "reason": message}))
        else:
            console.print(f"[{theme.DIM}]{message}; no checks were run.[/]")
        return EXIT_ACCEPTED

    logger.debug("Run {} finished with status {}", outcome.id, outcome.status.value)
    if json_output:
        typer.echo(RunReport.from_outcome(outcome).model_dump_json(indent=2))
    else:
        format_outcome(console, outcome, show_output=show_output)
    return EXIT_ACCEPTED if outcome.accepted else EXIT_REJECTED


def _print_config_error(error: ConfigurationError) -> None:
    err_console = Console(stderr=True)
    err_console.print(f"\n[{theme.ERROR_BOLD}]Configuration error[/] - no checks were run:")
    for problem in error.problems:
        err_console.print(f"  [{theme.ERROR}]•[/] {problem}")
