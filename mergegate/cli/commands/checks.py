from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console

from mergegate.cli.formatters.outcome_formatter import format_registry
from mergegate.cli.theme import theme
from mergegate.cli.utils import load_gate_setup
from mergegate.domain.entities.check_registry import ConfigurationError

console = Console()


def list_checks(
    workflow: Path | None = typer.Option(None, "--workflow", "-w", help="Workflow YAML file"),
    trunk: str | None = typer.Option(None, "--trunk", help="Override the trunk branch"),
    msrv: str | None = typer.Option(None, "--msrv", help="Override the MSRV toolchain"),
) -> None:
    """List registered checks and report configuration problems."""
    try:
        setup = load_gate_setup(workflow, trunk, msrv)
    except ConfigurationError as e:
        console.print(f"[{theme.ERROR_BOLD}]Configuration error:[/]")
        for problem in e.problems:
            console.print(f"  [{theme.ERROR}]•[/] {problem}")
        raise typer.Exit(2) from None
    except ValidationError as e:
        console.print(f"[{theme.ERROR_BOLD}]Invalid option:[/] {e.errors()[0].get('msg')}")
        raise typer.Exit(2) from None

    console.print(f"Trunk branch: [{theme.INFO}]{setup.config.trunk_branch}[/]")
    format_registry(console, setup.registry)

    problems = setup.registry.validate()
    if problems:
        console.print(f"\n[{theme.ERROR_BOLD}]Configuration problems:[/]")
        for problem in problems:
            console.print(f"  [{theme.ERROR}]•[/] {problem}")
        raise typer.Exit(2)
    console.print(f"[{theme.SUCCESS}]Configuration is valid.[/]")
