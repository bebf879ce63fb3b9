import asyncio
from pathlib import Path
from uuid import UUID

import typer
from rich.console import Console
from rich.table import Table

from mergegate.application.dto.run_report import RunReport
from mergegate.cli.formatters.outcome_formatter import format_outcome
from mergegate.cli.theme import theme
from mergegate.infrastructure.git.repo_root import get_default_state_dir
from mergegate.infrastructure.persistence.json_run_store import JsonRunStore

console = Console()


async def resolve_run_id(run_id_str: str, store: JsonRunStore) -> UUID | None:
    """Resolve a run ID string to a full UUID.

    Supports both full UUIDs and short prefixes (minimum 4 characters).
    Returns None if not found or ambiguous.
    """
    try:
        return UUID(run_id_str)
    except ValueError:
        pass

    run_id_str = run_id_str.lower().replace("-", "")
    if len(run_id_str) < 4:
        console.print(f"[{theme.ERROR}]Run ID prefix must be at least 4 characters[/]")
        return None

    run_ids = await store.list_runs()
    matches = [rid for rid in run_ids if rid.hex.startswith(run_id_str)]

    if not matches:
        console.print(f"[{theme.ERROR}]No run found with prefix: {run_id_str}[/]")
        return None
    if len(matches) > 1:
        console.print(
            f"[{theme.ERROR}]Ambiguous prefix '{run_id_str}' matches {len(matches)} runs:[/]"
        )
        for m in matches[:5]:
            console.print(f"  [{theme.DIM}]{m}[/]")
        return None
    return matches[0]


def list_runs(
    state_dir: Path | None = typer.Option(None, "--state-dir", help="State directory"),
) -> None:
    """List recorded gate runs, oldest first."""
    asyncio.run(_list_runs(state_dir))


async def _list_runs(state_dir: Path | None) -> None:
    if state_dir is None:
        state_dir = await get_default_state_dir()

    store = JsonRunStore(state_dir)
    run_ids = await store.list_runs()

    if not run_ids:
        console.print(f"[{theme.DIM}]No runs found[/]")
        return

    table = Table(title="Runs")
    table.add_column("ID", style=theme.INFO)
    table.add_column("Event")
    table.add_column("Created", style=theme.DIM)
    table.add_column("Status")
    table.add_column("Summary")

    for rid in run_ids:
        outcome = await store.load(rid)
        if outcome:
            table.add_row(
                rid.hex[:8],
                outcome.event.describe(),
                outcome.created_at.strftime("%Y-%m-%d %H:%M:%S"),
                outcome.status.value,
                outcome.rejection_summary(),
            )

    console.print(table)


def show_run(
    run_id: str = typer.Argument(..., help="Run ID (full or short prefix)"),
    state_dir: Path | None = typer.Option(None, "--state-dir", help="State directory"),
    json_output: bool = typer.Option(False, "--json", help="Print the report as JSON"),
    show_output: bool = typer.Option(False, "--show-output", help="Show output of rejected checks"),
) -> None:
    """Show the outcome of a recorded run."""
    asyncio.run(_show_run(run_id, state_dir, json_output, show_output))


async def _show_run(
    run_id_str: str, state_dir: Path | None, json_output: bool, show_output: bool
) -> None:
    if state_dir is None:
        state_dir = await get_default_state_dir()

    store = JsonRunStore(state_dir)
    run_id = await resolve_run_id(run_id_str, store)
    if run_id is None:
        raise typer.Exit(1)

    outcome = await store.load(run_id)
    if not outcome:
        console.print(f"[{theme.ERROR_BOLD}]Run not found:[/] {run_id}")
        raise typer.Exit(1)

    if json_output:
        typer.echo(RunReport.from_outcome(outcome).model_dump_json(indent=2))
    else:
        format_outcome(console, outcome, show_output=show_output)
