from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from mergegate.application.dto.run_report import describe_result
from mergegate.cli.theme import theme
from mergegate.domain.entities.check_registry import CheckRegistry
from mergegate.domain.entities.check_result import CheckResult
from mergegate.domain.entities.run_outcome import RunOutcome
from mergegate.domain.value_objects import CheckStatus

STATUS_STYLES = {
    CheckStatus.PENDING: theme.CHECK_PENDING,
    CheckStatus.RUNNING: theme.CHECK_RUNNING,
    CheckStatus.PASSED: theme.CHECK_PASSED,
    CheckStatus.FAILED: theme.CHECK_FAILED,
    CheckStatus.ERRORED: theme.CHECK_ERRORED,
}


def format_status(status: CheckStatus) -> str:
    return f"[{STATUS_STYLES[status]}]{status.value.upper()}[/]"


def format_check_update(console: Console, result: CheckResult) -> None:
    """One line per state change while a run is in flight."""
    line = f"  {format_status(result.status)} [{theme.INFO}]{result.check_name}[/]"
    if result.is_final and result.status != CheckStatus.PASSED:
        line += f" [{theme.DIM}]{describe_result(result)}[/]"
    console.print(line)


def format_outcome(console: Console, outcome: RunOutcome, show_output: bool = False) -> None:
    table = Table(title=f"Run {outcome.id.hex[:8]} - {outcome.event.describe()}")
    table.add_column("Check", style=theme.INFO)
    table.add_column("Status")
    table.add_column("Duration", justify="right", style=theme.TABLE_SECONDARY)
    table.add_column("Detail")

    for name, result in outcome.results.items():
        duration = result.duration_ms
        table.add_row(
            name,
            format_status(result.status),
            f"{duration}ms" if duration is not None else "-",
            describe_result(result) if result.status != CheckStatus.PASSED else "",
        )
    console.print(table)

    if show_output:
        for name in outcome.rejected_checks:
            tail = outcome.results[name].output_tail
            if tail:
                console.print(
                    Panel(tail, title=f"{name} output", border_style=theme.BORDER_WARNING)
                )

    if outcome.accepted:
        console.print(
            Panel(
                "[bold]All checks passed.[/] The change may be merged.",
                title="Accepted",
                border_style=theme.BORDER_SUCCESS,
            )
        )
        return

    lines: list[str] = []
    if outcome.failing_checks:
        lines.append(f"Failed checks: [{theme.ERROR_BOLD}]{', '.join(outcome.failing_checks)}[/]")
    if outcome.errored_checks:
        lines.append(
            f"Errored checks: [{theme.CHECK_ERRORED}]{', '.join(outcome.errored_checks)}[/]"
        )
        lines.append(
            f"[{theme.DIM}]Errored checks point at infrastructure trouble "
            "(checkout, toolchain, timeout, cancellation), not at the change itself.[/]"
        )
    console.print(Panel("\n".join(lines), title="Rejected", border_style=theme.BORDER_ERROR))


def format_registry(console: Console, registry: CheckRegistry) -> None:
    table = Table(title="Registered checks")
    table.add_column("Name", style=theme.INFO)
    table.add_column("Title")
    table.add_column("Toolchain")
    table.add_column("Commands", style=theme.TABLE_SECONDARY)

    for definition in registry:
        table.add_row(
            definition.name,
            definition.display_name,
            str(definition.toolchain),
            "\n".join(definition.commands),
        )
    console.print(table)
