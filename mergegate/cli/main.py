import sys
from pathlib import Path

import typer
from loguru import logger

from mergegate.cli.commands import checks, evaluate, runs
from mergegate.infrastructure.git.repo_root import STATE_DIR_NAME


def setup_logging(verbose: bool = False, log_file: Path | None = None) -> None:
    """Configure loguru logging."""
    logger.remove()

    file_path = log_file or Path(STATE_DIR_NAME) / "mergegate.log"
    logger.add(
        file_path,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
        level="DEBUG",
        rotation="10 MB",
        encoding="utf-8",
    )

    if verbose:
        logger.add(
            sys.stderr,
            format="{time:HH:mm:ss} | {level: <8} | {message}",
            level="DEBUG",
        )


app = typer.Typer(
    name="mergegate",
    help="mergegate - build-verification gate for trunk changes",
    no_args_is_help=True,
)

app.command(name="evaluate")(evaluate.evaluate_event)
app.command(name="checks")(checks.list_checks)

runs_app = typer.Typer(help="Run history commands")
runs_app.command(name="list")(runs.list_runs)
runs_app.command(name="show")(runs.show_run)
app.add_typer(runs_app, name="runs")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output", is_eager=True),
    log_file: Path | None = typer.Option(None, "--log-file", help="Log file path"),
) -> None:
    """mergegate - build-verification gate for trunk changes."""
    setup_logging(verbose=verbose, log_file=log_file)


if __name__ == "__main__":
    app()
