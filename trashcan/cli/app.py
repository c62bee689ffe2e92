"""Main Typer application — registers all CLI commands.

Entry point: ``trashcan`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from trashcan.cli.commands.config_cmd import config_cmd
from trashcan.cli.commands.log_test import log_test_cmd
from trashcan.cli.commands.notify_test import notify_test_cmd
from trashcan.config import FunnelSettings

app = typer.Typer(
    name="trashcan",
    help="trashcan: one funnel for every error in a Python process.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def _configure_logging(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
) -> None:
    level = "DEBUG" if verbose else FunnelSettings().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


# Register subcommands
app.command(name="config", help="Show resolved funnel and mail settings.")(config_cmd)
app.command(name="log-test", help="Funnel a test error into a log file.")(log_test_cmd)
app.command(name="notify-test", help="Send a test error notification email.")(notify_test_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
