"""``trashcan log-test`` — start a log file and funnel one test error into it."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from trashcan.funnel import Funnel

console = Console()


def log_test_cmd(
    path: Path = typer.Argument(..., help="Log file to create (truncated if it exists)."),
    message: str = typer.Option("trashcan test error", help="Error text to raise."),
) -> None:
    """Raise a test error through a file sink and show the resulting log."""
    funnel = Funnel()
    sink = funnel.log(path)
    funnel.on("error", sink)
    funnel.raise_(RuntimeError(message))

    if not sink.flush(timeout=10):
        console.print(f"[red]Timed out writing to {path}[/red]")
        raise typer.Exit(code=1)
    sink.close()

    console.print(Panel(path.read_text(encoding="utf-8"), title=str(path)))
