"""``trashcan config`` — show the resolved funnel and mail settings."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from trashcan.config import FunnelSettings, load_mail_config

console = Console()


def config_cmd(
    namespace: str = typer.Option(
        None, help="Mail namespace to resolve (defaults to TRASHCAN_MAIL_NAMESPACE)."
    ),
) -> None:
    """Print the effective configuration, with the mail password masked."""
    settings = FunnelSettings()
    mail = load_mail_config(namespace or settings.mail_namespace)

    table = Table(title="trashcan configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("title", settings.title or "[dim](error text)[/dim]")
    table.add_row("log_level", settings.log_level)
    table.add_row("log_path", str(settings.log_path) if settings.log_path else "[dim]-[/dim]")
    table.add_row("notify", ", ".join(settings.notify) or "[dim]-[/dim]")
    table.add_row("mail.host", f"{mail.host}:{mail.effective_port}")
    table.add_row("mail.secure", "yes" if mail.secure else "no")
    table.add_row("mail.starttls", "yes" if mail.starttls else "no")
    table.add_row("mail.auth.user", mail.auth.user or "[yellow]not set[/yellow]")
    table.add_row("mail.auth.password", "********" if mail.auth.password else "[dim]-[/dim]")

    console.print(table)
