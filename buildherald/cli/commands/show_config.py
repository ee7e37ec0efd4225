"""``buildherald config``: show the effective notifier configuration."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from buildherald.config import NotifierConfig

console = Console()


def config_cmd() -> None:
    """Print the configuration resolved from the environment and ``.env``."""
    config = NotifierConfig()

    table = Table(title="buildherald configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    token = "[green]set[/green]" if config.access_token else "[yellow]not set[/yellow]"
    table.add_row("endpoint", config.endpoint or "[yellow]not set[/yellow]")
    table.add_row("access_token", token)
    table.add_row("request_timeout_seconds", str(config.request_timeout_seconds))
    table.add_row("version", config.resolve_version() or "[dim]none[/dim]")
    table.add_row("version_parameter", config.version_parameter or "[dim]none[/dim]")
    table.add_row("enable_authorized_actions", str(config.enable_authorized_actions))
    table.add_row("debug", str(config.debug))
    table.add_row("log_level", config.log_level)
    console.print(table)

    if not config.can_deliver and not config.debug:
        console.print("[dim]Delivery is disabled until both endpoint and access token are set.[/dim]")
