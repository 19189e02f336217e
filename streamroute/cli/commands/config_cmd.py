"""``streamroute config`` — print the effective environment configuration."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from streamroute.config import RelayConfig

console = Console()


def config_cmd() -> None:
    """Show the configuration the handler would load from the environment."""
    config = RelayConfig()

    table = Table(title="streamroute configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    for name, value in config.model_dump().items():
        table.add_row(name, "[dim](unset)[/dim]" if value in ("", None) else str(value))

    rules = config.routing_config().substitutions
    table.add_row(
        "parsed substitutions",
        ", ".join(f"{r.match!r} -> {r.replacement!r}" for r in rules) or "[dim](none)[/dim]",
    )
    console.print(table)
