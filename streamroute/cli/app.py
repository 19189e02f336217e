"""Main Typer application — imports and registers all CLI commands.

Entry point: ``streamroute`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import typer

from streamroute.cli.commands.config_cmd import config_cmd
from streamroute.cli.commands.deliver_cmd import deliver_cmd
from streamroute.cli.commands.route_cmd import route_cmd
from streamroute.logging_setup import configure_logging

app = typer.Typer(
    name="streamroute",
    help="streamroute: route stream records to delivery streams.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level."),
) -> None:
    configure_logging(log_level)


# Register subcommands
app.command(name="route", help="Show the destination of each record without delivering.")(route_cmd)
app.command(name="deliver", help="Route and deliver records to local files.")(deliver_cmd)
app.command(name="config", help="Show the effective environment configuration.")(config_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
