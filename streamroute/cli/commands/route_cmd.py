"""``streamroute route`` — show where records would be delivered.

Reads newline-delimited records and prints the destination buckets
without delivering anything.
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from streamroute.models.routing import RoutingConfig
from streamroute.routing.resolver import parse_substitution_rules
from streamroute.routing.router import Router

console = Console()

SOURCE_ARG = typer.Argument("-", help="Records file, one record per line ('-' for stdin).")
LABEL_OPT = typer.Option("", "--label", "-l", help="Label whose value selects the destination.")
DEFAULT_OPT = typer.Option("", "--default", "-d", help="Destination for records without the label.")
FIXED_OPT = typer.Option("", "--fixed", help="Send every record to this destination.")
STRIP_OPT = typer.Option("", "--strip-prefix", help="Prefix removed from label values.")
ADD_OPT = typer.Option("", "--add-prefix", help="Prefix added to destination names.")
SUBS_OPT = typer.Option("", "--substitutions", "-s", help="Rewrite rules, e.g. '-prod/,-stg/-staging'.")


def read_records(source: typer.FileText) -> list[str]:
    return [line.rstrip("\r\n") for line in source]


def build_routing_config(
    label: str, default: str, fixed: str, strip_prefix: str, add_prefix: str, substitutions: str
) -> RoutingConfig:
    return RoutingConfig(
        fixed_destination=fixed,
        routing_label=label,
        default_destination=default,
        strip_prefix=strip_prefix,
        add_prefix=add_prefix,
        substitutions=parse_substitution_rules(substitutions),
    )


def route_cmd(
    source: typer.FileText = SOURCE_ARG,
    label: str = LABEL_OPT,
    default: str = DEFAULT_OPT,
    fixed: str = FIXED_OPT,
    strip_prefix: str = STRIP_OPT,
    add_prefix: str = ADD_OPT,
    substitutions: str = SUBS_OPT,
) -> None:
    """Route records and print the record count per destination."""
    config = build_routing_config(label, default, fixed, strip_prefix, add_prefix, substitutions)
    destination_map = Router(config).route(read_records(source))

    if not destination_map:
        console.print("[dim]No records to route.[/dim]")
        return

    table = Table(title="Routing Plan")
    table.add_column("Destination", style="cyan")
    table.add_column("Records", justify="right", style="green")
    for destination, records in destination_map.items():
        table.add_row(destination or "[dim](empty)[/dim]", str(len(records)))
    console.print(table)
