"""``streamroute deliver`` — route records and deliver them to local files.

Runs the full routing and delivery path against a ``LocalFileChannel``,
writing ``{out}/{destination}.log`` per destination.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from streamroute.cli.commands.route_cmd import (
    ADD_OPT,
    DEFAULT_OPT,
    FIXED_OPT,
    LABEL_OPT,
    SOURCE_ARG,
    STRIP_OPT,
    SUBS_OPT,
    build_routing_config,
    read_records,
)
from streamroute.delivery.batcher import MAX_RECORDS_PER_BATCH
from streamroute.delivery.channels.local_file import LocalFileChannel
from streamroute.delivery.executor import DeliveryExecutor, RetryExhaustedError
from streamroute.delivery.retry import RetryPolicy
from streamroute.models.delivery import DispatchReport
from streamroute.routing.router import Router

console = Console()


def _print_report(report: DispatchReport) -> None:
    table = Table(title="Delivery Report")
    table.add_column("Destination", style="cyan")
    table.add_column("Routed To")
    table.add_column("Records", justify="right")
    table.add_column("Attempts", justify="right")
    table.add_column("Status", justify="center")

    for r in report.reports:
        status = {
            "delivered": "[green]delivered[/green]",
            "skipped_empty": "[dim]skipped[/dim]",
            "fatal": "[red]fatal[/red]",
        }[r.status.value]
        table.add_row(
            r.original_destination, r.destination, str(r.record_count), str(r.attempts), status
        )
    console.print(table)


def deliver_cmd(
    source: typer.FileText = SOURCE_ARG,
    out: Path = typer.Option(Path(".streamroute/out"), "--out", "-o", help="Output directory."),
    label: str = LABEL_OPT,
    default: str = DEFAULT_OPT,
    fixed: str = FIXED_OPT,
    strip_prefix: str = STRIP_OPT,
    add_prefix: str = ADD_OPT,
    substitutions: str = SUBS_OPT,
    known: list[str] = typer.Option(
        None, "--known", "-k",
        help="Existing destinations; others are treated as missing. Repeatable.",
    ),
    max_per_batch: int = typer.Option(MAX_RECORDS_PER_BATCH, "--max-per-batch", min=1),
    max_retries: int = typer.Option(5, "--max-retries", min=0),
    retry_interval: float = typer.Option(0.5, "--retry-interval", min=0.0, help="Seconds."),
) -> None:
    """Route records and deliver them to per-destination files."""
    config = build_routing_config(label, default, fixed, strip_prefix, add_prefix, substitutions)
    destination_map = Router(config).route(read_records(source))

    known_destinations = None
    if known:
        known_destinations = set(known) | {config.default_destination}
    channel = LocalFileChannel(out, known_destinations=known_destinations)
    executor = DeliveryExecutor(
        channel,
        default_destination=config.default_destination,
        policy=RetryPolicy(max_retries=max_retries, retry_interval=retry_interval),
        max_per_batch=max_per_batch,
    )

    try:
        report = executor.dispatch(destination_map)
    except RetryExhaustedError as exc:
        _print_report(exc.report)
        console.print(f"[red]Delivery failed:[/red] {exc}")
        raise typer.Exit(code=1)

    _print_report(report)
    console.print(f"[bold green]Delivered[/bold green] to {out}")
