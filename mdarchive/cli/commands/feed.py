"""Feed commands for the mdarchive CLI."""

import typer
from rich.console import Console
from rich.table import Table

from ..utils.context import get_service

app = typer.Typer(help="Feed commands")
console = Console()


@app.command("pack")
def pack_feed(ctx: typer.Context):
    """Repack cached articles into feed buckets."""
    service = get_service(ctx)
    result = service.repack_feed()
    if result is None:
        console.print(
            "[yellow]Warning:[/yellow] nothing packed (is the cache warm? see `mdarchive logs`)"
        )
        raise typer.Exit(1)

    table = Table("Key", "Items", "Bytes")
    for key, bucket, size in zip(result.keys, result.buckets, result.sizes):
        table.add_row(key, str(len(bucket)), str(size))
    console.print(table)
    console.print(
        f"Packed [bold]{result.packed}[/bold] items, {result.total_bytes} bytes"
        + (f", dropped {result.dropped}" if result.dropped else "")
    )


@app.command("show")
def show_feed(ctx: typer.Context):
    """Print the RSS document assembled from the live buckets."""
    service = get_service(ctx)
    typer.echo(service.feed_xml())
