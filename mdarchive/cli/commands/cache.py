"""Cache commands for the mdarchive CLI."""

import typer
from rich.console import Console

from ..utils.context import get_service

app = typer.Typer(help="Cache commands")
console = Console()


@app.command("warm")
def warm_cache(ctx: typer.Context):
    """Cache the document list and the first batch of rendered articles."""
    service = get_service(ctx)
    saved = service.precache_all()
    console.print(f"Cached [bold]{saved}[/bold] articles")


@app.command("clear")
def clear_cache(ctx: typer.Context):
    """Remove the document list and every listed article from the cache."""
    service = get_service(ctx)
    service.clear_cache_all()
    console.print("Cache cleared")
