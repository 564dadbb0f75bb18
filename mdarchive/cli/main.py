#!/usr/bin/env python
"""Command line interface for mdarchive."""

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from mdarchive.cli.commands import cache, docs, feed
from mdarchive.cli.utils.context import CliOptions, get_service

app = typer.Typer(help="Markdown document archive")
console = Console()

# Add command groups
app.add_typer(docs.app, name="docs")
app.add_typer(cache.app, name="cache")
app.add_typer(feed.app, name="feed")


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.WARNING,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                rich_tracebacks=True,
                show_time=True,
                log_time_format="%H:%M:%S",
            )
        ],
    )
    if verbose:
        logging.getLogger("mdarchive").setLevel(logging.DEBUG)


@app.callback()
def callback(
    ctx: typer.Context,
    docs_dir: Optional[str] = typer.Option(
        None, "--docs-dir", help="Read documents from a local directory of Docs JSON"
    ),
    state_dir: Optional[str] = typer.Option(
        None, "--state-dir", help="Directory for the cache and property files"
    ),
    folder_id: Optional[str] = typer.Option(
        None, "--folder-id", help="Managed folder id (default: MDARCHIVE_FOLDER_ID)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logs"),
):
    """Render documents to Markdown, cache them and package them as a feed."""
    _setup_logging(verbose)
    ctx.obj = CliOptions(docs_dir=docs_dir, state_dir=state_dir, folder_id=folder_id)


@app.command("request")
def request(
    ctx: typer.Context,
    doc_id: Optional[str] = typer.Option(None, "--id", help="Document id"),
    output: Optional[str] = typer.Option(None, "--o", help="Output mode (rss)"),
):
    """Answer a request the way the web endpoint would."""
    service = get_service(ctx)
    params = {k: v for k, v in (("id", doc_id), ("o", output)) if v}
    response = service.handle_request(params)
    typer.echo(response.body)


@app.command("logs")
def show_logs(ctx: typer.Context):
    """Print the persisted job log."""
    service = get_service(ctx)
    text = service.read_logs()
    if not text:
        console.print("No logs")
        return
    typer.echo(text, nl=False)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
