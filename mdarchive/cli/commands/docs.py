"""Document commands for the mdarchive CLI."""

import typer
from rich.console import Console
from rich.table import Table

from mdarchive.service import DocumentNotFoundError

from ..utils.context import get_service

app = typer.Typer(help="Document commands")
console = Console()


@app.command("list")
def list_documents(ctx: typer.Context):
    """List documents in the managed folder (newest name first)."""
    service = get_service(ctx)

    try:
        refs = service.listing.list_documents(service.config.folder_id)

        if not refs:
            console.print("No documents found")
            return

        table = Table("ID", "Name")
        for ref in refs:
            table.add_row(ref.id, ref.name)

        console.print(table)
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        raise typer.Exit(1)


@app.command("get")
def get_document(
    ctx: typer.Context,
    doc_id: str,
    as_json: bool = typer.Option(False, "--json", help="Print the JSON payload"),
):
    """Render a document to Markdown."""
    service = get_service(ctx)

    try:
        article = service.get_article(doc_id)
    except DocumentNotFoundError:
        console.print(f"[bold red]Error:[/bold red] Document not found: {doc_id}")
        raise typer.Exit(1)

    if as_json:
        typer.echo(article.model_dump_json())
        return
    console.rule(article.title or doc_id)
    typer.echo(article.markdown, nl=False)
