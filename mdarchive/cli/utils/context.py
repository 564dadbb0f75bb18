"""Service construction for the mdarchive CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from mdarchive.config import ArchiveConfig
from mdarchive.service import ArchiveService
from mdarchive.sources import GoogleDocsSource, LocalDocumentSource
from mdarchive.storage import JsonFileCache, JsonFilePropertyStore

console = Console()

TOKEN_ENV = "MDARCHIVE_GOOGLE_TOKEN"


@dataclass
class CliOptions:
    docs_dir: Optional[str] = None
    state_dir: Optional[str] = None
    folder_id: Optional[str] = None


def build_service(options: Optional[CliOptions] = None) -> ArchiveService:
    """Build an ArchiveService from CLI options and MDARCHIVE_* environment variables."""
    options = options or CliOptions()
    config = ArchiveConfig.from_env(
        state_dir=options.state_dir, folder_id=options.folder_id
    )

    if options.docs_dir:
        source = LocalDocumentSource(options.docs_dir, default_folder=config.folder_id)
    else:
        token = os.getenv(TOKEN_ENV, "").strip()
        if not token:
            console.print(
                f"[bold red]Error:[/bold red] pass --docs-dir or set {TOKEN_ENV}"
            )
            raise typer.Exit(1)
        source = GoogleDocsSource(token)

    state = Path(config.state_path)
    state.mkdir(parents=True, exist_ok=True)
    cache = JsonFileCache(
        max_value_bytes=config.cache_size_limit, path=state / "cache.json"
    )
    properties = JsonFilePropertyStore(
        max_value_bytes=config.property_size_limit, path=state / "properties.json"
    )
    return ArchiveService(source, source, cache, properties, config=config)


def get_service(ctx: typer.Context) -> ArchiveService:
    options = ctx.obj if isinstance(ctx.obj, CliOptions) else None
    return build_service(options)
