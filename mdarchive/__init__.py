"""Markdown document archive with byte-bounded feed packaging."""

from .config import ArchiveConfig
from .models import Article, FeedItem
from .rendering import DocumentRenderer, render_document
from .service import ArchiveService, DocumentNotFoundError, Response

__all__ = [
    "ArchiveConfig",
    "ArchiveService",
    "Article",
    "DocumentNotFoundError",
    "DocumentRenderer",
    "FeedItem",
    "Response",
    "render_document",
]
