"""Public exports for archive wire models."""

from __future__ import annotations

from .wire import (
    Article,
    ErrorResponse,
    FeedItem,
    ListResponse,
    dump_feed_items,
    dump_ids,
    load_article,
    load_feed_items,
    load_ids,
)

__all__ = [
    "Article",
    "FeedItem",
    "ListResponse",
    "ErrorResponse",
    "dump_feed_items",
    "load_feed_items",
    "dump_ids",
    "load_ids",
    "load_article",
]
