"""
JSON wire models for the archive.

Serialization is compact (no whitespace, non-ASCII unescaped) and keeps the
declared field order, so payload sizes are stable across runs.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from ._base import WireModel


class Article(WireModel):
    """A rendered document."""

    id: str
    title: str
    markdown: str


class FeedItem(WireModel):
    """Feed form of an Article; ``content`` may be a truncated prefix."""

    id: str
    title: str
    url: str
    content: str


class ListResponse(WireModel):
    ids: List[str]
    article_cache: List[Article]


class ErrorResponse(WireModel):
    error: str


_FEED_ITEMS = TypeAdapter(List[FeedItem])
_IDS = TypeAdapter(List[str])


def dump_feed_items(items: List[FeedItem]) -> str:
    return _FEED_ITEMS.dump_json(items).decode("utf-8")


def load_feed_items(payload: str) -> List[FeedItem]:
    return _FEED_ITEMS.validate_json(payload)


def dump_ids(ids: List[str]) -> str:
    return _IDS.dump_json(ids).decode("utf-8")


def load_ids(payload: Optional[str]) -> Optional[List[str]]:
    """Parse a JSON list of strings; None for missing or malformed payloads."""
    if not payload:
        return None
    try:
        return _IDS.validate_json(payload)
    except ValidationError:
        return None


def load_article(payload: Optional[str]) -> Optional[Article]:
    if not payload:
        return None
    try:
        return Article.model_validate_json(payload)
    except ValidationError:
        return None
