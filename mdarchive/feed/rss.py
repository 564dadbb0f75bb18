"""
RSS 2.0 assembly for packed feed buckets.
"""

from __future__ import annotations

import html
import logging
from typing import Iterable, List, Optional

from ..config import ArchiveConfig
from ..models import FeedItem
from ..storage import PropertyStore
from .index import BucketIndexStore

LOGGER = logging.getLogger(__name__)

RSS_MIME_TYPE = "application/rss+xml"


def _esc(value: Optional[str]) -> str:
    # & < > " ' are all escaped; ' becomes &#x27;
    return html.escape(value or "", quote=True)


def render_item(item: FeedItem) -> str:
    return (
        "<item>"
        f"<title>{_esc(item.title)}</title>"
        f"<link>{_esc(item.url)}</link>"
        f"<description>{_esc(item.content)}</description>"
        f'<guid isPermaLink="false">{_esc(item.id)}</guid>'
        "</item>"
    )


def render_rss(items: Iterable[FeedItem], config: Optional[ArchiveConfig] = None) -> str:
    cfg = config or ArchiveConfig()
    parts: List[str] = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<rss version="2.0"><channel>',
        f"<title>{_esc(cfg.feed_title)}</title>",
        f"<link>{_esc(cfg.feed_link)}</link>",
        f"<description>{_esc(cfg.feed_description)}</description>",
    ]
    parts.extend(render_item(i) for i in items)
    parts.append("</channel></rss>")
    return "\n".join(parts)


def assemble_feed(properties: PropertyStore, config: Optional[ArchiveConfig] = None) -> str:
    """Read every live bucket and render the feed. Never raises for storage errors."""
    cfg = config or ArchiveConfig()
    items = BucketIndexStore(properties, cfg).load_items()
    LOGGER.debug("Assembling feed with %d items", len(items))
    return render_rss(items, cfg)
