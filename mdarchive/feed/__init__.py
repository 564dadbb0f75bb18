"""Feed packaging: byte-bounded bucket packing, index maintenance and RSS output."""

from .index import BucketIndexStore
from .packer import PER_BUCKET_BYTES, TOTAL_BYTES, PackResult, pack_items, truncate_item
from .rss import RSS_MIME_TYPE, assemble_feed, render_rss

__all__ = [
    "BucketIndexStore",
    "PER_BUCKET_BYTES",
    "TOTAL_BYTES",
    "PackResult",
    "pack_items",
    "truncate_item",
    "RSS_MIME_TYPE",
    "assemble_feed",
    "render_rss",
]
