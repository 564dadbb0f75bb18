"""
Byte-bounded bucket packing for feed items.

Items are packed greedily, in order, into buckets whose serialized JSON array
fits ``per_bucket_bytes``; the sum of committed bucket sizes never exceeds
``total_bytes``. Oversized items are truncated first. Nothing here raises for
size reasons: exhaustion stops packing and is reported on the result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from ..models import FeedItem, dump_feed_items
from ..sizing import byte_length, slice_utf16

LOGGER = logging.getLogger(__name__)

PER_BUCKET_BYTES = 9000
TOTAL_BYTES = 450_000
ELLIPSIS = "..."
# Room left for the ellipsis and the array brackets around a solo item.
_SAFETY_MARGIN = 10
# Worst-case bytes per content code unit.
_MAX_UNIT_BYTES = 3


def bucket_size(items: Sequence[FeedItem]) -> int:
    return byte_length(dump_feed_items(list(items)))


def truncate_item(item: FeedItem, per_bucket_bytes: int = PER_BUCKET_BYTES) -> FeedItem:
    """Shorten ``item.content`` so that ``[item]`` fits one bucket.

    Items that already fit are returned unchanged.
    """
    if bucket_size([item]) <= per_bucket_bytes:
        return item

    base = bucket_size([item.model_copy(update={"content": ""})])
    safe_units = (per_bucket_bytes - base - _SAFETY_MARGIN) // _MAX_UNIT_BYTES
    prefix = slice_utf16(item.content, max(0, safe_units))
    truncated = item.model_copy(update={"content": prefix + ELLIPSIS})

    # JSON escapes (\n, \", \u00XX) can still push the item over; keep cutting.
    size = bucket_size([truncated])
    while size > per_bucket_bytes and prefix:
        overshoot = size - per_bucket_bytes
        prefix = prefix[: len(prefix) - max(1, overshoot // 6)]
        truncated = item.model_copy(update={"content": prefix + ELLIPSIS})
        size = bucket_size([truncated])

    LOGGER.debug(
        "Truncated feed item id=%s content %d -> %d chars (%d bytes)",
        item.id,
        len(item.content),
        len(prefix),
        size,
    )
    return truncated


@dataclass
class PackResult:
    buckets: List[List[FeedItem]] = field(default_factory=list)
    sizes: List[int] = field(default_factory=list)
    total_bytes: int = 0
    dropped: int = 0
    exhausted: bool = False
    # Storage keys, filled in once the buckets are committed
    keys: List[str] = field(default_factory=list)

    @property
    def packed(self) -> int:
        return sum(len(b) for b in self.buckets)


def pack_items(
    items: Sequence[FeedItem],
    per_bucket_bytes: int = PER_BUCKET_BYTES,
    total_bytes: int = TOTAL_BYTES,
) -> PackResult:
    """Partition ``items`` into size-bounded buckets, preserving order."""
    result = PackResult()
    prepared: List[FeedItem] = []
    for item in items:
        fitted = truncate_item(item, per_bucket_bytes)
        if bucket_size([fitted]) > per_bucket_bytes:
            LOGGER.warning(
                "Dropping feed item id=%s: metadata alone exceeds %d bytes",
                item.id,
                per_bucket_bytes,
            )
            continue
        prepared.append(fitted)

    def close(bucket: List[FeedItem]) -> bool:
        size = bucket_size(bucket)
        if result.total_bytes + size > total_bytes:
            return False
        result.buckets.append(bucket)
        result.sizes.append(size)
        result.total_bytes += size
        return True

    current: List[FeedItem] = []
    for item in prepared:
        if bucket_size(current + [item]) <= per_bucket_bytes:
            current.append(item)
            continue
        if current and not close(current):
            result.exhausted = True
            current = []
            break
        if result.total_bytes + bucket_size([item]) > total_bytes:
            result.exhausted = True
            current = []
            break
        current = [item]

    if current and not close(current):
        result.exhausted = True

    result.dropped = len(items) - result.packed
    if result.exhausted:
        LOGGER.warning(
            "Feed packing stopped at %d bytes: %d of %d items dropped",
            result.total_bytes,
            result.dropped,
            len(items),
        )
    return result
