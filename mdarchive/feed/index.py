"""
Bucket index maintenance over a durable PropertyStore.

The index (a JSON list of bucket keys) is the only record of which buckets
are live. A commit deletes the keys of the immediately previous index, writes
the new buckets under position-derived keys, then writes the new index.
Older generations are not tracked.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from pydantic import ValidationError

from ..config import ArchiveConfig
from ..models import FeedItem, dump_feed_items, dump_ids, load_feed_items, load_ids
from ..storage import PropertyStore, StorageError

LOGGER = logging.getLogger(__name__)


class BucketIndexStore:
    def __init__(self, properties: PropertyStore, config: Optional[ArchiveConfig] = None):
        self._props = properties
        self.config = config or ArchiveConfig()

    @property
    def index_key(self) -> str:
        return self.config.index_key

    def read_index(self) -> List[str]:
        """Return the live bucket keys; empty when the index is missing or unreadable."""
        try:
            raw = self._props.get_property(self.index_key)
        except Exception as exc:
            LOGGER.error("Failed to read bucket index %s: %s", self.index_key, exc)
            return []
        keys = load_ids(raw)
        if keys is None:
            if raw:
                LOGGER.warning("Ignoring malformed bucket index %s", self.index_key)
            return []
        return keys

    def _cleanup(self, old_keys: Sequence[str]) -> None:
        for key in old_keys:
            if key == self.index_key:
                continue
            try:
                self._props.delete_property(key)
            except Exception as exc:
                LOGGER.error("Failed to delete stale bucket %s: %s", key, exc)

    def commit(self, buckets: Sequence[Sequence[FeedItem]]) -> List[str]:
        """Replace the previous generation with ``buckets``; return the new keys.

        A bucket whose write fails is left out of the new index.
        """
        previous = self.read_index()
        self._cleanup(previous)
        LOGGER.debug("Deleted %d stale bucket keys", len(previous))

        written: List[str] = []
        for position, bucket in enumerate(buckets):
            key = self.config.bucket_key(position)
            try:
                self._props.set_property(key, dump_feed_items(list(bucket)))
            except StorageError as exc:
                LOGGER.warning("Skipping bucket %s: %s", key, exc)
                continue
            except Exception as exc:
                LOGGER.error("Failed to write bucket %s: %s", key, exc)
                continue
            written.append(key)

        try:
            self._props.set_property(self.index_key, dump_ids(written))
        except Exception as exc:
            LOGGER.error("Failed to write bucket index %s: %s", self.index_key, exc)
        LOGGER.info("Committed %d feed buckets under %s", len(written), self.index_key)
        return written

    def load_items(self) -> List[FeedItem]:
        """Concatenate every live bucket in index order, skipping unreadable ones."""
        items: List[FeedItem] = []
        for key in self.read_index():
            try:
                raw = self._props.get_property(key)
            except Exception as exc:
                LOGGER.error("Failed to read bucket %s: %s", key, exc)
                continue
            if not raw:
                LOGGER.warning("Bucket %s listed in index but missing", key)
                continue
            try:
                items.extend(load_feed_items(raw))
            except ValidationError as exc:
                LOGGER.warning("Skipping unreadable bucket %s: %s", key, exc)
        return items
