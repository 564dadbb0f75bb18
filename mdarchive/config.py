"""
Runtime configuration for the archive.

Centralizes limits, storage keys and feed metadata so callers can tune
defaults without touching core logic. ``ArchiveConfig.from_env()`` overlays
``MDARCHIVE_*`` environment variables on the defaults.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Dict, Optional

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArchiveConfig:
    # Logging/debug
    debug: bool = False

    # Source folder that holds the managed documents
    folder_id: str = "root"

    # Cache tier
    list_cache_key: str = "0"
    cache_ttl: int = 21600
    cache_size_limit: int = 100_000
    precache_limit: int = 50

    # Durable store and feed packing
    per_bucket_bytes: int = 9000
    total_bytes: int = 450_000
    property_size_limit: int = 9000
    index_key: str = "RSS_DATA"

    # Persisted debug log
    log_key: str = "DEBUG_LOGS"
    log_capacity: int = 9000

    # Feed metadata
    document_url_template: str = "https://docs.google.com/document/d/{id}/edit"
    feed_title: str = "Document Archive"
    feed_link: str = "https://docs.google.com/"
    feed_description: str = "Recently archived documents"

    # Local state for file-backed stores
    state_dir: str = os.path.join("~", ".config", "mdarchive")

    def document_url(self, doc_id: str) -> str:
        return self.document_url_template.format(id=doc_id)

    def bucket_key(self, position: int) -> str:
        """Storage key of the 0-based ``position``-th bucket."""
        return f"{self.index_key}{position + 1:03d}"

    @classmethod
    def from_env(
        cls, environ: Optional[Dict[str, str]] = None, **overrides
    ) -> "ArchiveConfig":
        env = os.environ if environ is None else environ
        values: Dict[str, object] = {}
        for f in fields(cls):
            name = _ENV_NAMES.get(f.name)
            raw = env.get(name) if name else None
            if raw is None:
                continue
            default = f.default
            if isinstance(default, bool):
                values[f.name] = raw.strip().lower() in {"1", "true", "yes", "on"}
            elif isinstance(default, int):
                try:
                    values[f.name] = int(raw)
                except ValueError:
                    LOGGER.warning(
                        "Ignoring %s=%r: not an integer", name, raw
                    )
            else:
                values[f.name] = raw.strip() or default
        values.update({k: v for k, v in overrides.items() if v is not None})
        return replace(cls(), **values)

    @property
    def state_path(self) -> str:
        return os.path.expanduser(self.state_dir)


_ENV_NAMES = {
    "debug": "MDARCHIVE_DEBUG",
    "folder_id": "MDARCHIVE_FOLDER_ID",
    "cache_ttl": "MDARCHIVE_CACHE_TTL",
    "cache_size_limit": "MDARCHIVE_CACHE_SIZE_LIMIT",
    "precache_limit": "MDARCHIVE_PRECACHE_LIMIT",
    "log_capacity": "MDARCHIVE_LOG_CAPACITY",
    "document_url_template": "MDARCHIVE_DOCUMENT_URL",
    "feed_title": "MDARCHIVE_FEED_TITLE",
    "feed_link": "MDARCHIVE_FEED_LINK",
    "feed_description": "MDARCHIVE_FEED_DESCRIPTION",
    "state_dir": "MDARCHIVE_STATE_DIR",
}
