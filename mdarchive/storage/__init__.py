"""Cache tiers and durable key-value stores used by the archive service."""

from __future__ import annotations

from .cache import CacheTier, JsonFileCache, MemoryCache
from .errors import StorageError, StorageOverflow
from .properties import JsonFilePropertyStore, MemoryPropertyStore, PropertyStore

__all__ = [
    "StorageError",
    "StorageOverflow",
    "CacheTier",
    "MemoryCache",
    "JsonFileCache",
    "PropertyStore",
    "MemoryPropertyStore",
    "JsonFilePropertyStore",
]
