from __future__ import annotations


class StorageError(Exception):
    """Base storage error."""


class StorageOverflow(StorageError):
    """A value exceeds the per-key size ceiling of a store."""

    def __init__(self, key: str, size: int, limit: int):
        super().__init__(f"Value for {key!r} is {size} bytes (limit {limit})")
        self.key = key
        self.size = size
        self.limit = limit
