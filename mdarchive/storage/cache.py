"""
TTL cache tiers.

``put`` never raises for oversized values: it logs and skips the write, so
callers that care must pre-check sizes. Expired entries read as misses.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Tuple

from ..sizing import byte_length

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_VALUE_BYTES = 100_000


class CacheTier(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def get_all(self, keys: Iterable[str]) -> Dict[str, str]: ...

    def put(self, key: str, value: str, ttl: int) -> None: ...

    def remove_all(self, keys: Iterable[str]) -> None: ...


@dataclass
class MemoryCache(CacheTier):
    max_value_bytes: int = DEFAULT_MAX_VALUE_BYTES
    clock: Callable[[], float] = time.time
    _entries: Dict[str, Tuple[str, float]] = field(default_factory=dict)

    def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at <= self.clock():
            self._entries.pop(key, None)
            self._changed()
            return None
        return value

    def get_all(self, keys: Iterable[str]) -> Dict[str, str]:
        out: Dict[str, str] = {}
        for k in keys:
            v = self.get(k)
            if v is not None:
                out[k] = v
        return out

    def put(self, key: str, value: str, ttl: int) -> None:
        size = byte_length(value)
        if size > self.max_value_bytes:
            LOGGER.warning(
                "Cache put skipped for %s: %d bytes exceeds %d",
                key,
                size,
                self.max_value_bytes,
            )
            return
        self._entries[key] = (value, self.clock() + max(0, int(ttl)))
        self._changed()

    def remove_all(self, keys: Iterable[str]) -> None:
        removed = [k for k in keys if self._entries.pop(k, None) is not None]
        if removed:
            self._changed()

    def keys(self) -> List[str]:
        return list(self._entries)

    def _changed(self) -> None:
        pass


def atomic_write_json(path: Path, payload: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=path.name, dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(payload, fh, ensure_ascii=False)
        os.replace(tmp, path)
    except BaseException:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


def read_json_object(path: Path) -> Dict:
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, ValueError) as exc:
        LOGGER.warning("Failed to load %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


@dataclass
class JsonFileCache(MemoryCache):
    """MemoryCache persisted to a JSON file after every change."""

    path: Path = Path("cache.json")

    def __post_init__(self) -> None:
        self.path = Path(self.path)
        for key, entry in read_json_object(self.path).items():
            try:
                value, expires_at = entry
                self._entries[str(key)] = (str(value), float(expires_at))
            except (TypeError, ValueError):
                LOGGER.debug("Skipping malformed cache entry %s", key)

    def _changed(self) -> None:
        atomic_write_json(
            self.path, {k: [v, exp] for k, (v, exp) in self._entries.items()}
        )
        LOGGER.debug("Persisted %d cache entries to %s", len(self._entries), self.path)
