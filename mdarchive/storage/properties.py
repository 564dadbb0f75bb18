"""
Durable key-value stores (script-properties style).

``set_property`` raises StorageOverflow above the per-key ceiling; callers
decide whether to skip or truncate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from ..sizing import byte_length
from .cache import atomic_write_json, read_json_object
from .errors import StorageOverflow

LOGGER = logging.getLogger(__name__)

DEFAULT_PROPERTY_LIMIT = 9000


class PropertyStore(Protocol):
    def get_property(self, key: str) -> Optional[str]: ...

    def set_property(self, key: str, value: str) -> None: ...

    def delete_property(self, key: str) -> None: ...


@dataclass
class MemoryPropertyStore(PropertyStore):
    max_value_bytes: int = DEFAULT_PROPERTY_LIMIT
    _values: Dict[str, str] = field(default_factory=dict)

    def get_property(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set_property(self, key: str, value: str) -> None:
        size = byte_length(value)
        if size > self.max_value_bytes:
            raise StorageOverflow(key, size, self.max_value_bytes)
        self._values[key] = value
        self._changed()

    def delete_property(self, key: str) -> None:
        if self._values.pop(key, None) is not None:
            self._changed()

    def keys(self) -> List[str]:
        return list(self._values)

    def _changed(self) -> None:
        pass


@dataclass
class JsonFilePropertyStore(MemoryPropertyStore):
    """MemoryPropertyStore persisted to a JSON file after every change."""

    path: Path = Path("properties.json")

    def __post_init__(self) -> None:
        self.path = Path(self.path)
        self._values.update(
            {str(k): v for k, v in read_json_object(self.path).items() if isinstance(v, str)}
        )

    def _changed(self) -> None:
        atomic_write_json(self.path, self._values)
        LOGGER.debug("Persisted %d properties to %s", len(self._values), self.path)
