from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict

_EXTRA_MODES = {"allow", "forbid", "ignore"}


def _extra_mode() -> str:
    """MDARCHIVE_WIRE_EXTRA: allow|forbid|ignore (default ignore)."""
    raw = (os.getenv("MDARCHIVE_WIRE_EXTRA") or "ignore").strip().lower()
    return raw if raw in _EXTRA_MODES else "ignore"


class WireModel(BaseModel):
    """Base for every JSON payload; unknown keys in cached payloads are ignored."""

    model_config = ConfigDict(extra=_extra_mode())


__all__ = ["WireModel"]
