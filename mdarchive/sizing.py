"""
Storage-size accounting for serialized payloads.

Sizes follow the durable store's own measurement: every UTF-16 code unit
above 0x7F counts as 3 bytes, everything else as 1. Astral characters are two
code units and so count 6. This is not a UTF-8 byte count and must not be
"fixed": truncation points depend on it.
"""

from __future__ import annotations


def utf16_units(ch: str) -> int:
    return 2 if ord(ch) > 0xFFFF else 1


def byte_length(s: str) -> int:
    total = 0
    for ch in s:
        cp = ord(ch)
        if cp > 0xFFFF:
            total += 6
        elif cp > 127:
            total += 3
        else:
            total += 1
    return total


def slice_utf16(s: str, units: int) -> str:
    """Return the longest prefix of ``s`` spanning at most ``units`` UTF-16 code units.

    An astral character that would be cut in half is dropped entirely.
    """
    if units <= 0:
        return ""
    used = 0
    for i, ch in enumerate(s):
        used += utf16_units(ch)
        if used > units:
            return s[:i]
    return s
