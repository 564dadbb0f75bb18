"""
Block-level Markdown conversion.

Each block renders independently; nothing is carried from one block to the
next.
"""

from __future__ import annotations

import re
from typing import Optional

from ..domain import Fallback, ListItem, Paragraph, Rule, Table
from .inline import render_inline
from .table_builder import render_table

_ORDERED_GLYPH = re.compile(r"NUMBER|LATIN|ROMAN|ALPHA", re.IGNORECASE)

RULE_MARKDOWN = "\n---\n"


def heading_prefix(level: Optional[int]) -> str:
    try:
        n = int(level or 0)
    except (TypeError, ValueError):
        return ""
    if 1 <= n <= 6:
        return "#" * n
    return ""


def is_ordered_glyph(glyph_kind: Optional[object]) -> bool:
    return bool(_ORDERED_GLYPH.search(str(glyph_kind)))


def paragraph_to_markdown(p: Paragraph) -> str:
    text = render_inline(p.elements).strip()
    if not text:
        return ""
    prefix = heading_prefix(p.heading_level)
    if prefix:
        return f"{prefix} {text}\n"
    return f"{text}\n"


def list_item_to_markdown(li: ListItem) -> str:
    text = render_inline(li.elements).strip()
    if not text:
        return ""
    indent = "  " * max(0, int(li.nesting_level or 0))
    bullet = "1." if is_ordered_glyph(li.glyph_kind) else "-"
    return f"{indent}{bullet} {text}\n"


def _raw_text(block: object) -> Optional[str]:
    if isinstance(block, Fallback):
        return block.raw_text
    get_text = getattr(block, "get_text", None)
    if callable(get_text):
        return get_text()
    text = getattr(block, "text", None)
    return text if isinstance(text, str) else None


def block_to_markdown(block: object) -> str:
    """Render one block. Unknown objects fall back to their plain text."""
    if isinstance(block, Paragraph):
        return paragraph_to_markdown(block)
    if isinstance(block, ListItem):
        return list_item_to_markdown(block)
    if isinstance(block, Table):
        return render_table(block.rows)
    if isinstance(block, Rule):
        return RULE_MARKDOWN

    text = (_raw_text(block) or "").strip()
    return f"{text}\n" if text else ""
