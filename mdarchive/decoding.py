# mdarchive/decoding.py
"""
Google Docs API document JSON -> archive Blocks.

Handles the structural elements the renderer understands (paragraphs, list
items, tables, horizontal rules, tables of contents); everything else is
dropped or degraded to plain text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .domain import (
    Block,
    Fallback,
    Inline,
    InlineObject,
    ListItem,
    Paragraph,
    Rule,
    Table,
    TextAttributes,
    text_element,
)

LOGGER = logging.getLogger(__name__)

_HEADINGS = {
    "TITLE": 1,
    "SUBTITLE": 2,
    "HEADING_1": 1,
    "HEADING_2": 2,
    "HEADING_3": 3,
    "HEADING_4": 4,
    "HEADING_5": 5,
    "HEADING_6": 6,
}

# REST glyph types -> document-model glyph kinds
_GLYPH_TYPES = {
    "DECIMAL": "NUMBER",
    "ZERO_DECIMAL": "NUMBER",
    "UPPER_ALPHA": "LATIN_UPPER",
    "ALPHA": "LATIN_LOWER",
    "UPPER_ROMAN": "ROMAN_UPPER",
    "ROMAN": "ROMAN_LOWER",
}

_GLYPH_SYMBOLS = {
    "●": "BULLET",
    "○": "HOLLOW_BULLET",
    "■": "SQUARE_BULLET",
}


@dataclass(frozen=True)
class DecodedDocument:
    id: str
    title: str
    blocks: List[Block]


def _attrs_from_style(style: Optional[Dict[str, Any]]) -> TextAttributes:
    style = style or {}
    link = style.get("link") or {}
    return TextAttributes(
        bold=bool(style.get("bold")),
        italic=bool(style.get("italic")),
        link=link.get("url") or None,
    )


class DocumentDecoder:
    """Decode one Docs API ``documents.get`` payload."""

    def __init__(self, payload: Dict[str, Any]):
        self.payload = payload or {}
        self.lists: Dict[str, Any] = self.payload.get("lists") or {}

    def decode(self) -> DecodedDocument:
        body = self.payload.get("body") or {}
        blocks = self.decode_content(body.get("content") or [])
        doc_id = str(self.payload.get("documentId") or "")
        LOGGER.debug("Decoded document id=%s blocks=%d", doc_id, len(blocks))
        return DecodedDocument(
            id=doc_id,
            title=str(self.payload.get("title") or ""),
            blocks=blocks,
        )

    def decode_content(self, content: List[Dict[str, Any]]) -> List[Block]:
        blocks: List[Block] = []
        for el in content:
            if "paragraph" in el:
                blocks.extend(self._paragraph(el["paragraph"]))
            elif "table" in el:
                blocks.append(self._table(el["table"]))
            elif "tableOfContents" in el:
                toc = el["tableOfContents"].get("content") or []
                blocks.append(Fallback(raw_text=self.plain_text(toc)))
            elif "sectionBreak" in el:
                continue
            else:
                LOGGER.debug("Skipping structural element keys=%s", sorted(el))
        return blocks

    # ------------------------------ paragraphs ------------------------------

    def glyph_kind(self, bullet: Dict[str, Any]) -> str:
        list_id = bullet.get("listId")
        level = int(bullet.get("nestingLevel") or 0)
        props = (self.lists.get(list_id) or {}).get("listProperties") or {}
        levels = props.get("nestingLevels") or []
        if not 0 <= level < len(levels):
            return "BULLET"
        nl = levels[level] or {}
        glyph_type = nl.get("glyphType")
        if glyph_type in _GLYPH_TYPES:
            return _GLYPH_TYPES[glyph_type]
        return _GLYPH_SYMBOLS.get(nl.get("glyphSymbol"), "BULLET")

    def _inline(self, elements: List[Dict[str, Any]]) -> Tuple[Tuple[Inline, ...], bool]:
        """Return (inline elements, has_horizontal_rule)."""
        out: List[Inline] = []
        spans: List[Tuple[int, TextAttributes]] = []
        text_parts: List[str] = []
        has_rule = False

        def flush() -> None:
            if text_parts:
                out.append(text_element("".join(text_parts), list(spans)))
                text_parts.clear()
                spans.clear()

        def add_text(text: str, attrs: TextAttributes) -> None:
            if not text:
                return
            spans.append((sum(len(t) for t in text_parts), attrs))
            text_parts.append(text)

        for pe in elements:
            if "textRun" in pe:
                run = pe["textRun"]
                text = (run.get("content") or "").replace("\u000b", "\n")
                add_text(text, _attrs_from_style(run.get("textStyle")))
            elif "richLink" in pe:
                props = pe["richLink"].get("richLinkProperties") or {}
                add_text(
                    props.get("title") or props.get("uri") or "",
                    TextAttributes(link=props.get("uri") or None),
                )
            elif "horizontalRule" in pe:
                has_rule = True
            else:
                kind = next(iter(pe.keys() - {"startIndex", "endIndex"}), "object")
                flush()
                out.append(InlineObject(kind=kind))

        # The paragraph terminator belongs to the block, not to the last run.
        if text_parts and text_parts[-1].endswith("\n"):
            text_parts[-1] = text_parts[-1][:-1]
            if not text_parts[-1]:
                text_parts.pop()
                spans.pop()
        flush()
        return tuple(out), has_rule

    def _paragraph(self, p: Dict[str, Any]) -> List[Block]:
        elements, has_rule = self._inline(p.get("elements") or [])
        bullet = p.get("bullet")
        blocks: List[Block] = []
        if bullet is not None:
            blocks.append(
                ListItem(
                    elements=elements,
                    nesting_level=int(bullet.get("nestingLevel") or 0),
                    glyph_kind=self.glyph_kind(bullet),
                )
            )
        else:
            style = p.get("paragraphStyle") or {}
            level = _HEADINGS.get(style.get("namedStyleType") or "", 0)
            blocks.append(Paragraph(elements=elements, heading_level=level))
        if has_rule:
            blocks.append(Rule())
        return blocks

    # -------------------------------- tables --------------------------------

    def plain_text(self, content: List[Dict[str, Any]]) -> str:
        parts: List[str] = []
        for el in content:
            if "paragraph" in el:
                for pe in el["paragraph"].get("elements") or []:
                    run = pe.get("textRun")
                    if run:
                        parts.append(run.get("content") or "")
            elif "table" in el:
                for row in el["table"].get("tableRows") or []:
                    for cell in row.get("tableCells") or []:
                        parts.append(self.plain_text(cell.get("content") or []))
        return "".join(parts)

    def _table(self, table: Dict[str, Any]) -> Table:
        rows = []
        for row in table.get("tableRows") or []:
            rows.append(
                tuple(
                    self.plain_text(cell.get("content") or [])
                    for cell in row.get("tableCells") or []
                )
            )
        return Table(rows=tuple(rows))


def decode_document(payload: Dict[str, Any]) -> DecodedDocument:
    return DocumentDecoder(payload).decode()
