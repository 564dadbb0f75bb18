# mdarchive/domain.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple, Union

DOCUMENT_MIME_TYPE = "application/vnd.google-apps.document"


@dataclass(frozen=True)
class TextAttributes:
    """Inline style flags that survive into Markdown."""

    bold: bool = False
    italic: bool = False
    link: Optional[str] = None


PLAIN = TextAttributes()


@dataclass(frozen=True)
class StyledRun:
    start: int
    end: int
    attrs: TextAttributes


AttrsAt = Callable[[int], TextAttributes]


@dataclass(frozen=True)
class TextElement:
    """A text span plus a pure offset -> attributes lookup.

    ``boundaries`` carries the source's candidate style-change offsets when it
    has them; they may be unsorted or out of range.
    """

    text: str
    attrs_at: AttrsAt = field(default=lambda _offset: PLAIN, compare=False)
    boundaries: Optional[Tuple[int, ...]] = None


@dataclass(frozen=True)
class InlineObject:
    """Non-text inline content (images, chips, footnote refs)."""

    kind: str = "object"


Inline = Union[TextElement, InlineObject]


@dataclass(frozen=True)
class Paragraph:
    elements: Tuple[Inline, ...] = ()
    heading_level: int = 0


@dataclass(frozen=True)
class ListItem:
    elements: Tuple[Inline, ...] = ()
    nesting_level: int = 0
    glyph_kind: str = "BULLET"


@dataclass(frozen=True)
class Table:
    rows: Tuple[Tuple[Optional[str], ...], ...] = ()


@dataclass(frozen=True)
class Rule:
    pass


@dataclass(frozen=True)
class Fallback:
    raw_text: Optional[str] = None


Block = Union[Paragraph, ListItem, Table, Rule, Fallback]


@dataclass(frozen=True)
class DocumentRef:
    id: str
    name: str


@dataclass(frozen=True)
class FileInfo:
    id: str
    name: str
    mime_type: str
    parents: List[str] = field(default_factory=list)


def text_element(
    text: str,
    spans: Sequence[Tuple[int, TextAttributes]] = (),
) -> TextElement:
    """Build a TextElement from ``(start_offset, attrs)`` style changes.

    Offsets before the first span default to plain text.
    """
    ordered = sorted(spans, key=lambda s: s[0])
    starts = [s[0] for s in ordered]

    def attrs_at(offset: int) -> TextAttributes:
        current = PLAIN
        for start, attrs in ordered:
            if start > offset:
                break
            current = attrs
        return current

    return TextElement(text=text, attrs_at=attrs_at, boundaries=tuple(starts))
