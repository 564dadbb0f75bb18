"""
Inline Markdown encoding for styled runs.

Only bold, italic and links survive; everything else is plain text. Reserved
characters are escaped once, before any markup is added.
"""

from __future__ import annotations

from typing import Iterable, List

from ..domain import Inline, TextAttributes, TextElement
from .segmenter import segment_element


def escape_md_inline(text: str) -> str:
    return text.replace("\\", "\\\\").replace("`", "\\`")


def encode_run(text: str, attrs: TextAttributes) -> str:
    """Encode one run. Links win over bold/italic."""
    if not text:
        return ""
    chunk = escape_md_inline(text)
    if attrs.link:
        return f"[{chunk}]({attrs.link})"
    if attrs.bold and attrs.italic:
        return f"***{chunk}***"
    if attrs.bold:
        return f"**{chunk}**"
    if attrs.italic:
        return f"*{chunk}*"
    return chunk


def encode_element(element: TextElement) -> str:
    text = element.text or ""
    out: List[str] = []
    for run in segment_element(element):
        chunk = text[run.start : run.end].replace("\r", "")
        out.append(encode_run(chunk, run.attrs))
    return "".join(out)


def render_inline(elements: Iterable[Inline]) -> str:
    """Concatenate the encoded text elements of a paragraph; skip inline objects."""
    out: List[str] = []
    for el in elements:
        if not isinstance(el, TextElement):
            continue
        out.append(encode_element(el))
    return "".join(out)
