"""
Pure Markdown renderer for archive documents.

Converts an ordered list of blocks into a normalized Markdown string. No I/O
beyond the datasource calls made by ``DocumentRenderer.render_article``.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable

from ..domain import Block
from ..models import Article
from ..sources.base import DocumentSource
from .blocks import block_to_markdown

LOGGER = logging.getLogger(__name__)

_BLANK_RUN = re.compile(r"\n{3,}")


def render_document(blocks: Iterable[Block]) -> str:
    out = [block_to_markdown(b) for b in blocks]
    return _BLANK_RUN.sub("\n\n", "\n".join(out)).strip() + "\n"


class DocumentRenderer:
    """Class-based interface for document rendering."""

    def render(self, blocks: Iterable[Block]) -> str:
        """Render blocks to a Markdown string."""
        return render_document(blocks)

    def render_article(self, source: DocumentSource, doc_id: str) -> Article:
        """Fetch a document from ``source`` and render it. Source errors propagate."""
        title = source.get_title(doc_id)
        blocks = source.get_blocks(doc_id)
        markdown = render_document(blocks)
        LOGGER.debug(
            "Rendered document id=%s blocks=%d chars=%d",
            doc_id,
            len(blocks),
            len(markdown),
        )
        return Article(id=doc_id, title=title, markdown=markdown)
