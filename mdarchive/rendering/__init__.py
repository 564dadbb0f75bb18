"""Markdown rendering for archive documents, transport-agnostic.

Contains:
- segmenter: attribute run segmentation over a pure attrs_at lookup
- inline: inline Markdown encoding (bold/italic/link + escaping)
- blocks: per-block conversion (paragraph, list item, table, rule, fallback)
- table_builder: pipe-table reconstruction from ragged rows
- renderer: whole-document rendering and blank-line normalization
"""

from .renderer import DocumentRenderer, render_document

__all__ = ["DocumentRenderer", "render_document"]
