"""
Markdown table reconstruction.

Builds a rectangular cell matrix from ragged rows and renders it as a pipe
table whose first row is the header.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

_NEWLINES = re.compile(r"\n+")


def escape_md_table(text: str) -> str:
    return text.replace("|", "\\|")


def clean_cell(text: Optional[str]) -> str:
    return escape_md_table(_NEWLINES.sub(" ", text or "").strip())


@dataclass
class TableBuilder:
    rows: Sequence[Sequence[Optional[str]]]

    cells: List[List[str]] = field(init=False, default_factory=list)
    width: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        self.cells = [[clean_cell(c) for c in row] for row in self.rows]
        self.width = max((len(r) for r in self.cells), default=0)
        for row in self.cells:
            row.extend([""] * (self.width - len(row)))

    @staticmethod
    def _line(cells: Sequence[str]) -> str:
        return f"| {' | '.join(cells)} |\n"

    def render(self) -> str:
        if not self.cells:
            return ""
        header = self.cells[0]
        parts = [self._line(header), self._line(["---"] * len(header))]
        for row in self.cells[1:]:
            parts.append(self._line(row))
        parts.append("\n")
        return "".join(parts)


def render_table(rows: Sequence[Sequence[Optional[str]]]) -> str:
    return TableBuilder(rows).render()
