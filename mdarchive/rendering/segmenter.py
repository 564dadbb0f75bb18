"""
Attribute run segmentation.

Splits a text span into maximal runs of constant inline style, given a pure
``attrs_at(offset)`` lookup. The lookup is never asked about offsets outside
``[0, len(text))``.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from ..domain import AttrsAt, StyledRun, TextAttributes, TextElement


def normalize_boundaries(length: int, boundaries: Optional[Iterable[int]]) -> List[int]:
    """Return sorted, unique cut points in ``[0, length]`` including both ends."""
    if length <= 0:
        return []
    points = {0, length}
    for b in boundaries or ():
        try:
            b = int(b)
        except (TypeError, ValueError):
            continue
        if 0 <= b <= length:
            points.add(b)
    return sorted(points)


def segment_runs(
    text: str,
    attrs_at: AttrsAt,
    boundaries: Optional[Iterable[int]] = None,
) -> List[StyledRun]:
    """Partition ``text`` into the minimal list of constant-style runs.

    With ``boundaries`` only the given offsets are probed; without them every
    offset is probed.
    """
    length = len(text)
    if length == 0:
        return []

    if boundaries is None:
        cuts = list(range(length + 1))
    else:
        cuts = normalize_boundaries(length, boundaries)

    runs: List[StyledRun] = []
    for start, end in zip(cuts, cuts[1:]):
        if start >= end:
            continue
        attrs: TextAttributes = attrs_at(start)
        if runs and runs[-1].attrs == attrs:
            runs[-1] = StyledRun(runs[-1].start, end, attrs)
        else:
            runs.append(StyledRun(start, end, attrs))
    return runs


def segment_element(element: TextElement) -> List[StyledRun]:
    return segment_runs(element.text or "", element.attrs_at, element.boundaries)
