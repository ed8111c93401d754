"""Expand a stored alignment back into editable rows and fill span gaps."""

from __future__ import annotations

import logging
from typing import Optional

from .errors import AddressingError
from .models import (
    AlignmentSet,
    Segment,
    SourceSegment,
    Span,
    TargetSegment,
    is_numeric_index,
    source_placeholder,
    target_placeholder,
)

__all__ = [
    "uses_numeric_indices",
    "expand_alignment",
    "fill_span_gaps",
]

log = logging.getLogger(__name__)


def uses_numeric_indices(alignment: AlignmentSet) -> bool:
    """Decide the addressing mode from the first source entry only.

    An opaque id made only of digits is indistinguishable from a positional
    index here; the whole set follows whatever the first entry looks like.
    """
    if not alignment.source:
        return False
    first = alignment.source[0]
    return first is not None and is_numeric_index(first.index)


def expand_alignment(alignment: AlignmentSet) -> AlignmentSet:
    """
    Turn a compacted alignment into sparse rows where gaps are ``None``.

    Numeric indices are placed directly at their row. Opaque indices only carry
    order and spans, so a gap row is inserted wherever a target span does not
    start where the previous one ended.
    """
    if uses_numeric_indices(alignment):
        log.debug("Expanding %d rows by numeric index", len(alignment))
        return _expand_numeric(alignment)
    log.debug("Expanding %d rows by span continuity", len(alignment))
    return _expand_opaque(alignment)


def _row_index(entry: Segment, side: str, position: int) -> int:
    if not is_numeric_index(entry.index):
        raise AddressingError(
            "Mixed segment addressing: the first source segment has a numeric "
            f"index but {side}[{position}] has index {entry.index!r} "
            f"(id={entry.id!r}, span=[{entry.span.start}, {entry.span.end}))."
        )
    return int(entry.index)


def _expand_numeric(alignment: AlignmentSet) -> AlignmentSet:
    placed_source = [
        (_row_index(entry, "source", i), entry)
        for i, entry in enumerate(alignment.source)
        if entry is not None
    ]
    placed_target = [
        (_row_index(entry, "target", i), entry)
        for i, entry in enumerate(alignment.target)
        if entry is not None
    ]

    max_index = max((row for row, _ in placed_source + placed_target), default=-1)
    source: list[Optional[SourceSegment]] = [None] * (max_index + 1)
    target: list[Optional[TargetSegment]] = [None] * (max_index + 1)
    for row, entry in placed_source:
        source[row] = entry
    for row, entry in placed_target:
        target[row] = entry
    return AlignmentSet(source=source, target=target)


def _expand_opaque(alignment: AlignmentSet) -> AlignmentSet:
    source: list[Optional[SourceSegment]] = []
    target: list[Optional[TargetSegment]] = []
    last_alignment_end = 0

    for i in range(len(alignment)):
        src, tgt = alignment.row(i)
        if tgt is None:
            if src is not None:
                source.append(src)
                target.append(None)
            continue
        if tgt.id is not None:
            if tgt.span.start > last_alignment_end:
                source.append(None)
                target.append(None)
            last_alignment_end = tgt.span.end
        source.append(src)
        target.append(tgt)

    width = max(len(source), len(target))
    source.extend([None] * (width - len(source)))
    target.extend([None] * (width - len(target)))
    return AlignmentSet(source=source, target=target)


def _span_gaps(entries: list[Optional[Segment]]) -> dict[int, Span]:
    """Map a row position to the uncovered span that precedes its entry."""
    ordered = sorted(
        ((row, entry) for row, entry in enumerate(entries) if entry is not None),
        key=lambda item: item[1].span.start,
    )
    gaps = {}
    for (_, prev), (row, curr) in zip(ordered, ordered[1:]):
        if prev.span.end < curr.span.start:
            gaps[row] = Span(prev.span.end, curr.span.start)
    return gaps


def _fill_side(alignment: AlignmentSet, side: str) -> AlignmentSet:
    entries = alignment.source if side == "source" else alignment.target
    gaps = _span_gaps(entries)
    if not gaps:
        return alignment.copy()

    source: list[Optional[SourceSegment]] = []
    target: list[Optional[TargetSegment]] = []
    for i in range(len(alignment)):
        gap = gaps.get(i)
        if gap is not None:
            index = str(len(source))
            if side == "source":
                source.append(source_placeholder(gap, index))
                target.append(None)
            else:
                source.append(None)
                target.append(target_placeholder(gap, index))
        src, tgt = alignment.row(i)
        source.append(src)
        target.append(tgt)

    log.debug("Filled %d %s span gaps", len(gaps), side)
    return AlignmentSet(source=source, target=target)


def fill_span_gaps(alignment: AlignmentSet) -> AlignmentSet:
    """
    Make each side's spans contiguous by inserting placeholder rows.

    For every uncovered range ``[prev.end, curr.start)`` on one side, a
    placeholder covering it is inserted just before ``curr``'s row, with
    ``None`` on the other side so all existing rows keep their partner.
    """
    return _fill_side(_fill_side(alignment, "source"), "target")
