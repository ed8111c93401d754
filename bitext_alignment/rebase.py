"""Carry segment spans over to a revised version of their text buffer.

The stored annotation addresses the text as it was when the alignment was
saved. If the buffer has since been touched up (whitespace, corrected
characters), the spans are moved by aligning the two revisions character by
character and following each boundary through the alignment.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Sequence

import numpy as np

from .alignment import align_texts
from .errors import SpanBoundsError
from .models import AlignmentSet, Segment, Span

__all__ = [
    "char_offset_map",
    "OffsetMapper",
    "rebase_segments",
    "rebase_alignment",
]

log = logging.getLogger(__name__)


def char_offset_map(old_text: str, new_text: str) -> dict[int, int]:
    """Map each character of ``old_text`` that survives in ``new_text`` to its new offset."""
    if old_text == new_text:
        return {i: i for i in range(len(old_text))}
    if not old_text or not new_text:
        return {}

    a = np.asarray(align_texts(old_text, new_text).indices)
    if a.shape[0] != 2:
        raise ValueError(f"alignment.indices must have shape (2, N); got {a.shape}")

    mapping = {}
    for oi, ni in zip(a[0], a[1]):
        if oi != -1 and ni != -1:
            mapping[int(oi)] = int(ni)
    return mapping


class OffsetMapper:
    """Moves span boundaries from ``old_text`` to ``new_text``.

    A start boundary follows the next surviving character; an end boundary
    follows the previous one. Text inserted between two segments therefore
    belongs to neither.
    """

    def __init__(self, old_text: str, new_text: str):
        self.old_len = len(old_text)
        self.new_len = len(new_text)
        self.identity = old_text == new_text
        mapping = {} if self.identity else char_offset_map(old_text, new_text)

        self._forward = [self.new_len] * (self.old_len + 1)
        for i in range(self.old_len - 1, -1, -1):
            self._forward[i] = mapping.get(i, self._forward[i + 1])

        self._backward = [0] * (self.old_len + 1)
        for i in range(1, self.old_len + 1):
            prev = mapping.get(i - 1)
            self._backward[i] = self._backward[i - 1] if prev is None else prev + 1

    def map_span(self, span: Span) -> Span:
        if self.identity:
            return span
        start = self._forward[span.start]
        end = max(self._backward[span.end], start)
        return Span(start, end)


def _rebase_entry(
    entry: Optional[Segment], mapper: OffsetMapper, side: str, row: int
) -> Optional[Segment]:
    if entry is None:
        return None
    span = entry.span
    if span.end > mapper.old_len:
        if entry.id is not None:
            raise SpanBoundsError(
                "Cannot rebase a span that lies outside its original text.\n"
                f"  side : {side}\n"
                f"  row  : {row}\n"
                f"  span : [{span.start}, {span.end})\n"
                f"  text : len={mapper.old_len}"
            )
        # placeholders may be anchored at the other side's offsets
        span = Span(min(span.start, mapper.old_len), mapper.old_len)
    return replace(entry, span=mapper.map_span(span), content=None)


def rebase_segments(
    segments: Sequence[Optional[Segment]],
    old_text: str,
    new_text: str,
    side: str = "source",
) -> list[Optional[Segment]]:
    """Return ``segments`` with spans moved from ``old_text`` onto ``new_text``.

    Ids, indices and links are kept; any attached content is cleared since it
    described the old text.
    """
    mapper = OffsetMapper(old_text, new_text)
    return [
        _rebase_entry(entry, mapper, side, row) for row, entry in enumerate(segments)
    ]


def rebase_alignment(
    alignment: AlignmentSet,
    old_source: str,
    new_source: str,
    old_target: str,
    new_target: str,
) -> AlignmentSet:
    source = rebase_segments(alignment.source, old_source, new_source, "source")
    target = rebase_segments(alignment.target, old_target, new_target, "target")
    log.debug(
        "Rebased alignment: source %d -> %d chars, target %d -> %d chars",
        len(old_source),
        len(new_source),
        len(old_target),
        len(new_target),
    )
    return AlignmentSet(source=source, target=target)
