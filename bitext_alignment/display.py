"""Attach text to segments and rebuild the two display columns."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Sequence

from .errors import InvalidSpanError, SpanBoundsError
from .models import AlignmentSet, Segment, is_real_segment

__all__ = [
    "annotate_content",
    "reconstruct_lines",
]

log = logging.getLogger(__name__)


def _slice(entry: Segment, buffer: str, side: str, row: int, strict: bool) -> str:
    start, end = entry.span.start, entry.span.end
    if end > len(buffer):
        if strict:
            raise SpanBoundsError(
                f"Span out of buffer bounds.\n"
                f"  side   : {side}\n"
                f"  row    : {row}\n"
                f"  span   : [{start}, {end})\n"
                f"  buffer : len={len(buffer)}"
            )
        log.debug(
            "Clamping %s[%d] span [%d, %d) to buffer length %d",
            side,
            row,
            start,
            end,
            len(buffer),
        )
    return buffer[min(start, len(buffer)) : min(end, len(buffer))]


def annotate_content(
    alignment: AlignmentSet,
    source_text: str,
    target_text: str,
    strict: bool = False,
) -> AlignmentSet:
    """
    Return a copy of ``alignment`` with ``content`` set from the text buffers.

    Spans are left untouched. A span reaching past its buffer is clamped, or
    raises ``SpanBoundsError`` when ``strict`` is set.
    """
    source = [
        None
        if entry is None
        else replace(entry, content=_slice(entry, source_text, "source", i, strict))
        for i, entry in enumerate(alignment.source)
    ]
    target = [
        None
        if entry is None
        else replace(entry, content=_slice(entry, target_text, "target", i, strict))
        for i, entry in enumerate(alignment.target)
    ]
    return AlignmentSet(source=source, target=target)


class _Column:
    """Tracks how far one buffer has been written out as display lines."""

    def __init__(self, buffer: str, side: str):
        self.buffer = buffer
        self.side = side
        self.consumed = 0

    def pending_until(self, offset: int) -> Optional[str]:
        if offset <= self.consumed:
            return None
        text = self.buffer[self.consumed : offset]
        self.consumed = offset
        return text

    def check(self, entry: Segment, row: int):
        start, end = entry.span.start, entry.span.end
        if end > len(self.buffer):
            raise SpanBoundsError(
                f"Span out of buffer bounds.\n"
                f"  side   : {self.side}\n"
                f"  row    : {row}\n"
                f"  span   : [{start}, {end})\n"
                f"  buffer : len={len(self.buffer)}"
            )
        if start < self.consumed:
            raise InvalidSpanError(
                f"Span overlaps text already written out.\n"
                f"  side     : {self.side}\n"
                f"  row      : {row}\n"
                f"  span     : [{start}, {end})\n"
                f"  consumed : {self.consumed}"
            )

    def take(self, entry: Segment) -> str:
        self.consumed = entry.span.end
        return self.buffer[entry.span.start : entry.span.end]


def reconstruct_lines(
    source_segments: Sequence[Optional[Segment]],
    target_segments: Sequence[Optional[Segment]],
    source_text: str,
    target_text: str,
) -> tuple[list[str], list[str]]:
    """
    Rebuild the two display columns, row for row, from expanded segments.

    Rows with no real segment on either side produce no line. Text skipped
    over between real segments of one side becomes its own line, paired with
    an empty line on the other side; so does text left after the last one.
    Both returned lists always have the same length.

    Real segments must lie inside their buffer and must not start before the
    end of the previous real segment on the same side. A span past the buffer
    raises ``SpanBoundsError`` and an overlapping one raises
    ``InvalidSpanError``. Placeholders are never checked.
    """
    src_col = _Column(source_text, "source")
    tgt_col = _Column(target_text, "target")
    source_lines: list[str] = []
    target_lines: list[str] = []

    def flush(column: _Column, offset: int, is_source: bool):
        text = column.pending_until(offset)
        if text is None:
            return
        source_lines.append(text if is_source else "")
        target_lines.append("" if is_source else text)

    for i in range(max(len(source_segments), len(target_segments))):
        src = source_segments[i] if i < len(source_segments) else None
        tgt = target_segments[i] if i < len(target_segments) else None
        src_real = is_real_segment(src)
        tgt_real = is_real_segment(tgt)
        if not src_real and not tgt_real:
            continue

        if src_real:
            src_col.check(src, i)
        if tgt_real:
            tgt_col.check(tgt, i)
        if src_real:
            flush(src_col, src.span.start, is_source=True)
        if tgt_real:
            flush(tgt_col, tgt.span.start, is_source=False)
        source_lines.append(src_col.take(src) if src_real else "")
        target_lines.append(tgt_col.take(tgt) if tgt_real else "")

    flush(src_col, len(source_text), is_source=True)
    flush(tgt_col, len(target_text), is_source=False)
    return source_lines, target_lines
