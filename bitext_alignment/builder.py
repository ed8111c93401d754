"""Turn two columns of display lines into a compacted alignment."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Sequence

from .models import (
    AlignmentSet,
    SourceSegment,
    Span,
    TargetSegment,
    source_placeholder,
    target_placeholder,
)

__all__ = [
    "new_segment_id",
    "build_alignment",
    "compact_alignment",
    "lines_to_content",
]

log = logging.getLogger(__name__)


def new_segment_id() -> str:
    return uuid.uuid4().hex


def lines_to_content(lines: Sequence[str]) -> str:
    """Buffer addressed by the spans that ``build_alignment`` produces for ``lines``."""
    return "".join(lines)


def _line_spans(lines: Sequence[str]) -> list[Span]:
    spans = []
    cursor = 0
    for line in lines:
        spans.append(Span(cursor, cursor + len(line)))
        # empty line means "no text here", not a zero-width slice to step over
        if line:
            cursor += len(line)
    return spans


def build_alignment(
    source_lines: Sequence[str],
    target_lines: Sequence[str],
    id_factory: Callable[[], str] = new_segment_id,
) -> AlignmentSet:
    """
    Pair ``source_lines[i]`` with ``target_lines[i]`` and return the compacted set.

    Spans are cumulative offsets into ``lines_to_content(lines)`` of each side.
    Target line ``i`` links to source index ``str(i)``; no content matching is
    attempted.
    """
    source = [
        SourceSegment(id=id_factory(), index=str(i), span=span)
        for i, span in enumerate(_line_spans(source_lines))
    ]
    target = [
        TargetSegment(id=id_factory(), index=str(i), span=span, links=(str(i),))
        for i, span in enumerate(_line_spans(target_lines))
    ]
    log.debug("Built %d source and %d target segments", len(source), len(target))
    return compact_alignment(AlignmentSet(source=source, target=target))


def compact_alignment(alignment: AlignmentSet) -> AlignmentSet:
    """
    Drop rows empty on both sides and give one-sided rows a zero-width partner.

    The placeholder copies the present side's index and is anchored at the
    present side's ``span.start``. Running this on its own output is a no-op.
    """
    source: list[SourceSegment] = []
    target: list[TargetSegment] = []
    dropped = 0

    for i in range(len(alignment)):
        src, tgt = alignment.row(i)
        if src is None and tgt is None:
            dropped += 1
            continue
        if tgt is None:
            tgt = target_placeholder(Span(src.span.start, src.span.start), src.index)
        elif src is None:
            src = source_placeholder(Span(tgt.span.start, tgt.span.start), tgt.index)
        source.append(src)
        target.append(tgt)

    if dropped:
        log.debug("Compaction dropped %d empty rows", dropped)
    return AlignmentSet(source=source, target=target)
