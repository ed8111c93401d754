"""Line segmentation of a single text, used before any alignment exists."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Optional, TypedDict

__all__ = [
    "LineRecord",
    "SegmentRecord",
    "line_segments",
    "generate_file_segmentation",
    "extract_instance_segmentation",
    "apply_segmentation",
    "segmentation_display_lines",
]

log = logging.getLogger(__name__)


class LineRecord(TypedDict):
    start: int
    end: int
    text: str


class SegmentRecord(TypedDict):
    span: dict[str, int]


def line_segments(text: str) -> list[LineRecord]:
    """One record per ``\\n``-separated line; the newline is not part of any span."""
    records = []
    pos = 0
    for line in text.split("\n"):
        records.append({"start": pos, "end": pos + len(line), "text": line})
        pos += len(line) + 1
    return records


def generate_file_segmentation(text: str) -> list[SegmentRecord]:
    """Spans of the non-blank lines of ``text``."""
    return [
        {"span": {"start": rec["start"], "end": rec["end"]}}
        for rec in line_segments(text)
        if rec["text"].strip()
    ]


def _is_segment_record(value: Any) -> bool:
    if not isinstance(value, Mapping):
        return False
    span = value.get("span")
    return (
        isinstance(span, Mapping)
        and isinstance(span.get("start"), int)
        and isinstance(span.get("end"), int)
    )


def extract_instance_segmentation(
    annotations: Optional[Mapping[str, Any]],
) -> Optional[list[SegmentRecord]]:
    """Pick the segmentation entries out of a text instance's annotations.

    The first key mentioning ``segment`` is used; malformed records are skipped.
    Returns ``None`` when nothing usable is found.
    """
    if not isinstance(annotations, Mapping):
        return None
    key = next((k for k in annotations if "segment" in k), None)
    if key is None or not isinstance(annotations[key], list):
        return None
    segments = [seg for seg in annotations[key] if _is_segment_record(seg)]
    skipped = len(annotations[key]) - len(segments)
    if skipped:
        log.warning("Skipped %d malformed %r records", skipped, key)
    return segments or None


def apply_segmentation(text: str, segments: Sequence[Mapping[str, Any]]) -> str:
    """
    Re-insert line breaks into ``text`` at segment boundaries.

    Text between segments is kept in place. Every segment starts on a new line,
    except a first segment that already starts at offset 0.
    """
    if not text or not segments:
        return text

    ordered = sorted(segments, key=lambda seg: seg["span"]["start"])
    parts = []
    last_end = 0
    for i, seg in enumerate(ordered):
        start, end = seg["span"]["start"], seg["span"]["end"]
        parts.append(text[last_end:start])
        if i > 0 or start > 0:
            parts.append("\n")
        parts.append(text[start:end])
        last_end = end

    parts.append(text[last_end:])
    log.debug("Applied %d segments to text of length %d", len(ordered), len(text))
    return "".join(parts)


def segmentation_display_lines(
    text: str, segments: Optional[Sequence[Mapping[str, Any]]] = None
) -> list[str]:
    """Display lines for a text that has no alignment yet.

    With segments the text is broken at their boundaries first; without them
    only the line breaks already in the text count. An empty text has no lines.
    """
    if not text:
        return []
    return apply_segmentation(text, segments or []).split("\n")
