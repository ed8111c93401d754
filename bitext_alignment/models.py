from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional, Union

from .errors import InvalidSpanError

__all__ = [
    "Span",
    "SourceSegment",
    "TargetSegment",
    "Segment",
    "AlignmentSet",
    "is_real_segment",
    "is_numeric_index",
    "source_placeholder",
    "target_placeholder",
]

_NUMERIC_INDEX_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class Span:
    """Half-open ``[start, end)`` character offsets into one text buffer."""

    start: int
    end: int

    def __post_init__(self):
        if self.start < 0 or self.end < self.start:
            raise InvalidSpanError(
                f"Invalid span [{self.start}, {self.end}): offsets must satisfy "
                "0 <= start <= end."
            )

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def to_dict(self) -> dict[str, int]:
        return {"start": self.start, "end": self.end}


@dataclass(frozen=True)
class SourceSegment:
    """One unit of the source text. ``id=None`` marks a placeholder."""

    id: Optional[str]
    index: Optional[str]
    span: Span
    content: Optional[str] = None

    @property
    def is_placeholder(self) -> bool:
        return self.id is None


@dataclass(frozen=True)
class TargetSegment:
    """One unit of the target text, linked to the source indices it aligns to."""

    id: Optional[str]
    index: Optional[str]
    span: Span
    links: tuple[str, ...] = ()
    content: Optional[str] = None

    @property
    def is_placeholder(self) -> bool:
        return self.id is None


Segment = Union[SourceSegment, TargetSegment]


@dataclass
class AlignmentSet:
    """Paired source/target rows.

    In the compacted (stored) form both lists have the same length and
    ``source[i]`` pairs with ``target[i]``. In the expanded (editing) form a
    ``None`` entry marks an explicit gap at that row.
    """

    source: list[Optional[SourceSegment]] = field(default_factory=list)
    target: list[Optional[TargetSegment]] = field(default_factory=list)

    def __len__(self) -> int:
        return max(len(self.source), len(self.target))

    def row(self, i: int) -> tuple[Optional[SourceSegment], Optional[TargetSegment]]:
        """Return the ``(source, target)`` pair at row ``i``; missing entries are ``None``."""
        src = self.source[i] if i < len(self.source) else None
        tgt = self.target[i] if i < len(self.target) else None
        return src, tgt

    def copy(self) -> AlignmentSet:
        return AlignmentSet(source=list(self.source), target=list(self.target))


def is_real_segment(entry: Optional[Segment]) -> bool:
    """True for a linked segment; ``None`` rows and ``id=None`` placeholders are gaps."""
    return entry is not None and entry.id is not None


def is_numeric_index(index: Optional[str]) -> bool:
    return index is not None and _NUMERIC_INDEX_RE.fullmatch(index) is not None


def source_placeholder(span: Span, index: Optional[str]) -> SourceSegment:
    return SourceSegment(id=None, index=index, span=span)


def target_placeholder(span: Span, index: Optional[str]) -> TargetSegment:
    return TargetSegment(id=None, index=index, span=span, links=())
