"""Exceptions raised by the alignment engine.

Every error is a ``ValueError`` so callers that only guard against bad input
keep working; the subclasses let them tell the failure kinds apart.
"""

__all__ = [
    "AlignmentError",
    "InvalidSpanError",
    "SpanBoundsError",
    "AddressingError",
    "WireFormatError",
]


class AlignmentError(ValueError):
    """Base class for all alignment engine errors."""


class InvalidSpanError(AlignmentError):
    """A span is reversed or negative, or overlaps an earlier span on its side."""


class SpanBoundsError(AlignmentError):
    """A span reaches past the end of the buffer it addresses."""


class AddressingError(AlignmentError):
    """An alignment mixes numeric and opaque segment indices."""


class WireFormatError(AlignmentError):
    """A stored annotation payload does not have the expected shape."""
