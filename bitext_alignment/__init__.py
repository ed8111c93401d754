"""Span-based alignment of a source text with its translation or commentary."""

from .builder import build_alignment, compact_alignment, lines_to_content
from .display import annotate_content, reconstruct_lines
from .errors import (
    AddressingError,
    AlignmentError,
    InvalidSpanError,
    SpanBoundsError,
    WireFormatError,
)
from .expand import expand_alignment, fill_span_gaps
from .models import AlignmentSet, SourceSegment, Span, TargetSegment, is_real_segment
from .persist import (
    AnnotationStore,
    alignment_summary,
    filter_mutual_references,
    load_alignment,
    load_display_lines,
    load_unaligned_lines,
    prepare_annotation,
    save_alignment,
)
from .segmentation import segmentation_display_lines
from .wire import alignment_from_wire, alignment_to_wire

__all__ = [
    "Span",
    "SourceSegment",
    "TargetSegment",
    "AlignmentSet",
    "is_real_segment",
    "build_alignment",
    "compact_alignment",
    "lines_to_content",
    "expand_alignment",
    "fill_span_gaps",
    "annotate_content",
    "reconstruct_lines",
    "filter_mutual_references",
    "alignment_from_wire",
    "alignment_to_wire",
    "AnnotationStore",
    "prepare_annotation",
    "save_alignment",
    "load_display_lines",
    "load_alignment",
    "load_unaligned_lines",
    "segmentation_display_lines",
    "alignment_summary",
    "AlignmentError",
    "InvalidSpanError",
    "SpanBoundsError",
    "AddressingError",
    "WireFormatError",
]
__version__ = "0.1.0"
