"""Save and load pipelines around the stored alignment annotation."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any, Optional, Protocol

from .builder import build_alignment, new_segment_id
from .display import annotate_content, reconstruct_lines
from .expand import expand_alignment, fill_span_gaps
from .models import AlignmentSet, SourceSegment, is_real_segment
from .segmentation import segmentation_display_lines
from .wire import AlignmentPayload, alignment_from_wire, alignment_to_wire

__all__ = [
    "AnnotationStore",
    "filter_mutual_references",
    "prepare_annotation",
    "save_alignment",
    "load_display_lines",
    "load_alignment",
    "load_unaligned_lines",
    "alignment_summary",
]

log = logging.getLogger(__name__)


class AnnotationStore(Protocol):
    """Backend holding alignment annotations. Errors propagate to the caller."""

    def fetch_annotation(self, annotation_id: str) -> Mapping[str, Any]: ...

    def create_annotation(self, payload: AlignmentPayload) -> Mapping[str, Any]: ...

    def update_annotation(
        self, annotation_id: str, payload: AlignmentPayload
    ) -> Mapping[str, Any]: ...


def _source_keys(entry: SourceSegment) -> set[str]:
    return {key for key in (entry.index, entry.id) if key is not None}


def filter_mutual_references(alignment: AlignmentSet) -> AlignmentSet:
    """
    Keep only rows that reference each other.

    A source segment survives when some target segment links to its index (or
    id); a target segment survives when one of its links names a surviving
    source segment. Gap rows are dropped.
    """
    linked = {
        link for entry in alignment.target if entry is not None for link in entry.links
    }
    source = [
        entry
        for entry in alignment.source
        if entry is not None and _source_keys(entry) & linked
    ]
    surviving = set().union(*(_source_keys(entry) for entry in source))
    target = [
        entry
        for entry in alignment.target
        if entry is not None and surviving.intersection(entry.links)
    ]

    dropped = (len(alignment.source) - len(source), len(alignment.target) - len(target))
    if any(dropped):
        log.debug("Dropped %d source and %d target rows without a partner", *dropped)
    return AlignmentSet(source=source, target=target)


def prepare_annotation(
    source_lines: Sequence[str],
    target_lines: Sequence[str],
    *,
    is_update: bool = False,
    id_factory: Callable[[], str] = new_segment_id,
) -> AlignmentPayload:
    """Build the stored payload for two display columns.

    New annotations are trimmed to mutually referencing rows; updates are
    stored as built.
    """
    alignment = build_alignment(source_lines, target_lines, id_factory=id_factory)
    if not is_update:
        alignment = filter_mutual_references(alignment)
    return alignment_to_wire(alignment)


def save_alignment(
    store: AnnotationStore,
    source_lines: Sequence[str],
    target_lines: Sequence[str],
    annotation_id: Optional[str] = None,
    id_factory: Callable[[], str] = new_segment_id,
) -> Mapping[str, Any]:
    """Create a new annotation, or replace ``annotation_id`` when given."""
    payload = prepare_annotation(
        source_lines,
        target_lines,
        is_update=annotation_id is not None,
        id_factory=id_factory,
    )
    if annotation_id is None:
        log.info(
            "Creating alignment annotation with %d rows",
            len(payload["alignment_annotation"]),
        )
        return store.create_annotation(payload)
    log.info("Updating alignment annotation %s", annotation_id)
    return store.update_annotation(annotation_id, payload)


def load_display_lines(
    annotation: Mapping[str, Any],
    source_text: str,
    target_text: str,
) -> tuple[list[str], list[str]]:
    """Run the whole load path: expand, fill gaps, attach content, rebuild lines."""
    alignment = alignment_from_wire(annotation)
    expanded = fill_span_gaps(expand_alignment(alignment))
    annotated = annotate_content(expanded, source_text, target_text)
    return reconstruct_lines(annotated.source, annotated.target, source_text, target_text)


def load_alignment(
    store: AnnotationStore,
    annotation_id: str,
    source_text: str,
    target_text: str,
) -> tuple[list[str], list[str]]:
    annotation = store.fetch_annotation(annotation_id)
    log.info("Loaded alignment annotation %s", annotation_id)
    return load_display_lines(annotation, source_text, target_text)


def load_unaligned_lines(
    source_text: str,
    target_text: str,
    source_segments: Optional[Sequence[Mapping[str, Any]]] = None,
    target_segments: Optional[Sequence[Mapping[str, Any]]] = None,
) -> tuple[list[str], list[str]]:
    """
    Display lines for a text pair that has no alignment annotation yet.

    Each side is split on its own segmentation, if any, so the two columns are
    independent and may differ in length.
    """
    log.info("No alignment annotation, falling back to segmentation")
    return (
        segmentation_display_lines(source_text, source_segments),
        segmentation_display_lines(target_text, target_segments),
    )


def alignment_summary(alignment: AlignmentSet) -> dict[str, int]:
    """Count rows by which side carries a real segment."""
    summary = {"rows": 0, "aligned": 0, "source_only": 0, "target_only": 0}
    for i in range(len(alignment)):
        src, tgt = alignment.row(i)
        src_real, tgt_real = is_real_segment(src), is_real_segment(tgt)
        if not (src_real or tgt_real):
            continue
        summary["rows"] += 1
        if src_real and tgt_real:
            summary["aligned"] += 1
        elif src_real:
            summary["source_only"] += 1
        else:
            summary["target_only"] += 1
    return summary
