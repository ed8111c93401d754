"""Read and write the stored ``alignment`` annotation payload.

The stored field names are inverted with respect to the text they describe:
``target_annotation`` holds *source* segments and ``alignment_annotation``
holds *target* segments, whose ``alignment_index`` lists source indices.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, List, Optional, TypedDict, Union

from typing_extensions import NotRequired

from .errors import InvalidSpanError, WireFormatError
from .models import AlignmentSet, SourceSegment, Span, TargetSegment

__all__ = [
    "SpanDict",
    "SourceRecord",
    "TargetRecord",
    "AlignmentPayload",
    "ALIGNMENT_TYPE",
    "alignment_from_wire",
    "alignment_to_wire",
    "alignment_from_json",
    "alignment_to_json",
]

ALIGNMENT_TYPE = "alignment"
SOURCE_KEY = "target_annotation"
TARGET_KEY = "alignment_annotation"
LINKS_KEY = "alignment_index"


# --- Typed structures ---


class SpanDict(TypedDict):
    start: int
    end: int


class SourceRecord(TypedDict):
    id: Optional[str]
    index: NotRequired[str]
    span: SpanDict


class TargetRecord(TypedDict):
    id: Optional[str]
    index: NotRequired[str]
    span: SpanDict
    alignment_index: List[str]


class AlignmentPayload(TypedDict):
    type: str
    target_annotation: List[Optional[SourceRecord]]
    alignment_annotation: List[Optional[TargetRecord]]


def _unwrap(payload: Mapping[str, Any]) -> Mapping[str, Any]:
    # fetched annotations arrive as {id, type, data: {...}}
    data = payload.get("data")
    if isinstance(data, Mapping):
        return data
    return payload


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _read_span(record: Mapping[str, Any], where: str) -> Span:
    span = record.get("span")
    if not isinstance(span, Mapping):
        raise WireFormatError(f"{where}: missing `span` object.")
    try:
        start, end = int(span["start"]), int(span["end"])
    except KeyError as exc:
        raise WireFormatError(f"{where}: span is missing {exc.args[0]!r}.") from exc
    except (TypeError, ValueError) as exc:
        raise WireFormatError(f"{where}: span offsets must be integers.") from exc
    try:
        return Span(start, end)
    except InvalidSpanError as exc:
        raise WireFormatError(f"{where}: {exc}") from exc


def _read_records(data: Mapping[str, Any], key: str) -> list[Any]:
    records = data.get(key)
    if not isinstance(records, list):
        raise WireFormatError(f"Payload is missing the `{key}` list.")
    for i, record in enumerate(records):
        if record is not None and not isinstance(record, Mapping):
            raise WireFormatError(f"{key}[{i}]: expected an object or null.")
    return records


def alignment_from_wire(payload: Mapping[str, Any]) -> AlignmentSet:
    """Parse a stored annotation (bare or wrapped in ``{id, type, data}``)."""
    data = _unwrap(payload)
    kind = data.get("type", ALIGNMENT_TYPE)
    if kind != ALIGNMENT_TYPE:
        raise WireFormatError(f"Expected an {ALIGNMENT_TYPE!r} annotation, got {kind!r}.")

    source: list[Optional[SourceSegment]] = []
    for i, record in enumerate(_read_records(data, SOURCE_KEY)):
        if record is None:
            source.append(None)
            continue
        source.append(
            SourceSegment(
                id=_optional_str(record.get("id")),
                index=_optional_str(record.get("index")),
                span=_read_span(record, f"{SOURCE_KEY}[{i}]"),
            )
        )

    target: list[Optional[TargetSegment]] = []
    for i, record in enumerate(_read_records(data, TARGET_KEY)):
        if record is None:
            target.append(None)
            continue
        links = record.get(LINKS_KEY) or []
        target.append(
            TargetSegment(
                id=_optional_str(record.get("id")),
                index=_optional_str(record.get("index")),
                span=_read_span(record, f"{TARGET_KEY}[{i}]"),
                links=tuple(str(link) for link in links),
            )
        )

    return AlignmentSet(source=source, target=target)


def _write_record(entry: Union[SourceSegment, TargetSegment]) -> dict[str, Any]:
    record: dict[str, Any] = {"id": entry.id}
    if entry.index is not None:
        record["index"] = entry.index
    record["span"] = entry.span.to_dict()
    if isinstance(entry, TargetSegment):
        record[LINKS_KEY] = list(entry.links)
    return record


def alignment_to_wire(alignment: AlignmentSet) -> AlignmentPayload:
    return {
        "type": ALIGNMENT_TYPE,
        SOURCE_KEY: [
            None if entry is None else _write_record(entry)
            for entry in alignment.source
        ],
        TARGET_KEY: [
            None if entry is None else _write_record(entry)
            for entry in alignment.target
        ],
    }


def alignment_from_json(text: str) -> AlignmentSet:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise WireFormatError(f"Annotation is not valid JSON: {exc}") from exc
    if not isinstance(payload, Mapping):
        raise WireFormatError("Annotation JSON must be an object.")
    return alignment_from_wire(payload)


def alignment_to_json(alignment: AlignmentSet, **kwargs: Any) -> str:
    return json.dumps(alignment_to_wire(alignment), ensure_ascii=False, **kwargs)
