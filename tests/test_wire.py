import json

import pytest

from bitext_alignment.builder import build_alignment
from bitext_alignment.errors import WireFormatError
from bitext_alignment.models import AlignmentSet, SourceSegment, Span, TargetSegment
from bitext_alignment.wire import (
    alignment_from_json,
    alignment_from_wire,
    alignment_to_json,
    alignment_to_wire,
)

STORED = {
    "type": "alignment",
    "target_annotation": [
        {"id": "s-0", "index": "0", "span": {"start": 0, "end": 3}},
        {"id": None, "index": "1", "span": {"start": 3, "end": 3}},
    ],
    "alignment_annotation": [
        {
            "id": "t-0",
            "index": "0",
            "span": {"start": 0, "end": 5},
            "alignment_index": ["0"],
        },
        {
            "id": "t-1",
            "index": "1",
            "span": {"start": 5, "end": 9},
            "alignment_index": ["1"],
        },
    ],
}


class TestAlignmentFromWire:
    def test_source_segments_come_from_target_annotation(self):
        out = alignment_from_wire(STORED)
        assert out.source == [
            SourceSegment(id="s-0", index="0", span=Span(0, 3)),
            SourceSegment(id=None, index="1", span=Span(3, 3)),
        ]
        assert out.target[1] == TargetSegment(
            id="t-1", index="1", span=Span(5, 9), links=("1",)
        )

    def test_wrapped_response(self):
        wrapped = {"id": "annotation-1", "type": "alignment", "data": STORED}
        assert alignment_from_wire(wrapped) == alignment_from_wire(STORED)

    def test_wrapped_data_without_type(self):
        data = {k: v for k, v in STORED.items() if k != "type"}
        out = alignment_from_wire({"id": "a", "type": "alignment", "data": data})
        assert len(out.source) == 2

    def test_integer_indices_become_strings(self):
        payload = {
            "target_annotation": [{"id": "s", "index": 0, "span": {"start": 0, "end": 1}}],
            "alignment_annotation": [
                {
                    "id": "t",
                    "index": 0,
                    "span": {"start": 0, "end": 1},
                    "alignment_index": [0],
                }
            ],
        }
        out = alignment_from_wire(payload)
        assert out.source[0].index == "0"
        assert out.target[0].links == ("0",)

    def test_missing_index_and_links(self):
        payload = {
            "target_annotation": [{"id": "s", "span": {"start": 0, "end": 1}}],
            "alignment_annotation": [{"id": "t", "span": {"start": 0, "end": 1}}],
        }
        out = alignment_from_wire(payload)
        assert out.source[0].index is None
        assert out.target[0].links == ()

    def test_null_rows_are_kept(self):
        payload = {
            "type": "alignment",
            "target_annotation": [None],
            "alignment_annotation": [None],
        }
        assert alignment_from_wire(payload) == AlignmentSet(source=[None], target=[None])

    def test_wrong_type_raises(self):
        with pytest.raises(WireFormatError, match="segmentation"):
            alignment_from_wire({**STORED, "type": "segmentation"})

    def test_missing_list_raises(self):
        with pytest.raises(WireFormatError, match="alignment_annotation"):
            alignment_from_wire({"type": "alignment", "target_annotation": []})

    def test_non_object_record_raises(self):
        with pytest.raises(WireFormatError):
            alignment_from_wire(
                {"target_annotation": ["oops"], "alignment_annotation": []}
            )

    @pytest.mark.parametrize(
        "span",
        [None, {"start": 0}, {"start": "a", "end": 1}, {"start": 4, "end": 1}],
    )
    def test_bad_span_raises(self, span):
        payload = {
            "target_annotation": [{"id": "s", "span": span}],
            "alignment_annotation": [],
        }
        with pytest.raises(WireFormatError, match=r"target_annotation\[0\]"):
            alignment_from_wire(payload)


class TestAlignmentToWire:
    def test_round_trips_stored_payload(self):
        assert alignment_to_wire(alignment_from_wire(STORED)) == STORED

    def test_omits_missing_index(self):
        alignment = AlignmentSet(
            source=[SourceSegment(id="s", index=None, span=Span(0, 1))],
            target=[TargetSegment(id=None, index=None, span=Span(0, 0))],
        )
        out = alignment_to_wire(alignment)
        assert out["target_annotation"] == [{"id": "s", "span": {"start": 0, "end": 1}}]
        assert out["alignment_annotation"] == [
            {"id": None, "span": {"start": 0, "end": 0}, "alignment_index": []}
        ]

    def test_content_is_not_stored(self):
        alignment = AlignmentSet(
            source=[SourceSegment(id="s", index="0", span=Span(0, 1), content="a")],
            target=[],
        )
        record = alignment_to_wire(alignment)["target_annotation"][0]
        assert "content" not in record

    def test_built_alignment_payload(self):
        out = alignment_to_wire(build_alignment(["a", "b"], ["x"]))
        assert out["type"] == "alignment"
        assert len(out["target_annotation"]) == len(out["alignment_annotation"]) == 2
        assert out["alignment_annotation"][1]["id"] is None
        assert out["alignment_annotation"][1]["span"] == {"start": 1, "end": 1}


class TestJson:
    def test_json_round_trip(self):
        alignment = build_alignment(["ཀ", "ཁ"], ["a"])
        text = alignment_to_json(alignment)
        assert alignment_from_json(text) == alignment
        assert json.loads(text)["type"] == "alignment"

    def test_invalid_json_raises(self):
        with pytest.raises(WireFormatError):
            alignment_from_json('{"type": "alignment",')

    def test_non_object_json_raises(self):
        with pytest.raises(WireFormatError):
            alignment_from_json("[]")
