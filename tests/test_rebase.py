import pytest

from bitext_alignment.errors import SpanBoundsError
from bitext_alignment.models import AlignmentSet, SourceSegment, Span, TargetSegment
from bitext_alignment.rebase import (
    OffsetMapper,
    char_offset_map,
    rebase_alignment,
    rebase_segments,
)


def _src(start, end, id="s", content=None):
    return SourceSegment(id=id, index="0", span=Span(start, end), content=content)


class TestCharOffsetMap:
    def test_identical_texts(self):
        assert char_offset_map("abc", "abc") == {0: 0, 1: 1, 2: 2}

    def test_empty_side(self):
        assert char_offset_map("", "abc") == {}
        assert char_offset_map("abc", "") == {}

    def test_insertion_shifts_following_characters(self):
        mapping = char_offset_map("hello world", "hello big world")
        assert mapping[0] == 0
        assert mapping[4] == 4
        assert mapping[6] == 10
        assert mapping[10] == 14


class TestOffsetMapper:
    def test_identity_returns_same_span(self):
        mapper = OffsetMapper("abc", "abc")
        span = Span(1, 2)
        assert mapper.map_span(span) is span

    def test_inserted_text_belongs_to_neither_neighbour(self):
        mapper = OffsetMapper("hello world", "hello big world")
        assert mapper.map_span(Span(0, 5)) == Span(0, 5)
        assert mapper.map_span(Span(6, 11)) == Span(10, 15)

    def test_fully_deleted_span_collapses(self):
        mapper = OffsetMapper("abcXYZdef", "abcdef")
        out = mapper.map_span(Span(3, 6))
        assert out.start == out.end


class TestRebaseSegments:
    def test_moves_spans_and_keeps_identity(self):
        old, new = "hello world", "hello big world"
        segments = [_src(0, 5, id="a", content="hello"), None, _src(6, 11, id="b")]
        out = rebase_segments(segments, old, new)

        assert out[1] is None
        assert out[0].id == "a"
        assert out[0].content is None
        assert new[out[0].span.start : out[0].span.end] == "hello"
        assert new[out[2].span.start : out[2].span.end] == "world"

    def test_real_segment_out_of_bounds_raises(self):
        with pytest.raises(SpanBoundsError, match="source"):
            rebase_segments([_src(0, 9)], "abc", "abcd")

    def test_placeholder_out_of_bounds_is_clamped(self):
        placeholder = SourceSegment(id=None, index="1", span=Span(5, 5))
        out = rebase_segments([placeholder], "abc", "abc")
        assert out[0].span == Span(3, 3)


def test_rebase_alignment_keeps_links():
    alignment = AlignmentSet(
        source=[_src(0, 5, id="s0")],
        target=[TargetSegment(id="t0", index="0", span=Span(0, 3), links=("0",))],
    )
    out = rebase_alignment(alignment, "hello", "hello", "one two", "one, two")
    assert out.source == alignment.source
    assert out.target[0].links == ("0",)
    assert out.target[0].id == "t0"
    assert out.target[0].span == Span(0, 3)
