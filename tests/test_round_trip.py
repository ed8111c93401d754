import pytest

from bitext_alignment.builder import build_alignment, compact_alignment, lines_to_content
from bitext_alignment.display import reconstruct_lines
from bitext_alignment.expand import expand_alignment
from bitext_alignment.persist import load_display_lines, prepare_annotation

CASES = [
    (["a", "b"], ["x", "y"]),
    (["a", "b", "c"], ["x"]),
    (["a"], ["x", "y", "z"]),
    (["", "a", "", "b"], ["x", "", "y", ""]),
    (["a", ""], ["x"]),
    (["བཀྲ་ཤིས་", "བདེ་ལེགས།"], ["Tashi", "Delek"]),
    (["first line", "", "", "fourth"], ["", "second", "third", ""]),
    ([], []),
]


def _strip_trailing_empty(lines):
    lines = list(lines)
    while lines and lines[-1] == "":
        lines.pop()
    return lines


def _normalized(source, target):
    return _strip_trailing_empty(source), _strip_trailing_empty(target)


@pytest.mark.parametrize("source,target", CASES)
def test_build_expand_reconstruct(source, target):
    stored = compact_alignment(build_alignment(source, target))
    expanded = expand_alignment(stored)
    out = reconstruct_lines(
        expanded.source,
        expanded.target,
        lines_to_content(source),
        lines_to_content(target),
    )
    assert len(out[0]) == len(out[1])
    assert _normalized(*out) == _normalized(source, target)


@pytest.mark.parametrize("source,target", CASES)
def test_full_load_path_from_stored_payload(source, target):
    payload = prepare_annotation(source, target, is_update=True)
    out = load_display_lines(payload, lines_to_content(source), lines_to_content(target))
    assert _normalized(*out) == _normalized(source, target)


@pytest.mark.parametrize("source,target", CASES)
def test_compaction_is_idempotent(source, target):
    once = build_alignment(source, target)
    assert compact_alignment(once) == once
