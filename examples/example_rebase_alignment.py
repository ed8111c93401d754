"""Example script: move stored spans onto a lightly edited target text."""

from bitext_alignment import build_alignment, lines_to_content
from bitext_alignment.rebase import rebase_alignment


def main() -> None:
    source_lines = ["ཀ་", "ཁ་"]
    target_lines = ["first line", "second line"]
    alignment = build_alignment(source_lines, target_lines)

    old_target = lines_to_content(target_lines)
    new_target = "first  line, second line"
    rebased = rebase_alignment(
        alignment,
        lines_to_content(source_lines),
        lines_to_content(source_lines),
        old_target,
        new_target,
    )

    for before, after in zip(alignment.target, rebased.target):
        old = old_target[before.span.start : before.span.end]
        new = new_target[after.span.start : after.span.end]
        print(f"{old!r} -> {new!r}")


if __name__ == "__main__":
    main()
