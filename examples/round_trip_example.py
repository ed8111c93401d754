"""Example script: save two aligned columns and load them back for display."""

import json

from bitext_alignment import lines_to_content, load_display_lines, prepare_annotation


def main() -> None:
    source_lines = ["བཀྲ་ཤིས་བདེ་ལེགས།", "", "ཐུགས་རྗེ་ཆེ།"]
    target_lines = ["Good luck.", "(blessing)", "Thank you."]

    payload = prepare_annotation(source_lines, target_lines)
    print("Stored annotation")
    print(json.dumps(payload, ensure_ascii=False, indent=2))

    source, target = load_display_lines(
        payload,
        lines_to_content(source_lines),
        lines_to_content(target_lines),
    )
    print("\nDisplay rows")
    for left, right in zip(source, target):
        print(f"{left!r:<30} | {right!r}")


if __name__ == "__main__":
    main()
