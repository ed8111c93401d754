from Bio import Align


def make_aligner(mode: str = "global") -> Align.PairwiseAligner:
    """Character aligner tuned for two revisions of the same text."""
    a = Align.PairwiseAligner()
    a.mode = mode
    a.match_score = 2
    a.mismatch_score = -2
    a.open_gap_score = -0.5
    a.extend_gap_score = -0.1
    return a


def align_texts(old_text: str, new_text: str, mode: str = "global"):
    """Best alignment of ``old_text`` against ``new_text``."""
    aligner = make_aligner(mode)

    alignments = aligner.align(old_text, new_text)
    return alignments[0]
