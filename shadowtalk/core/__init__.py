"""Core segmentation and scoring algorithms.

WHY: The core package holds the two algorithms the rest of the package
exists to serve, sentence reconstruction from caption fragments and
fuzzy scoring of spoken attempts, plus the IR records they exchange.

HOW: ir.py defines the records, segmenter.py builds sentences,
normalizer.py and alignment.py prepare and align tokens, scorer.py turns
an alignment into a score, and session.py keeps score history for a run.

RULES:
- Everything here is pure: no file, network, or console I/O
- Functions are reentrant; nothing is cached across calls
- Adapters and formatters depend on core, never the reverse
"""

from shadowtalk.core.alignment import align, edit_distance, is_close
from shadowtalk.core.ir import (
    Alignment,
    AlignmentResult,
    CaptionSegment,
    ScoredToken,
    Sentence,
    TokenStatus,
)
from shadowtalk.core.normalizer import (
    CONTRACTIONS,
    expand_contractions,
    normalize,
    tokenize,
)
from shadowtalk.core.scorer import grade_score, score
from shadowtalk.core.segmenter import (
    EmptyInputError,
    InvalidSegmentError,
    SegmenterConfig,
    merge_into_sentences,
)
from shadowtalk.core.session import ShadowingSession, score_attempts

__all__ = [
    "Alignment",
    "AlignmentResult",
    "CONTRACTIONS",
    "CaptionSegment",
    "EmptyInputError",
    "InvalidSegmentError",
    "ScoredToken",
    "SegmenterConfig",
    "Sentence",
    "ShadowingSession",
    "TokenStatus",
    "align",
    "edit_distance",
    "expand_contractions",
    "grade_score",
    "is_close",
    "merge_into_sentences",
    "normalize",
    "score",
    "score_attempts",
    "tokenize",
]
