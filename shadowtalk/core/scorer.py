"""Score a spoken attempt against its reference sentence.

WHY: The learner needs one number ("how much of the sentence did I say?")
plus per-word feedback. The number must not punish filler words or
restarts, only reference words that were missed, so it is computed
relative to the reference length alone.

HOW: Both texts are tokenized and contraction-expanded, aligned with the
fuzzy LCS engine, and every token is classified from the matched pairs.
A blank attempt short-circuits to a zero score without running the DP.

RULES:
- score = round_half_up(matched_count / total_count * 100); 0 when the
  reference has no tokens
- Reference token: CORRECT if its aligned candidate token is identical,
  CLOSE if aligned only through the fuzzy predicate, MISSED if unaligned
- Candidate token: CORRECT if aligned, EXTRA otherwise
- Blank candidate: score 0, all reference tokens MISSED, no candidate tokens
- Contractions are expanded on both sides only when there is an attempt
  to align; a blank attempt reports the plain reference tokens
- Grades: >= 80 great, >= 50 good, otherwise poor
"""

from __future__ import annotations

import logging
import math
from typing import Dict, NamedTuple, Optional

from shadowtalk.core.alignment import align
from shadowtalk.core.ir import AlignmentResult, ScoredToken, TokenStatus
from shadowtalk.core.normalizer import ContractionTable, canonical_tokens, tokenize

logger = logging.getLogger(__name__)


class ScoreGrade(NamedTuple):
    """Feedback band for a score: a stable key and a display message."""

    key: str
    message: str


GRADE_GREAT = ScoreGrade("great", "Great job!")
GRADE_GOOD = ScoreGrade("good", "Good effort!")
GRADE_POOR = ScoreGrade("poor", "Try again!")


def grade_score(score: int) -> ScoreGrade:
    """Map a 0-100 score to its feedback band."""
    if score >= 80:
        return GRADE_GREAT
    if score >= 50:
        return GRADE_GOOD
    return GRADE_POOR


def percentage(matched: int, total: int) -> int:
    """Integer percentage of matched over total, rounding halves up.

    Python's round() rounds halves to even (12.5 -> 12); scores round
    halves up (12.5 -> 13).
    """
    if total <= 0:
        return 0
    return int(math.floor(matched * 100 / total + 0.5))


def score(
    reference_text: str,
    candidate_text: Optional[str],
    table: Optional[ContractionTable] = None,
) -> AlignmentResult:
    """Score a spoken attempt against a reference sentence.

    Args:
        reference_text: The sentence the learner was asked to repeat.
        candidate_text: The recognised transcript; None or blank means the
            learner said nothing.
        table: Contraction table override; defaults to CONTRACTIONS.

    Returns:
        AlignmentResult with the score and per-token classification.

    Example:
        >>> score("hello everyone welcome to the show",
        ...       "hello everyone welcome the show").score
        83
    """
    if not candidate_text or not candidate_text.strip():
        reference = tokenize(reference_text)
        return AlignmentResult(
            score=0,
            reference_tokens=tuple(ScoredToken(w, TokenStatus.MISSED) for w in reference),
            candidate_tokens=(),
            matched_count=0,
            total_count=len(reference),
        )

    reference = canonical_tokens(reference_text, table)
    candidate = canonical_tokens(candidate_text, table)
    alignment = align(reference, candidate)
    partner: Dict[int, int] = dict(alignment.pairs)

    reference_tokens = []
    for idx, word in enumerate(reference):
        if idx not in partner:
            status = TokenStatus.MISSED
        elif candidate[partner[idx]] == word:
            status = TokenStatus.CORRECT
        else:
            status = TokenStatus.CLOSE
        reference_tokens.append(ScoredToken(word, status))

    candidate_tokens = [
        ScoredToken(
            word,
            TokenStatus.CORRECT if idx in alignment.matched_candidate_indices else TokenStatus.EXTRA,
        )
        for idx, word in enumerate(candidate)
    ]

    total = len(reference)
    result = AlignmentResult(
        score=percentage(alignment.matched_count, total),
        reference_tokens=tuple(reference_tokens),
        candidate_tokens=tuple(candidate_tokens),
        matched_count=alignment.matched_count,
        total_count=total,
    )
    logger.debug(
        "Scored attempt: %d/%d reference tokens matched (%d%%)",
        result.matched_count, result.total_count, result.score,
    )
    return result
