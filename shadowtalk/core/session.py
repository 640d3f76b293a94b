"""Score history for one shadowing run through a list of sentences.

WHY: A practice run walks through the sentences one at a time. The
learner may retry a sentence (the earlier attempt should no longer count)
or skip it (counts as zero), and expects an average at the end. That
bookkeeping is small but easy to get subtly wrong in every front end, so
it lives here once.

HOW: ShadowingSession wraps the stateless scorer and appends each score to
an in-memory list. score_attempts() drives a whole batch for callers that
already have every attempt (CLI, HTTP API).

RULES:
- record() scores against sentences[index].text and appends the score
- retry() removes the most recent score (no-op when empty)
- skip() appends 0
- Average is the half-up rounded mean; 0 when nothing is recorded
- total_sentences counts recorded scores, not the sentence list length
- A session is owned by one caller; it is not shared across threads
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from shadowtalk.core.ir import AlignmentResult, Sentence
from shadowtalk.core.scorer import score

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionSummary:
    """End-of-run totals."""

    average_score: int
    total_sentences: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "average_score": self.average_score,
            "total_sentences": self.total_sentences,
        }


class ShadowingSession:
    """Tracks per-sentence scores for one pass through a sentence list."""

    def __init__(self, sentences: Sequence[Sentence]) -> None:
        self.sentences = list(sentences)
        self._scores: List[int] = []

    @property
    def scores(self) -> Tuple[int, ...]:
        return tuple(self._scores)

    def _sentence(self, index: int) -> Sentence:
        if not 0 <= index < len(self.sentences):
            raise IndexError(
                "Sentence index {} out of range (0-{})".format(index, len(self.sentences) - 1)
            )
        return self.sentences[index]

    def record(self, index: int, candidate_text: Optional[str]) -> AlignmentResult:
        """Score an attempt at sentence ``index`` and add it to the history."""
        result = score(self._sentence(index).text, candidate_text)
        self._scores.append(result.score)
        return result

    def retry(self) -> None:
        """Forget the most recent score so the sentence can be attempted again."""
        if self._scores:
            self._scores.pop()

    def skip(self, index: int) -> None:
        """Count sentence ``index`` as skipped (score 0)."""
        self._sentence(index)
        self._scores.append(0)

    def summary(self) -> SessionSummary:
        if not self._scores:
            return SessionSummary(average_score=0, total_sentences=0)
        mean = sum(self._scores) / len(self._scores)
        return SessionSummary(
            average_score=int(mean + 0.5),
            total_sentences=len(self._scores),
        )


def score_attempts(
    sentences: Sequence[Sentence],
    attempts: Sequence[Optional[str]],
) -> Tuple[List[Optional[AlignmentResult]], SessionSummary]:
    """Score one attempt per sentence in order; None means the sentence was skipped.

    A shorter attempt list is a partial run: only the first len(attempts)
    sentences are scored, and the summary covers just those.

    Raises:
        ValueError: If there are more attempts than sentences.
    """
    if len(attempts) > len(sentences):
        raise ValueError(
            "Got {} attempts for {} sentences".format(len(attempts), len(sentences))
        )

    if len(attempts) < len(sentences):
        logger.debug(
            "Partial run: %d attempts for %d sentences", len(attempts), len(sentences),
        )

    session = ShadowingSession(sentences)
    results: List[Optional[AlignmentResult]] = []
    for index, attempt in enumerate(attempts):
        if attempt is None:
            session.skip(index)
            results.append(None)
        else:
            results.append(session.record(index, attempt))
    return results, session.summary()
