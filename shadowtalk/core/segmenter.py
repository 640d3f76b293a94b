"""Caption fragment validation and sentence reconstruction.

WHY: Caption tracks arrive as short, arbitrarily cut fragments ("Hello",
"world. How", "are you?"). Shadowing needs whole sentences with start and
end times so playback can stop exactly where a sentence ends. Some tracks
carry punctuation and some (auto-generated ones) carry none, so the
boundary signal has to be chosen per stream.

HOW: One pass decides the mode for the whole stream: if any fragment ends
in ".", "!" or "?" the stream is punctuated and only punctuation ends a
sentence. Otherwise a silence gap to the next fragment, or a buffer that
has grown to the word cap, ends the sentence. Fragment text is accumulated
into a buffer and flushed as a Sentence on every break.

RULES:
- Mode is decided once per stream, never per fragment
- Punctuation mode: break after a fragment whose trimmed text ends in . ! ?
- Gap mode: break when next.start - current.end >= gap_threshold_s, or when
  the buffer holds >= max_sentence_words words
- The last fragment always ends a sentence
- Sentence start = start of the first non-empty fragment in the buffer;
  sentence end = end (start + duration) of the fragment that broke it
- Empty sentences are discarded
- An empty fragment sequence yields an empty sentence list (not an error)
- Fragments are validated first; a bad fragment raises InvalidSegmentError
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from shadowtalk.config import GAP_THRESHOLD_S, MAX_SENTENCE_WORDS
from shadowtalk.core.ir import CaptionSegment, Sentence

logger = logging.getLogger(__name__)

# Trimmed fragment text ending in one of these closes a sentence.
_SENTENCE_END_RE = re.compile(r"[.!?]$")


class InvalidSegmentError(ValueError):
    """Raised when a caption fragment has impossible timing.

    WHY: Negative times or fragments that go back in time mean the caption
    source is broken. Guessing a repair inside the core would hide that, so
    the core rejects the stream and leaves recovery to the caller (see
    repair_segments).

    RULES:
    - index is the position of the offending fragment in the input
    - Message names the fragment index and the problem
    """

    def __init__(self, index: int, reason: str) -> None:
        self.index = index
        self.reason = reason
        super().__init__("Invalid caption segment at index {}: {}".format(index, reason))


class EmptyInputError(ValueError):
    """Raised when a caller requires sentences but the input produced none.

    The segmenter itself never raises this: merging zero fragments is a
    valid request with an empty answer. Pipeline entry points that promise
    at least one sentence (sentences_from_captions) raise it instead.
    """


@dataclass(frozen=True)
class SegmenterConfig:
    """Tunable thresholds for gap-mode segmentation.

    RULES:
    - gap_threshold_s > 0
    - max_sentence_words >= 1
    - Defaults come from shadowtalk.config (environment-overridable)
    """

    gap_threshold_s: float = GAP_THRESHOLD_S
    max_sentence_words: int = MAX_SENTENCE_WORDS

    def __post_init__(self) -> None:
        if not self.gap_threshold_s > 0:
            raise ValueError(
                "gap_threshold_s must be positive, got {}".format(self.gap_threshold_s)
            )
        if self.max_sentence_words < 1:
            raise ValueError(
                "max_sentence_words must be at least 1, got {}".format(self.max_sentence_words)
            )


def validate_segments(segments: Sequence[CaptionSegment]) -> None:
    """Check fragment timing, raising InvalidSegmentError on the first problem.

    RULES:
    - start and duration must be finite and >= 0
    - start must be non-decreasing across the sequence
    """
    previous_start: Optional[float] = None
    for index, seg in enumerate(segments):
        if not (math.isfinite(seg.start) and math.isfinite(seg.duration)):
            raise InvalidSegmentError(index, "start and duration must be finite")
        if seg.start < 0:
            raise InvalidSegmentError(index, "negative start {}".format(seg.start))
        if seg.duration < 0:
            raise InvalidSegmentError(index, "negative duration {}".format(seg.duration))
        if previous_start is not None and seg.start < previous_start:
            raise InvalidSegmentError(
                index,
                "start {} is before previous start {}".format(seg.start, previous_start),
            )
        previous_start = seg.start


def repair_segments(segments: Sequence[CaptionSegment]) -> List[CaptionSegment]:
    """Drop fragments with impossible times and sort the rest by start.

    WHY: Recovering from InvalidSegmentError is the caller's decision. This
    is the stock recovery policy for callers that prefer a best-effort
    result over a rejection.

    HOW: Filters out non-finite or negative fragments, then stable-sorts by
    start so fragments with equal starts keep their original order.
    """
    kept = [
        seg for seg in segments
        if math.isfinite(seg.start) and math.isfinite(seg.duration)
        and seg.start >= 0 and seg.duration >= 0
    ]
    dropped = len(segments) - len(kept)
    if dropped:
        logger.info("Dropped %d caption segment(s) with invalid timing", dropped)
    return sorted(kept, key=lambda seg: seg.start)


def is_punctuated(segments: Sequence[CaptionSegment]) -> bool:
    """True if any fragment's trimmed text ends in sentence-final punctuation."""
    return any(_SENTENCE_END_RE.search(seg.text.strip()) for seg in segments)


def merge_into_sentences(
    segments: Sequence[CaptionSegment],
    config: Optional[SegmenterConfig] = None,
) -> List[Sentence]:
    """Merge ordered caption fragments into timed sentences.

    Args:
        segments: Caption fragments ordered by start time.
        config: Gap-mode thresholds. Defaults to SegmenterConfig().

    Returns:
        Sentences in stream order. Empty when segments is empty.

    Raises:
        InvalidSegmentError: If any fragment has negative or non-finite
            times, or starts before its predecessor.
    """
    if not segments:
        return []

    cfg = config if config is not None else SegmenterConfig()
    validate_segments(segments)

    punctuated = is_punctuated(segments)
    logger.debug(
        "Segmenting %d caption fragments in %s mode",
        len(segments), "punctuation" if punctuated else "gap",
    )

    sentences: List[Sentence] = []
    buffer = ""
    buffer_start = segments[0].start
    last_index = len(segments) - 1

    for i, seg in enumerate(segments):
        text = seg.text.strip()

        if buffer and text:
            buffer = "{} {}".format(buffer, text)
        elif not buffer:
            # Buffer is empty: this fragment opens the sentence
            buffer = text
            buffer_start = seg.start

        if punctuated:
            should_break = bool(_SENTENCE_END_RE.search(text))
        else:
            should_break = False
            if i < last_index:
                gap = segments[i + 1].start - seg.end
                should_break = gap >= cfg.gap_threshold_s
            if len(buffer.split()) >= cfg.max_sentence_words:
                should_break = True

        if i == last_index:
            should_break = True

        if should_break:
            sentence_text = buffer.strip()
            if sentence_text:
                sentences.append(Sentence(
                    text=sentence_text,
                    start_time=buffer_start,
                    end_time=seg.end,
                ))
            buffer = ""

    logger.debug("Merged %d fragments into %d sentences", len(segments), len(sentences))
    return sentences
