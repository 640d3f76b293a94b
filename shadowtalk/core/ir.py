"""Intermediate representation dataclasses for captions, sentences, and scores.

WHY: The segmenter, scorer, formatters, CLI, and HTTP API all pass the same
handful of records around. Defining them once as typed, immutable
dataclasses keeps every layer agreeing on field names and units, and gives
each record a single stable JSON-serialisable shape.

HOW: Frozen dataclasses with tuple-valued collections so a record cannot be
mutated after it is returned:
  CaptionSegment  one raw caption fragment (text, start, duration)
  Sentence        one reconstructed sentence (text, start_time, end_time)
  TokenStatus     closed set of per-token classifications
  ScoredToken     one normalised word with its classification
  Alignment       raw output of the LCS alignment engine
  AlignmentResult complete score for one spoken attempt

RULES:
- All times are float seconds
- to_dict() output contains only JSON-native types (str, int, float, list, dict)
- to_dict() keys are the stable wire names; change with care
- Records are created once and never mutated
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Tuple


@dataclass(frozen=True)
class CaptionSegment:
    """A single timed caption fragment as delivered by a caption source.

    RULES:
    - text: raw fragment text, may be empty or carry stray whitespace
    - start / duration: float seconds; validated by the segmenter, not here
    - Fragments of one stream are ordered by start but may overlap or abut
    """

    text: str
    start: float
    duration: float

    @property
    def end(self) -> float:
        return self.start + self.duration

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CaptionSegment:
        """Build a CaptionSegment from a ``{text, start, duration}`` dict.

        A missing duration is treated as 0 (a caption source may only know
        start times). A null text is an empty fragment. Missing text or start
        raises KeyError; non-string text raises TypeError.
        """
        text = data["text"]
        if text is None:
            text = ""
        elif not isinstance(text, str):
            raise TypeError("text must be a string, got {}".format(type(text).__name__))
        return cls(
            text=text,
            start=float(data["start"]),
            duration=float(data.get("duration", 0.0) or 0.0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "start": self.start, "duration": self.duration}


@dataclass(frozen=True)
class Sentence:
    """A sentence reconstructed from one or more caption fragments.

    WHY: Playback pauses at sentence boundaries and the scorer uses the
    sentence text as its reference, so both need one self-contained record.

    RULES:
    - text is non-empty and whitespace-trimmed
    - start_time <= end_time
    - A sequence of sentences is ordered by start_time; adjacent sentences
      may share a boundary
    """

    text: str
    start_time: float
    end_time: float

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Sentence:
        text = data["text"]
        if not isinstance(text, str):
            raise TypeError("text must be a string, got {}".format(type(text).__name__))
        return cls(
            text=text,
            start_time=float(data["start_time"]),
            end_time=float(data["end_time"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "start_time": self.start_time,
            "end_time": self.end_time,
        }


class TokenStatus(str, Enum):
    """Classification of a single token after alignment.

    Reference tokens are CORRECT, CLOSE, or MISSED. Candidate tokens are
    CORRECT or EXTRA.
    """

    CORRECT = "correct"
    CLOSE = "close"
    MISSED = "missed"
    EXTRA = "extra"


@dataclass(frozen=True)
class ScoredToken:
    """One normalised word and how it fared in the alignment."""

    word: str
    status: TokenStatus

    def to_dict(self) -> Dict[str, Any]:
        return {"word": self.word, "status": self.status.value}


@dataclass(frozen=True)
class Alignment:
    """Raw output of the fuzzy LCS alignment.

    RULES:
    - pairs: (reference_index, candidate_index) for every matched pair,
      in ascending order on both sides
    - matched_reference_indices / matched_candidate_indices are the two
      projections of pairs
    - matched_count == len(pairs) == the LCS length
    """

    matched_reference_indices: FrozenSet[int]
    matched_candidate_indices: FrozenSet[int]
    matched_count: int
    pairs: Tuple[Tuple[int, int], ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AlignmentResult:
    """The complete score for one spoken attempt against one reference sentence.

    WHY: A presentation layer needs the percentage plus enough per-word
    detail to highlight what was said correctly, nearly, or not at all.

    RULES:
    - score: integer 0-100, relative to reference length only
    - reference_tokens: one entry per (expanded) reference token
    - candidate_tokens: one entry per (expanded) candidate token; empty
      when the candidate text was blank
    - total_count == len(reference_tokens)
    """

    score: int
    reference_tokens: Tuple[ScoredToken, ...]
    candidate_tokens: Tuple[ScoredToken, ...]
    matched_count: int
    total_count: int

    def words_with_status(self, status: TokenStatus) -> List[str]:
        """Return the words carrying the given status, in order.

        EXTRA only occurs on the candidate side and is looked up there; every
        other status is looked up on the reference side.
        """
        tokens = self.candidate_tokens if status is TokenStatus.EXTRA else self.reference_tokens
        return [t.word for t in tokens if t.status is status]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "reference_tokens": [t.to_dict() for t in self.reference_tokens],
            "candidate_tokens": [t.to_dict() for t in self.candidate_tokens],
            "matched_count": self.matched_count,
            "total_count": self.total_count,
        }
