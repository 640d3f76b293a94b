"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and automatic OpenAPI documentation. Pydantic
models enforce field types at runtime and generate JSON Schema that
appears in the /docs UI.

HOW: Each endpoint pair (request + response) has its own model. Token and
sentence shapes mirror the to_dict() output of the core IR, so the HTTP
representation and the file formats stay identical.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Field names match the IR to_dict() keys exactly
- Response models never expose internal implementation details
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from shadowtalk.config import GAP_THRESHOLD_S, MAX_SENTENCE_WORDS


class CaptionFormat(str, Enum):
    """Caption payload formats accepted by /captions/sentences.

    RULES:
    - Values match shadowtalk.adapters.caption_adapter.CAPTION_FORMATS
    """

    auto = "auto"
    segments = "segments"
    json3 = "json3"
    srv3 = "srv3"
    srv1 = "srv1"
    panel = "panel"


# ---------------------------------------------------------------------------
# Shared shapes
# ---------------------------------------------------------------------------


class CaptionSegmentModel(BaseModel):
    """One timed caption fragment."""

    text: str = Field(description="Fragment text as delivered by the caption source.")
    start: float = Field(description="Start time in seconds.")
    duration: float = Field(default=0.0, description="Duration in seconds.")


class SentenceModel(BaseModel):
    """One reconstructed sentence."""

    text: str = Field(description="Trimmed sentence text.")
    start_time: float = Field(description="Sentence start in seconds.")
    end_time: float = Field(description="Sentence end in seconds.")


class TokenModel(BaseModel):
    """One normalised word and its alignment status."""

    word: str = Field(description="Normalised, contraction-expanded token.")
    status: str = Field(description="One of correct, close, missed (reference) or correct, extra (candidate).")


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class SegmenterOptions(BaseModel):
    """Gap-mode thresholds; only used when the captions carry no punctuation."""

    gap_threshold_s: float = Field(
        default=GAP_THRESHOLD_S,
        gt=0,
        description="Silence in seconds that ends an unpunctuated sentence.",
    )
    max_sentence_words: int = Field(
        default=MAX_SENTENCE_WORDS,
        ge=1,
        description="Word cap for unpunctuated sentences.",
    )


class SentencesRequest(SegmenterOptions):
    """Pre-parsed caption fragments to merge into sentences."""

    segments: List[CaptionSegmentModel] = Field(
        description="Caption fragments ordered by start time.",
    )


class CaptionsRequest(SegmenterOptions):
    """A raw caption payload to parse and merge into sentences."""

    content: str = Field(description="The caption payload as text (JSON, XML, or panel text).")
    format: CaptionFormat = Field(
        default=CaptionFormat.auto,
        description="Payload format; 'auto' detects it from the content.",
    )
    final_duration_s: Optional[float] = Field(
        default=None,
        ge=0,
        description="Duration for the last transcript-panel row. Defaults to the server setting.",
    )
    language: Optional[str] = Field(
        default=None,
        description="Caption-track language code (e.g. 'en', 'zh-Hans'), echoed back as a speech recognition locale.",
    )


class ScoreRequest(BaseModel):
    """A reference sentence and the learner's recognised attempt."""

    reference: str = Field(description="The sentence the learner was asked to repeat.")
    candidate: Optional[str] = Field(
        default=None,
        description="Recognised speech. Empty or null means nothing was said.",
    )

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "reference": "I am going to go",
                "candidate": "I'm gonna go",
            }
        ]
    }}


class SessionRequest(BaseModel):
    """A full practice run: the sentence list and one attempt per sentence."""

    sentences: List[SentenceModel] = Field(description="Sentences in practice order.")
    attempts: List[Optional[str]] = Field(
        description="One attempt per sentence, in order; null marks a skipped sentence.",
    )


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class SentencesResponse(BaseModel):
    """Sentences produced from the submitted captions."""

    sentences: List[SentenceModel] = Field(description="Sentences in stream order.")
    recognition_locale: Optional[str] = Field(
        default=None,
        description="Locale to hand the speech recogniser; only set by /captions/sentences.",
    )


class ScoreResponse(BaseModel):
    """Score report for one attempt."""

    score: int = Field(description="Percentage of reference words matched (0-100).")
    grade: str = Field(description="Feedback band: great, good, or poor.")
    message: str = Field(description="Feedback message for display.")
    reference_tokens: List[TokenModel] = Field(description="Reference words with status.")
    candidate_tokens: List[TokenModel] = Field(description="Spoken words with status.")
    matched_count: int = Field(description="Number of reference words matched.")
    total_count: int = Field(description="Number of reference words.")


class SessionSummaryModel(BaseModel):
    """End-of-run totals."""

    average_score: int = Field(description="Rounded mean of all recorded scores.")
    total_sentences: int = Field(description="Number of recorded scores (skips included).")


class SessionResponse(BaseModel):
    """Per-attempt reports and the run summary."""

    results: List[Optional[ScoreResponse]] = Field(
        description="One report per attempt; null where the sentence was skipped.",
    )
    summary: SessionSummaryModel = Field(description="Run totals.")


class FormatInfo(BaseModel):
    """Description of an available sentence output format."""

    key: str = Field(description="Format identifier.")
    name: str = Field(description="Human-readable format name.")
    suffix: str = Field(description="File suffix produced (e.g. '-sentences.json').")


class ErrorResponse(BaseModel):
    """Standard error response body.

    RULES:
    - detail is always a human-readable error message
    """

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
