"""FastAPI application exposing segmentation and scoring over HTTP.

WHY: Browser extensions and other front ends capture captions and run
speech recognition on their own, but should not each re-implement sentence
reconstruction and scoring. A small HTTP API lets them hand the raw data
over and get structured results back.

HOW: A single stateless FastAPI app. Each endpoint validates its body with
the pydantic models, calls the pure core (or the caption adapter), and
serialises the result with the same shapes as the file formats. Domain
errors become 422 responses with an ErrorResponse body.

RULES:
- No state is kept between requests; sessions are scored in one call
- Compute endpoints are plain ``def`` so FastAPI runs them in its thread
  pool; the core is reentrant
- All endpoints have OpenAPI descriptions
- Domain errors (InvalidSegmentError, EmptyInputError, CaptionParseError,
  too many attempts) map to HTTP 422
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from fastapi import FastAPI, HTTPException

from shadowtalk import __version__
from shadowtalk.adapters.caption_adapter import sentences_from_captions
from shadowtalk.config import API_HOST, API_PORT, map_language
from shadowtalk.core.ir import AlignmentResult, CaptionSegment, Sentence
from shadowtalk.core.scorer import score
from shadowtalk.core.segmenter import SegmenterConfig, merge_into_sentences
from shadowtalk.core.session import score_attempts
from shadowtalk.formatters import FORMATTERS, score_report
from shadowtalk.server.models import (
    CaptionsRequest,
    ErrorResponse,
    FormatInfo,
    HealthResponse,
    ScoreRequest,
    ScoreResponse,
    SentenceModel,
    SentencesRequest,
    SentencesResponse,
    SessionRequest,
    SessionResponse,
    SessionSummaryModel,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="ShadowTalk API",
    description=(
        "Reconstruct timed sentences from caption tracks and score spoken "
        "shadowing attempts against them."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

_UNPROCESSABLE = {422: {"model": ErrorResponse, "description": "Input could not be processed"}}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _unprocessable(exc: Exception) -> HTTPException:
    logger.debug("Rejected request: %s", exc)
    return HTTPException(status_code=422, detail=str(exc))


def _sentences_response(sentences: Sequence[Sentence]) -> SentencesResponse:
    return SentencesResponse(
        sentences=[SentenceModel(**s.to_dict()) for s in sentences],
    )


def _score_response(result: AlignmentResult) -> ScoreResponse:
    return ScoreResponse(**score_report(result))


# ---------------------------------------------------------------------------
# Endpoints: Sentences
# ---------------------------------------------------------------------------


@app.post(
    "/sentences",
    response_model=SentencesResponse,
    tags=["sentences"],
    summary="Merge caption fragments into sentences",
    description=(
        "Takes caption fragments ordered by start time and returns timed "
        "sentences. Punctuated captions break on . ! ?; unpunctuated ones "
        "break on silence gaps and a word cap."
    ),
    responses=_UNPROCESSABLE,
)
def create_sentences(body: SentencesRequest) -> SentencesResponse:
    config = SegmenterConfig(
        gap_threshold_s=body.gap_threshold_s,
        max_sentence_words=body.max_sentence_words,
    )
    segments = [
        CaptionSegment(text=s.text, start=s.start, duration=s.duration)
        for s in body.segments
    ]
    try:
        sentences = merge_into_sentences(segments, config)
    except ValueError as exc:
        raise _unprocessable(exc) from exc
    return _sentences_response(sentences)


@app.post(
    "/captions/sentences",
    response_model=SentencesResponse,
    tags=["sentences"],
    summary="Parse a caption payload and merge it into sentences",
    description=(
        "Accepts json3, srv3, srv1, a segment list, or transcript-panel "
        "text. Returns 422 when the payload is malformed or yields no "
        "sentences."
    ),
    responses=_UNPROCESSABLE,
)
def create_sentences_from_captions(body: CaptionsRequest) -> SentencesResponse:
    config = SegmenterConfig(
        gap_threshold_s=body.gap_threshold_s,
        max_sentence_words=body.max_sentence_words,
    )
    try:
        sentences = sentences_from_captions(
            body.content,
            fmt=body.format.value,
            config=config,
            final_duration_s=body.final_duration_s,
        )
    except ValueError as exc:
        raise _unprocessable(exc) from exc
    response = _sentences_response(sentences)
    response.recognition_locale = map_language(body.language)
    return response


# ---------------------------------------------------------------------------
# Endpoints: Scoring
# ---------------------------------------------------------------------------


@app.post(
    "/score",
    response_model=ScoreResponse,
    tags=["scoring"],
    summary="Score a spoken attempt",
    description=(
        "Aligns the recognised attempt with the reference sentence and "
        "returns the percentage of reference words matched, per-word status, "
        "and a feedback grade."
    ),
)
def score_attempt(body: ScoreRequest) -> ScoreResponse:
    return _score_response(score(body.reference, body.candidate))


@app.post(
    "/sessions/score",
    response_model=SessionResponse,
    tags=["scoring"],
    summary="Score a whole practice run",
    description=(
        "Scores one attempt per sentence in order (null = skipped, counted "
        "as 0) and returns every report plus the average."
    ),
    responses=_UNPROCESSABLE,
)
def score_session(body: SessionRequest) -> SessionResponse:
    sentences = [Sentence(s.text, s.start_time, s.end_time) for s in body.sentences]
    try:
        results, summary = score_attempts(sentences, body.attempts)
    except ValueError as exc:
        raise _unprocessable(exc) from exc

    reports: List[Optional[ScoreResponse]] = [
        _score_response(r) if r is not None else None for r in results
    ]
    return SessionResponse(
        results=reports,
        summary=SessionSummaryModel(**summary.to_dict()),
    )


# ---------------------------------------------------------------------------
# Endpoints: Formats & Health
# ---------------------------------------------------------------------------


@app.get(
    "/formats",
    response_model=List[FormatInfo],
    tags=["formats"],
    summary="List available sentence output formats",
)
async def list_formats() -> List[FormatInfo]:
    result = []
    for key, formatter_cls in sorted(FORMATTERS.items()):
        formatter = formatter_cls()
        outputs = formatter.format([])
        result.append(FormatInfo(
            key=key,
            name=formatter.name,
            suffix=outputs[0].suffix if outputs else "",
        ))
    return result


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness check for load balancers and orchestrators.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api() -> None:
    """Entry point for the shadowtalk-api console script."""
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host=API_HOST, port=API_PORT)
