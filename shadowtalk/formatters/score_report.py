"""Score report serialisation for AlignmentResult.

WHY: The presentation collaborator renders a score with per-word
highlighting and a feedback message. It needs one stable JSON document per
attempt, identical whether it comes from the CLI or the HTTP API.

HOW: Flattens AlignmentResult.to_dict(), adds the grade key and message,
optionally echoes the reference and candidate text, and validates the
result against schemas/alignment_result.schema.json.

RULES:
- Validate before returning; jsonschema.ValidationError propagates
- reference/candidate are only included when passed in
- render_score_text() is the human-readable counterpart for terminals
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

import jsonschema

from shadowtalk.core.ir import AlignmentResult, TokenStatus
from shadowtalk.core.scorer import grade_score
from shadowtalk.schemas import load_schema

# Terminal markers for each reference token status.
_TEXT_MARKERS = {
    TokenStatus.CORRECT: "{}",
    TokenStatus.CLOSE: "~{}~",
    TokenStatus.MISSED: "[{}]",
    TokenStatus.EXTRA: "+{}",
}


def score_report(
    result: AlignmentResult,
    reference: Optional[str] = None,
    candidate: Optional[str] = None,
) -> Dict[str, Any]:
    """Build and validate the JSON-ready score report."""
    grade = grade_score(result.score)
    report: Dict[str, Any] = {}
    if reference is not None:
        report["reference"] = reference
        report["candidate"] = candidate
    report.update(result.to_dict())
    report["grade"] = grade.key
    report["message"] = grade.message
    jsonschema.validate(instance=report, schema=load_schema("alignment_result"))
    return report


def format_score_report(
    result: AlignmentResult,
    reference: Optional[str] = None,
    candidate: Optional[str] = None,
) -> str:
    """Serialise a score report as pretty-printed JSON."""
    return json.dumps(score_report(result, reference, candidate), indent=2, ensure_ascii=False)


def render_score_text(result: AlignmentResult) -> str:
    """Render a score for a terminal.

    Example::

        83% - Great job! (5/6 words)
        hello everyone welcome [to] the show
    """
    grade = grade_score(result.score)
    ref_line = " ".join(
        _TEXT_MARKERS[t.status].format(t.word) for t in result.reference_tokens
    )
    lines = [
        "{}% - {} ({}/{} words)".format(
            result.score, grade.message, result.matched_count, result.total_count,
        ),
        ref_line,
    ]
    extras = [t.word for t in result.candidate_tokens if t.status is TokenStatus.EXTRA]
    if extras:
        lines.append("extra: {}".format(" ".join(extras)))
    return "\n".join(lines)
