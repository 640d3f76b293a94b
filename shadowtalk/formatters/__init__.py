"""Output formatter registry: sentence list formats plus the score report.

WHY: The CLI and API layers need a single lookup to find the right
sentence formatter by name. A central dict makes it trivial to add new
formats: create the formatter class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["plain_text"]()``.
The score report is a single document type, so it is exposed as plain
functions rather than a registry entry.

RULES:
- Keys are snake_case identifiers (used in CLI flags and the API)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from shadowtalk.formatters.plain_text import PlainTextFormatter
from shadowtalk.formatters.score_report import format_score_report, render_score_text, score_report
from shadowtalk.formatters.sentences_json import SentencesJSONFormatter, load_sentences

if TYPE_CHECKING:
    from shadowtalk.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "sentences_json": SentencesJSONFormatter,
    "plain_text": PlainTextFormatter,
}

__all__ = [
    "FORMATTERS",
    "format_score_report",
    "load_sentences",
    "render_score_text",
    "score_report",
]
