"""Plain text sentence list with timestamps.

WHY: Learners and reviewers want to skim the reconstructed sentences and
check where each one starts and stops without opening a JSON file.

HOW: One line per sentence: ``[MM:SS.mmm --> MM:SS.mmm] text``. Times of
an hour or more use ``H:MM:SS.mmm``.

RULES:
- One line per sentence, in order, newline-terminated
- Empty sentence list produces empty content
- Output suffix: "-sentences.txt"; media type "text/plain"
"""

from __future__ import annotations

from typing import List, Sequence

from shadowtalk.core.ir import Sentence
from shadowtalk.formatters.base import BaseFormatter, FormatterOutput


def format_clock(seconds: float) -> str:
    """Format seconds as MM:SS.mmm, or H:MM:SS.mmm from one hour up.

    Examples: 5.5 -> "00:05.500", 3725.25 -> "1:02:05.250"
    """
    total_ms = int(round(seconds * 1000))
    hours, rem = divmod(total_ms, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    secs, millis = divmod(rem, 1000)
    if hours:
        return "{}:{:02d}:{:02d}.{:03d}".format(hours, minutes, secs, millis)
    return "{:02d}:{:02d}.{:03d}".format(minutes, secs, millis)


class PlainTextFormatter(BaseFormatter):
    """Formatter that produces one timestamped line per sentence."""

    @property
    def name(self) -> str:
        return "Plain Text"

    def format(self, sentences: Sequence[Sentence], source_name: str = "") -> List[FormatterOutput]:
        lines = [
            "[{} --> {}] {}".format(
                format_clock(s.start_time), format_clock(s.end_time), s.text,
            )
            for s in sentences
        ]
        content = "\n".join(lines)
        if content:
            content += "\n"
        return [
            FormatterOutput(
                suffix="-sentences.txt",
                content=content,
                media_type="text/plain",
            )
        ]
