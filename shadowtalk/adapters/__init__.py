"""Adapters between external caption payloads and the core IR.

WHY: Caption sources speak several formats; the core speaks one. Keeping
the translation here lets the segmenter stay format-agnostic.

RULES:
- Adapters may parse and clean text but never segment or score
- Parsing failures surface as CaptionParseError
"""

from shadowtalk.adapters.caption_adapter import (
    CAPTION_FORMATS,
    CaptionParseError,
    parse_captions,
    parse_timestamp,
    sentences_from_captions,
)

__all__ = [
    "CAPTION_FORMATS",
    "CaptionParseError",
    "parse_captions",
    "parse_timestamp",
    "sentences_from_captions",
]
