"""Configuration constants, language mappings, and .env loading.

WHY: Centralizes all tunable values so they are easy to find, update, and
override. The segmentation thresholds and the synthesised final-row
duration are plain data, not literals buried in the algorithms, so a
deployment can retune them without touching code.

HOW: python-dotenv loads the .env file on import. Constants are defined as
module-level values read from environment variables with documented
defaults. LANGUAGE_MAP translates caption-track language codes into the
locale codes speech recognisers expect.

RULES:
- Every constant has an environment override prefixed SHADOWTALK_
- Invalid numeric overrides raise ValueError naming the variable
- Unmapped language codes pass through unchanged
- Empty or missing language codes fall back to DEFAULT_LANGUAGE
"""

from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv

# Load .env from the project root (where the tool is run from)
load_dotenv()


def _env_float(name: str, default: float) -> float:
    """Read a float from the environment, failing loudly on garbage."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(
            "{} must be a number, got {!r}".format(name, raw)
        ) from None


def _env_int(name: str, default: int) -> int:
    """Read an integer from the environment, failing loudly on garbage."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(
            "{} must be an integer, got {!r}".format(name, raw)
        ) from None


# ---------------------------------------------------------------------------
# Sentence segmentation defaults
# ---------------------------------------------------------------------------

GAP_THRESHOLD_S = _env_float("SHADOWTALK_GAP_THRESHOLD_S", 0.8)
"""Silence (seconds) between fragments that ends a sentence in gap mode."""

MAX_SENTENCE_WORDS = _env_int("SHADOWTALK_MAX_SENTENCE_WORDS", 15)
"""Word count at which an unpunctuated sentence is force-broken."""

DEFAULT_FINAL_SEGMENT_DURATION_S = _env_float("SHADOWTALK_FINAL_SEGMENT_DURATION_S", 5.0)
"""Duration given to the last caption row when the source only has start times."""

# ---------------------------------------------------------------------------
# Language mapping: caption track code → speech recognition locale
# ---------------------------------------------------------------------------

DEFAULT_LANGUAGE = os.getenv("SHADOWTALK_DEFAULT_LANGUAGE", "en-US")

LANGUAGE_MAP: dict[str, str] = {
    "en": "en-US",
    "en-US": "en-US",
    "en-GB": "en-GB",
    "es": "es-ES",
    "fr": "fr-FR",
    "de": "de-DE",
    "it": "it-IT",
    "pt": "pt-BR",
    "ja": "ja-JP",
    "ko": "ko-KR",
    "zh": "zh-CN",
    "zh-Hans": "zh-CN",
    "zh-Hant": "zh-TW",
    "ru": "ru-RU",
    "ar": "ar-SA",
    "hi": "hi-IN",
    "tr": "tr-TR",
    "pl": "pl-PL",
    "nl": "nl-NL",
    "sv": "sv-SE",
}


def map_language(code: Optional[str]) -> str:
    """Map a caption-track language code to a speech recognition locale.

    WHY: Caption tracks label their language with short codes ("en",
    "zh-Hans"), while recognisers want full locales ("en-US", "zh-CN").

    HOW: Direct lookup in LANGUAGE_MAP.

    RULES:
    - Known codes map to their locale
    - Unknown codes are returned unchanged
    - None or empty string returns DEFAULT_LANGUAGE
    """
    if not code:
        return DEFAULT_LANGUAGE
    return LANGUAGE_MAP.get(code, code)


# ---------------------------------------------------------------------------
# HTTP API defaults
# ---------------------------------------------------------------------------

API_HOST = os.getenv("SHADOWTALK_API_HOST", "127.0.0.1")
API_PORT = _env_int("SHADOWTALK_API_PORT", 8000)
