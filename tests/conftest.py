"""Shared test fixtures for the shadowtalk test suite.

WHY: Several test modules need the same caption streams and sentence
lists. Centralizing them here keeps the expected timings in one place.

HOW: Plain pytest fixtures returning fresh lists of IR records, plus raw
caption payloads in each supported format.

RULES:
- Fixture times are chosen to be exact in binary floating point
- Every fixture returns a new object; tests may mutate what they get
"""

import json
from typing import List

import pytest

from shadowtalk.core.ir import CaptionSegment, Sentence


# ---------------------------------------------------------------------------
# Caption fragment streams
# ---------------------------------------------------------------------------


@pytest.fixture
def punctuated_segments() -> List[CaptionSegment]:
    """Three fragments; punctuation closes the first sentence mid-stream."""
    return [
        CaptionSegment(text="Hello", start=0.0, duration=1.0),
        CaptionSegment(text="world.", start=1.0, duration=1.0),
        CaptionSegment(text="Bye", start=5.0, duration=1.0),
    ]


@pytest.fixture
def unpunctuated_segments() -> List[CaptionSegment]:
    """Auto-generated style captions: no punctuation, one 1 s silence."""
    return [
        CaptionSegment(text="so today we", start=0.0, duration=1.0),
        CaptionSegment(text="talk about", start=1.0, duration=1.0),
        CaptionSegment(text="shadowing", start=3.0, duration=1.0),
    ]


@pytest.fixture
def sample_sentences() -> List[Sentence]:
    return [
        Sentence(text="Hello world.", start_time=0.0, end_time=2.0),
        Sentence(text="How are you?", start_time=2.0, end_time=4.0),
        Sentence(text="Fine thanks.", start_time=4.0, end_time=6.0),
    ]


# ---------------------------------------------------------------------------
# Raw caption payloads
# ---------------------------------------------------------------------------


@pytest.fixture
def json3_payload() -> str:
    return json.dumps({
        "wireMagic": "pb3",
        "events": [
            {"tStartMs": 0, "dDurationMs": 1500, "segs": [{"utf8": "Hello "}, {"utf8": "world."}]},
            {"tStartMs": 1500, "segs": [{"utf8": "\n"}]},
            {"tStartMs": 1600, "dDurationMs": 100},
            {"tStartMs": 2000, "dDurationMs": 1000, "segs": [{"utf8": "Bye."}]},
        ],
    })


@pytest.fixture
def srv3_payload() -> str:
    return (
        '<?xml version="1.0" encoding="utf-8" ?>'
        '<timedtext format="3"><body>'
        '<p t="0" d="1500">Hello <s>world</s>.</p>'
        '<p t="2000" d="1000">It&amp;#39;s   fine.</p>'
        '<p t="3000" d="500"> </p>'
        '</body></timedtext>'
    )


@pytest.fixture
def srv1_payload() -> str:
    return (
        '<?xml version="1.0" encoding="utf-8" ?>'
        '<transcript>'
        '<text start="0.5" dur="1.25">Hello</text>'
        '<text start="1.75">world</text>'
        '</transcript>'
    )


@pytest.fixture
def panel_payload() -> str:
    return "\n".join([
        "0:00",
        "Hello everyone",
        "0:02 welcome to",
        "the show",
        "",
        "1:00:00",
        "last line",
    ])
