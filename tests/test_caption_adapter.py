"""Tests for caption payload parsing.

WHY: Each caption source has its own quirks (millisecond vs second times,
entity-encoded text, panels that only show start times). A parser that
gets one of them wrong silently shifts every sentence boundary.

HOW: One small payload per format from conftest.py, checked fragment by
fragment, plus format detection and the error paths.
"""

import json

import pytest

from shadowtalk.adapters.caption_adapter import (
    CaptionParseError,
    detect_format,
    parse_captions,
    parse_json3,
    parse_panel,
    parse_segments_json,
    parse_srv1,
    parse_srv3,
    parse_timestamp,
    sentences_from_captions,
)
from shadowtalk.core.ir import CaptionSegment
from shadowtalk.core.segmenter import EmptyInputError, InvalidSegmentError, SegmenterConfig


def _as_tuples(segments):
    return [(s.text, s.start, s.duration) for s in segments]


# ---------------------------------------------------------------------------
# Individual formats
# ---------------------------------------------------------------------------


class TestSegmentsJSON:

    def test_plain_list(self):
        raw = json.dumps([
            {"text": "Hello", "start": 0, "duration": 1},
            {"text": " world. ", "start": 1, "duration": 1.5},
        ])
        assert _as_tuples(parse_segments_json(raw)) == [
            ("Hello", 0.0, 1.0),
            ("world.", 1.0, 1.5),
        ]

    def test_wrapped_list_and_missing_duration(self):
        raw = json.dumps({"segments": [{"text": "Hi", "start": 2.5}]})
        assert parse_segments_json(raw) == [CaptionSegment("Hi", 2.5, 0.0)]

    def test_blank_fragments_are_dropped(self):
        raw = json.dumps([
            {"text": "  ", "start": 0, "duration": 1},
            {"text": "kept", "start": 1, "duration": 1},
        ])
        assert [s.text for s in parse_segments_json(raw)] == ["kept"]

    def test_missing_start_is_an_error(self):
        with pytest.raises(CaptionParseError, match="Segment 0"):
            parse_segments_json(json.dumps([{"text": "no start"}]))

    def test_non_list_is_an_error(self):
        with pytest.raises(CaptionParseError):
            parse_segments_json(json.dumps({"items": []}))

    def test_null_text_is_an_empty_fragment(self):
        raw = json.dumps([
            {"text": None, "start": 0, "duration": 1},
            {"text": "kept", "start": 1, "duration": 1},
        ])
        assert [s.text for s in parse_segments_json(raw)] == ["kept"]

    def test_non_string_text_is_an_error(self):
        with pytest.raises(CaptionParseError, match="Segment 0"):
            parse_segments_json(json.dumps([{"text": 42, "start": 0, "duration": 1}]))

    def test_from_dict_null_text_and_wrong_type(self):
        seg = CaptionSegment.from_dict({"text": None, "start": 1})
        assert seg == CaptionSegment("", 1.0, 0.0)
        with pytest.raises(TypeError):
            CaptionSegment.from_dict({"text": ["a"], "start": 0})


class TestJSON3:

    def test_events_become_fragments(self, json3_payload):
        assert _as_tuples(parse_json3(json3_payload)) == [
            ("Hello world.", 0.0, 1.5),
            ("Bye.", 2.0, 1.0),
        ]

    def test_missing_events_yields_nothing(self):
        assert parse_json3("{}") == []

    def test_non_object_is_an_error(self):
        with pytest.raises(CaptionParseError):
            parse_json3("[]")

    def test_non_object_seg_is_an_error(self):
        with pytest.raises(CaptionParseError, match="event 0"):
            parse_json3(json.dumps({"events": [{"segs": ["hello"]}]}))

    def test_non_string_utf8_is_an_error(self):
        with pytest.raises(CaptionParseError):
            parse_json3(json.dumps({"events": [{"segs": [{"utf8": 5}]}]}))

    @pytest.mark.parametrize("field", ["tStartMs", "dDurationMs"])
    def test_non_numeric_time_is_an_error(self, field):
        event = {"tStartMs": 0, "dDurationMs": 1000, "segs": [{"utf8": "hi"}]}
        event[field] = "100"
        with pytest.raises(CaptionParseError, match=field):
            parse_json3(json.dumps({"events": [event]}))

    def test_events_must_be_a_list(self):
        with pytest.raises(CaptionParseError):
            parse_json3(json.dumps({"events": {"segs": []}}))


class TestSrv3:

    def test_paragraphs_become_fragments(self, srv3_payload):
        assert _as_tuples(parse_srv3(srv3_payload)) == [
            ("Hello world.", 0.0, 1.5),
            ("It's fine.", 2.0, 1.0),
        ]

    def test_bad_time_attribute_is_an_error(self):
        with pytest.raises(CaptionParseError):
            parse_srv3('<timedtext><body><p t="soon">x</p></body></timedtext>')


class TestSrv1:

    def test_text_nodes_become_fragments(self, srv1_payload):
        assert _as_tuples(parse_srv1(srv1_payload)) == [
            ("Hello", 0.5, 1.25),
            ("world", 1.75, 0.0),
        ]

    def test_entities_are_decoded(self):
        raw = '<transcript><text start="0" dur="1">Tom &amp;amp; Jerry</text></transcript>'
        assert parse_srv1(raw)[0].text == "Tom & Jerry"


class TestPanel:

    def test_durations_run_to_next_row(self, panel_payload):
        assert _as_tuples(parse_panel(panel_payload)) == [
            ("Hello everyone", 0.0, 2.0),
            ("welcome to the show", 2.0, 3598.0),
            ("last line", 3600.0, 5.0),
        ]

    def test_final_duration_override(self, panel_payload):
        segments = parse_panel(panel_payload, final_duration_s=2.5)
        assert segments[-1].duration == 2.5

    def test_text_before_first_timestamp_is_ignored(self):
        raw = "Transcript\n0:01 hello"
        assert _as_tuples(parse_panel(raw)) == [("hello", 1.0, 5.0)]

    def test_rows_without_text_are_dropped(self):
        raw = "0:00\n0:03 hello\n0:04 there"
        assert _as_tuples(parse_panel(raw)) == [("hello", 3.0, 1.0), ("there", 4.0, 5.0)]


class TestParseTimestamp:

    @pytest.mark.parametrize("text, expected", [
        ("0:07", 7.0),
        ("1:05", 65.0),
        ("1:23:45", 5025.0),
        ("12.5", 12.5),
        (" 2:00 ", 120.0),
    ])
    def test_valid(self, text, expected):
        assert parse_timestamp(text) == expected

    @pytest.mark.parametrize("text", ["abc", "1:2:3:4", "", "1::2"])
    def test_invalid(self, text):
        with pytest.raises(CaptionParseError):
            parse_timestamp(text)


# ---------------------------------------------------------------------------
# Dispatch and detection
# ---------------------------------------------------------------------------


class TestParseCaptions:

    @pytest.mark.parametrize("fixture_name, expected", [
        ("json3_payload", "json3"),
        ("srv3_payload", "srv3"),
        ("srv1_payload", "srv1"),
        ("panel_payload", "panel"),
    ])
    def test_detect_format(self, fixture_name, expected, request):
        assert detect_format(request.getfixturevalue(fixture_name)) == expected

    def test_detect_segments_list(self):
        assert detect_format('  [{"text": "a", "start": 0}]') == "segments"

    def test_auto_matches_explicit(self, srv3_payload):
        assert parse_captions(srv3_payload) == parse_captions(srv3_payload, "srv3")

    def test_unknown_format(self):
        with pytest.raises(CaptionParseError, match="Unknown caption format"):
            parse_captions("[]", "vtt")

    def test_invalid_json(self):
        with pytest.raises(CaptionParseError, match="not valid JSON"):
            parse_captions("{not json", "json3")

    def test_invalid_xml(self):
        with pytest.raises(CaptionParseError, match="not valid XML"):
            parse_captions("<timedtext><p>", "auto")

    def test_panel_final_duration_defaults_from_config(self, panel_payload):
        from shadowtalk.config import DEFAULT_FINAL_SEGMENT_DURATION_S

        segments = parse_captions(panel_payload, "panel")
        assert segments[-1].duration == DEFAULT_FINAL_SEGMENT_DURATION_S

    def test_caption_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_captions("<", "srv1")


# ---------------------------------------------------------------------------
# Full pipeline
# ---------------------------------------------------------------------------


class TestSentencesFromCaptions:

    def test_json3_to_sentences(self, json3_payload):
        sentences = sentences_from_captions(json3_payload)
        assert [(s.text, s.start_time, s.end_time) for s in sentences] == [
            ("Hello world.", 0.0, 1.5),
            ("Bye.", 2.0, 3.0),
        ]

    def test_panel_to_sentences_in_gap_mode(self):
        raw = "0:00 hello everyone\n0:02 welcome to the show"
        sentences = sentences_from_captions(raw, final_duration_s=1.0)
        assert [(s.text, s.start_time, s.end_time) for s in sentences] == [
            ("hello everyone welcome to the show", 0.0, 3.0),
        ]

    def test_config_is_forwarded(self):
        raw = json.dumps([
            {"text": "a b", "start": 0, "duration": 1},
            {"text": "c", "start": 1, "duration": 1},
        ])
        sentences = sentences_from_captions(raw, "segments", SegmenterConfig(max_sentence_words=2))
        assert [s.text for s in sentences] == ["a b", "c"]

    @pytest.mark.parametrize("raw", ['{"events": []}', "   ", "[]"])
    def test_empty_payload_raises(self, raw):
        with pytest.raises(EmptyInputError, match="Transcript is empty"):
            sentences_from_captions(raw)

    def test_bad_timing_raises(self):
        raw = json.dumps([
            {"text": "late", "start": 5, "duration": 1},
            {"text": "early", "start": 1, "duration": 1},
        ])
        with pytest.raises(InvalidSegmentError):
            sentences_from_captions(raw)
