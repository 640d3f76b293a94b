"""Unit tests for the sentence formatters and the score report.

WHY: The sentence list and score report are read by other programs. A
document that drifts from its schema breaks them without any error on
this side.

HOW: Each formatter is run on the sample sentences from conftest.py and
its output is parsed back and checked against the checked-in schemas.
"""

import json

import jsonschema
import pytest

from shadowtalk.core.ir import Sentence
from shadowtalk.core.scorer import score
from shadowtalk.formatters import (
    FORMATTERS,
    format_score_report,
    load_sentences,
    render_score_text,
    score_report,
)
from shadowtalk.formatters.plain_text import PlainTextFormatter, format_clock
from shadowtalk.formatters.sentences_json import SentencesJSONFormatter, sentences_document
from shadowtalk.schemas import load_schema


class TestRegistry:

    def test_registered_formats(self):
        assert set(FORMATTERS) == {"sentences_json", "plain_text"}

    @pytest.mark.parametrize("key", sorted(FORMATTERS))
    def test_every_formatter_produces_hyphenated_suffix(self, key, sample_sentences):
        formatter = FORMATTERS[key]()
        assert formatter.name
        outputs = formatter.format(sample_sentences, source_name="lecture")
        assert outputs
        for output in outputs:
            assert output.suffix.startswith("-")
            assert output.content.endswith("\n")


class TestSentencesJSON:

    def test_document_matches_schema(self, sample_sentences):
        output = SentencesJSONFormatter().format(sample_sentences, source_name="lecture")[0]
        assert output.suffix == "-sentences.json"
        assert output.media_type == "application/json"
        document = json.loads(output.content)
        jsonschema.validate(instance=document, schema=load_schema("sentences"))
        assert document["source"] == "lecture"
        assert document["sentences"][0] == {
            "text": "Hello world.",
            "start_time": 0.0,
            "end_time": 2.0,
        }

    def test_load_sentences_reads_formatter_output(self, sample_sentences):
        output = SentencesJSONFormatter().format(sample_sentences)[0]
        assert load_sentences(output.content) == sample_sentences

    def test_load_sentences_rejects_wrong_shape(self):
        with pytest.raises(jsonschema.ValidationError):
            load_sentences(json.dumps({"sentences": [{"text": "no times"}]}))

    def test_from_dict_rejects_non_string_text(self):
        with pytest.raises(TypeError):
            Sentence.from_dict({"text": None, "start_time": 0, "end_time": 1})

    def test_empty_sentence_text_fails_validation(self):
        with pytest.raises(jsonschema.ValidationError):
            sentences_document([Sentence("", 0.0, 1.0)])

    def test_empty_list_is_valid(self):
        assert sentences_document([]) == {"source": "", "sentences": []}


class TestPlainText:

    @pytest.mark.parametrize("seconds, expected", [
        (0.0, "00:00.000"),
        (5.5, "00:05.500"),
        (65.25, "01:05.250"),
        (3725.25, "1:02:05.250"),
    ])
    def test_format_clock(self, seconds, expected):
        assert format_clock(seconds) == expected

    def test_one_line_per_sentence(self, sample_sentences):
        output = PlainTextFormatter().format(sample_sentences)[0]
        assert output.suffix == "-sentences.txt"
        assert output.content.splitlines() == [
            "[00:00.000 --> 00:02.000] Hello world.",
            "[00:02.000 --> 00:04.000] How are you?",
            "[00:04.000 --> 00:06.000] Fine thanks.",
        ]

    def test_empty_list_gives_empty_content(self):
        assert PlainTextFormatter().format([])[0].content == ""


class TestScoreReport:

    def test_report_adds_grade_and_validates(self):
        result = score("hello everyone welcome to the show", "hello everyone welcome the show")
        report = score_report(result)
        assert report["score"] == 83
        assert report["grade"] == "great"
        assert report["message"] == "Great job!"
        assert "reference" not in report
        jsonschema.validate(instance=report, schema=load_schema("alignment_result"))

    def test_json_report_echoes_texts(self):
        result = score("go home", None)
        report = json.loads(format_score_report(result, "go home", None))
        assert report["reference"] == "go home"
        assert report["candidate"] is None
        assert report["grade"] == "poor"
        assert report["candidate_tokens"] == []

    def test_render_text(self):
        result = score("hello everyone welcome to the show", "hello everyone welcome the show")
        assert render_score_text(result) == (
            "83% - Great job! (5/6 words)\n"
            "hello everyone welcome [to] the show"
        )

    def test_render_text_marks_close_and_extra(self):
        result = score("I recognize it", "um I recognise it")
        lines = render_score_text(result).splitlines()
        assert lines[1] == "i ~recognize~ it"
        assert lines[2] == "extra: um"
