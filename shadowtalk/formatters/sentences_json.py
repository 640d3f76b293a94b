"""Sentence list JSON formatter.

WHY: The playback collaborator needs the sentence list as a structured,
stable document it can load without knowing anything about caption
formats. This is also the format the ``session`` CLI command reads back.

HOW: Serialises each Sentence with to_dict() under a top-level
"sentences" key, validates the document against
schemas/sentences.schema.json, and pretty-prints it.

RULES:
- Output suffix: "-sentences.json"; media type "application/json"
- Validate before returning; jsonschema.ValidationError propagates
- load_sentences() accepts exactly what format() produces
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

import jsonschema

from shadowtalk.core.ir import Sentence
from shadowtalk.formatters.base import BaseFormatter, FormatterOutput
from shadowtalk.schemas import load_schema


def sentences_document(sentences: Sequence[Sentence], source_name: str = "") -> Dict[str, Any]:
    """Build and validate the JSON-ready sentence list document."""
    document: Dict[str, Any] = {
        "source": source_name,
        "sentences": [s.to_dict() for s in sentences],
    }
    jsonschema.validate(instance=document, schema=load_schema("sentences"))
    return document


def load_sentences(raw: str) -> List[Sentence]:
    """Read a sentence list document back into Sentence records.

    Raises:
        ValueError: If the text is not JSON.
        jsonschema.ValidationError: If the document does not match the schema.
    """
    document = json.loads(raw)
    jsonschema.validate(instance=document, schema=load_schema("sentences"))
    return [Sentence.from_dict(item) for item in document["sentences"]]


class SentencesJSONFormatter(BaseFormatter):
    """Formatter that produces the schema-validated sentence list."""

    @property
    def name(self) -> str:
        return "Sentences JSON"

    def format(self, sentences: Sequence[Sentence], source_name: str = "") -> List[FormatterOutput]:
        document = sentences_document(sentences, source_name)
        return [
            FormatterOutput(
                suffix="-sentences.json",
                content=json.dumps(document, indent=2, ensure_ascii=False) + "\n",
                media_type="application/json",
            )
        ]
