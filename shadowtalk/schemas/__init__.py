"""JSON Schemas for the structured output documents.

WHY: Sentence lists and score reports are consumed by other programs
(playback and presentation front ends). Validating every document against
a checked-in schema before it leaves the package keeps that contract
honest.

HOW: Schemas live next to this module as ``<name>.schema.json`` and are
loaded once on first use.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

_SCHEMA_DIR = Path(__file__).resolve().parent

_CACHED_SCHEMAS: Dict[str, Dict[str, Any]] = {}


def load_schema(name: str) -> Dict[str, Any]:
    """Load and cache the schema ``schemas/<name>.schema.json``."""
    if name not in _CACHED_SCHEMAS:
        path = _SCHEMA_DIR / "{}.schema.json".format(name)
        with open(path, encoding="utf-8") as f:
            _CACHED_SCHEMAS[name] = json.load(f)
    return _CACHED_SCHEMAS[name]
