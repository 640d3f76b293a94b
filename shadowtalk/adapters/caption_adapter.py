"""Adapter: raw caption payloads to CaptionSegment lists.

WHY: Caption sources deliver the same information in several shapes:
YouTube's json3 event stream, srv3 and srv1 timed-text XML, pre-parsed
segment lists, or a transcript panel copied as plain text with only start
timestamps. The segmenter accepts exactly one shape (ordered
CaptionSegments), so every source format is reduced to it here.

HOW: parse_captions() dispatches on an explicit format name or sniffs the
payload ("auto"): JSON with an "events" key is json3, other JSON is a
segment list, XML with timestamped <p> elements is srv3, other XML is
srv1, and anything else is treated as transcript-panel text. Each parser
returns fragments with trimmed, entity-decoded, whitespace-collapsed text.

RULES:
- json3: text = concatenated segs[].utf8; times from tStartMs / dDurationMs
- srv3: <p t="ms" d="ms">, inner markup stripped
- srv1: <text start="s" dur="s">, missing dur -> 0
- panel: rows start with an M:SS or H:MM:SS timestamp; duration runs to the
  next row's start; the last row gets final_duration_s
- Fragments whose text is empty after cleaning are dropped
- Malformed payloads raise CaptionParseError; timing is NOT validated here
  (that is the segmenter's job)
"""

from __future__ import annotations

import html
import json
import logging
import re
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional, Tuple

from shadowtalk.config import DEFAULT_FINAL_SEGMENT_DURATION_S
from shadowtalk.core.ir import CaptionSegment, Sentence
from shadowtalk.core.segmenter import EmptyInputError, SegmenterConfig, merge_into_sentences

logger = logging.getLogger(__name__)

CAPTION_FORMATS = ("auto", "segments", "json3", "srv3", "srv1", "panel")

# A transcript panel row: "1:05 some text" or "1:02:03" alone on a line.
_PANEL_ROW_RE = re.compile(r"^(\d+:\d{2}(?::\d{2})?)(?:\s+(.*))?$")
_WHITESPACE_RE = re.compile(r"\s+")


class CaptionParseError(ValueError):
    """Raised when a caption payload cannot be parsed in the requested format."""


def _clean_text(text: str) -> str:
    """Decode HTML entities, collapse whitespace, and trim."""
    return _WHITESPACE_RE.sub(" ", html.unescape(text)).strip()


def parse_timestamp(timestamp: str) -> float:
    """Parse "H:MM:SS", "M:SS", or a bare number of seconds.

    Examples: "0:07" -> 7.0, "1:23:45" -> 5025.0, "12.5" -> 12.5
    """
    parts = re.sub(r"\s", "", timestamp).split(":")
    try:
        values = [float(p) for p in parts]
    except ValueError:
        raise CaptionParseError("Invalid timestamp {!r}".format(timestamp)) from None
    if len(values) == 3:
        return values[0] * 3600 + values[1] * 60 + values[2]
    if len(values) == 2:
        return values[0] * 60 + values[1]
    if len(values) == 1:
        return values[0]
    raise CaptionParseError("Invalid timestamp {!r}".format(timestamp))


def _load_json(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise CaptionParseError("Caption payload is not valid JSON: {}".format(exc)) from exc


def _load_xml(raw: str) -> ET.Element:
    try:
        return ET.fromstring(raw)
    except ET.ParseError as exc:
        raise CaptionParseError("Caption payload is not valid XML: {}".format(exc)) from exc


def parse_segments_json(raw: str) -> List[CaptionSegment]:
    """Parse a JSON list of ``{text, start, duration}`` objects.

    Also accepts an object wrapping the list under a "segments" key.
    """
    data = _load_json(raw)
    if isinstance(data, dict):
        data = data.get("segments")
    if not isinstance(data, list):
        raise CaptionParseError("Expected a JSON list of segments or an object with 'segments'")

    segments: List[CaptionSegment] = []
    for index, item in enumerate(data):
        try:
            seg = CaptionSegment.from_dict(item)
        except (KeyError, TypeError, ValueError) as exc:
            raise CaptionParseError(
                "Segment {} is malformed: {!r}".format(index, exc)
            ) from exc
        text = _clean_text(seg.text)
        if text:
            segments.append(CaptionSegment(text=text, start=seg.start, duration=seg.duration))
    return segments


def parse_json3(raw: str) -> List[CaptionSegment]:
    """Parse a YouTube json3 timed-text document."""
    data = _load_json(raw)
    if not isinstance(data, dict):
        raise CaptionParseError("json3 payload must be a JSON object")

    events = data.get("events") or []
    if not isinstance(events, list):
        raise CaptionParseError("json3 'events' must be a list")

    segments: List[CaptionSegment] = []
    for index, event in enumerate(events):
        segs = event.get("segs") if isinstance(event, dict) else None
        if not segs:
            continue
        if not isinstance(segs, list) or not all(
            isinstance(s, dict) and isinstance(s.get("utf8", ""), str) for s in segs
        ):
            raise CaptionParseError(
                "json3 event {} has malformed 'segs': expected objects with string 'utf8'".format(index)
            )
        text = _clean_text("".join(s.get("utf8", "") for s in segs))
        if not text:
            continue
        segments.append(CaptionSegment(
            text=text,
            start=_json3_ms(event, "tStartMs", index),
            duration=_json3_ms(event, "dDurationMs", index),
        ))
    return segments


def _json3_ms(event: Dict[str, Any], name: str, index: int) -> float:
    """Read a millisecond field of a json3 event as seconds; missing -> 0."""
    raw = event.get(name)
    if raw is None:
        return 0.0
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise CaptionParseError(
            "json3 event {} has non-numeric {}={!r}".format(index, name, raw)
        )
    return raw / 1000.0


def _float_attr(element: ET.Element, name: str, scale: float = 1.0) -> float:
    raw = element.get(name)
    if raw is None or raw == "":
        return 0.0
    try:
        return float(raw) / scale
    except ValueError:
        raise CaptionParseError(
            "Invalid {}={!r} on <{}>".format(name, raw, element.tag)
        ) from None


def _parse_srv3_root(root: ET.Element) -> List[CaptionSegment]:
    segments: List[CaptionSegment] = []
    for p in root.iter("p"):
        if p.get("t") is None:
            continue
        text = _clean_text("".join(p.itertext()))
        if not text:
            continue
        segments.append(CaptionSegment(
            text=text,
            start=_float_attr(p, "t", 1000.0),
            duration=_float_attr(p, "d", 1000.0),
        ))
    return segments


def _parse_srv1_root(root: ET.Element) -> List[CaptionSegment]:
    segments: List[CaptionSegment] = []
    for node in root.iter("text"):
        text = _clean_text("".join(node.itertext()))
        if not text:
            continue
        segments.append(CaptionSegment(
            text=text,
            start=_float_attr(node, "start"),
            duration=_float_attr(node, "dur"),
        ))
    return segments


def parse_srv3(raw: str) -> List[CaptionSegment]:
    """Parse srv3 timed-text XML (``<p t="ms" d="ms">``)."""
    return _parse_srv3_root(_load_xml(raw))


def parse_srv1(raw: str) -> List[CaptionSegment]:
    """Parse srv1 timed-text XML (``<text start="s" dur="s">``)."""
    return _parse_srv1_root(_load_xml(raw))


def parse_panel(
    raw: str,
    final_duration_s: float = DEFAULT_FINAL_SEGMENT_DURATION_S,
) -> List[CaptionSegment]:
    """Parse transcript-panel text: timestamp rows followed by caption text.

    WHY: A transcript panel only shows when each row starts. Durations are
    reconstructed from the next row's start time; the last row has no
    successor and gets final_duration_s.

    Example input::

        0:00
        Hello everyone
        0:02 welcome to the show
    """
    rows: List[Tuple[float, List[str]]] = []
    for line in raw.splitlines():
        line = line.strip()
        if not line:
            continue
        match = _PANEL_ROW_RE.match(line)
        if match:
            rest = match.group(2)
            rows.append((parse_timestamp(match.group(1)), [rest] if rest else []))
        elif rows:
            rows[-1][1].append(line)
        else:
            logger.debug("Ignoring transcript text before the first timestamp: %r", line)

    timed = [(start, _clean_text(" ".join(parts))) for start, parts in rows]
    timed = [(start, text) for start, text in timed if text]

    segments: List[CaptionSegment] = []
    for i, (start, text) in enumerate(timed):
        if i + 1 < len(timed):
            duration = timed[i + 1][0] - start
        else:
            duration = final_duration_s
        segments.append(CaptionSegment(text=text, start=start, duration=duration))
    return segments


def detect_format(raw: str) -> str:
    """Guess the caption format of a payload from its content."""
    stripped = raw.lstrip()
    if stripped.startswith("{") or stripped.startswith("["):
        data = _load_json(stripped)
        if isinstance(data, dict) and "events" in data:
            return "json3"
        return "segments"
    if stripped.startswith("<"):
        root = _load_xml(stripped)
        if any(p.get("t") is not None for p in root.iter("p")):
            return "srv3"
        return "srv1"
    return "panel"


def parse_captions(
    raw: str,
    fmt: str = "auto",
    final_duration_s: Optional[float] = None,
) -> List[CaptionSegment]:
    """Parse a caption payload into ordered CaptionSegments.

    Args:
        raw: The caption payload as text.
        fmt: One of CAPTION_FORMATS; "auto" sniffs the payload.
        final_duration_s: Duration for the last panel row. Defaults to
            DEFAULT_FINAL_SEGMENT_DURATION_S. Ignored by other formats.

    Raises:
        CaptionParseError: On an unknown format or a malformed payload.
    """
    if fmt not in CAPTION_FORMATS:
        raise CaptionParseError(
            "Unknown caption format '{}'. Available: {}".format(fmt, ", ".join(CAPTION_FORMATS))
        )
    if fmt == "auto":
        fmt = detect_format(raw)
        logger.debug("Detected caption format: %s", fmt)

    if fmt == "segments":
        segments = parse_segments_json(raw)
    elif fmt == "json3":
        segments = parse_json3(raw)
    elif fmt == "srv3":
        segments = parse_srv3(raw)
    elif fmt == "srv1":
        segments = parse_srv1(raw)
    else:
        final = DEFAULT_FINAL_SEGMENT_DURATION_S if final_duration_s is None else final_duration_s
        segments = parse_panel(raw, final_duration_s=final)

    logger.info("Parsed %d caption segments (%s)", len(segments), fmt)
    return segments


def sentences_from_captions(
    raw: str,
    fmt: str = "auto",
    config: Optional[SegmenterConfig] = None,
    final_duration_s: Optional[float] = None,
) -> List[Sentence]:
    """Parse a caption payload and merge it into sentences.

    Raises:
        CaptionParseError: If the payload cannot be parsed.
        InvalidSegmentError: If the parsed fragments have impossible timing.
        EmptyInputError: If the payload contains no caption text at all.
    """
    segments = parse_captions(raw, fmt, final_duration_s=final_duration_s)
    sentences = merge_into_sentences(segments, config)
    if not sentences:
        raise EmptyInputError("Transcript is empty: no sentences found.")
    return sentences
