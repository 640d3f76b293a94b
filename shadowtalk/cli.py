"""Command-line interface for ShadowTalk.

WHY: Users need a simple way to turn a downloaded caption file into
sentences, to check how a spoken attempt scores, and to total up a
practice run, all from the terminal and without a browser.

HOW: argparse with three subcommands:
  segment  parse a caption file, merge into sentences, save outputs
  score    score one spoken attempt against one reference sentence
  session  score a list of attempts against a saved sentence list
Status messages go to stderr; machine output (score JSON, summaries) goes
to stdout so the CLI can be piped.

RULES:
- segment output naming: {stem}{suffix}, numeric suffix for conflicts
  (lecture-sentences-2.json); never overwrites
- "-" as an input path reads stdin
- Domain errors print "Error: ..." to stderr and exit 1
- --verbose switches logging to DEBUG; default level is WARNING
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import jsonschema

from shadowtalk import __version__
from shadowtalk.adapters.caption_adapter import CAPTION_FORMATS, sentences_from_captions
from shadowtalk.config import (
    DEFAULT_FINAL_SEGMENT_DURATION_S,
    GAP_THRESHOLD_S,
    MAX_SENTENCE_WORDS,
)
from shadowtalk.core.scorer import score
from shadowtalk.core.segmenter import SegmenterConfig
from shadowtalk.core.session import score_attempts
from shadowtalk.formatters import FORMATTERS, format_score_report, load_sentences, render_score_text
from shadowtalk.formatters.base import FormatterOutput

logger = logging.getLogger(__name__)


class CLIError(Exception):
    """Raised for user-facing CLI problems (bad paths, unknown formats)."""


def _status(msg: str) -> None:
    """Print a status message to stderr.

    Status output must not pollute stdout so the CLI can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _read_input(path_arg: str) -> str:
    """Read a text file, or stdin when the path is "-"."""
    if path_arg == "-":
        return sys.stdin.read()
    path = Path(path_arg)
    if not path.is_file():
        raise CLIError("File not found: {}".format(path))
    return path.read_text(encoding="utf-8")


def _resolve_output_path(
    stem: str,
    suffix: str,
    output_dir: Path,
) -> Path:
    """Resolve the output file path, adding numeric suffix on conflict.

    WHY: Users may segment the same caption file several times with
    different thresholds. Overwriting previous output would lose work.

    RULES:
    - First attempt: {stem}{suffix} (e.g. lecture-sentences.json)
    - Conflict: insert counter before the extension
      (e.g. lecture-sentences-2.json)
    - Counter starts at 2 and increments
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    # "-sentences.json" → ("-sentences", ".json")
    dot_idx = suffix.rfind(".")
    if dot_idx > 0:
        suffix_name = suffix[:dot_idx]
        suffix_ext = suffix[dot_idx:]
    else:
        suffix_name = suffix
        suffix_ext = ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(output: FormatterOutput, stem: str, output_dir: Path) -> Path:
    """Write one formatter output to a conflict-free path and return the path."""
    path = _resolve_output_path(stem, output.suffix, output_dir)
    path.write_text(output.content, encoding="utf-8")
    return path


def _parse_format_keys(formats: Optional[str]) -> List[str]:
    if not formats:
        return list(FORMATTERS.keys())
    keys = [f.strip() for f in formats.split(",") if f.strip()]
    for key in keys:
        if key not in FORMATTERS:
            raise CLIError(
                "Unknown format '{}'. Available formats: {}".format(
                    key, ", ".join(sorted(FORMATTERS.keys()))
                )
            )
    return keys


def _cmd_segment(args: argparse.Namespace) -> None:
    format_keys = _parse_format_keys(args.formats)

    if args.captions_file == "-":
        stem = "stdin"
        default_dir = Path.cwd()
    else:
        input_path = Path(args.captions_file).resolve()
        stem = input_path.stem
        default_dir = input_path.parent

    output_dir = Path(args.output_dir).resolve() if args.output_dir else default_dir
    if not output_dir.is_dir():
        raise CLIError("Output directory does not exist: {}".format(output_dir))

    raw = _read_input(args.captions_file)
    config = SegmenterConfig(
        gap_threshold_s=args.gap_threshold,
        max_sentence_words=args.max_words,
    )

    _status("Segmenting captions...")
    sentences = sentences_from_captions(
        raw,
        fmt=args.caption_format,
        config=config,
        final_duration_s=args.final_duration,
    )
    _status("  {} sentences".format(len(sentences)))

    saved: List[Path] = []
    for key in format_keys:
        formatter = FORMATTERS[key]()
        for output in formatter.format(sentences, source_name=stem):
            path = _save_output(output, stem, output_dir)
            saved.append(path)
            _status("  Saved: {}".format(path.name))

    _status("Done! Saved {} file(s) to {}".format(len(saved), output_dir))


def _cmd_score(args: argparse.Namespace) -> None:
    result = score(args.reference, args.candidate)
    if args.json:
        print(format_score_report(result, args.reference, args.candidate))
    else:
        print(render_score_text(result))


def _cmd_session(args: argparse.Namespace) -> None:
    sentences = load_sentences(_read_input(args.sentences_file))
    attempts = json.loads(_read_input(args.attempts_file))
    if not isinstance(attempts, list) or not all(
        a is None or isinstance(a, str) for a in attempts
    ):
        raise CLIError("Attempts file must be a JSON list of strings or nulls")

    results, summary = score_attempts(sentences, attempts)

    if args.json:
        payload = {
            "results": [r.to_dict() if r is not None else None for r in results],
            "summary": summary.to_dict(),
        }
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    for index, result in enumerate(results):
        label = "#{} {}".format(index + 1, sentences[index].text)
        if result is None:
            print("{}\n  skipped".format(label))
        else:
            print("{}\n  {}%".format(label, result.score))
    print("Average: {}% over {} sentence(s)".format(summary.average_score, summary.total_sentences))


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    Separate from main() so tests can inspect the parser without running
    a command.
    """
    parser = argparse.ArgumentParser(
        prog="shadowtalk",
        description="Reconstruct sentences from caption tracks and score "
                    "spoken shadowing attempts.",
    )
    parser.add_argument("--version", action="version", version="%(prog)s {}".format(__version__))
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging on stderr.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    seg = sub.add_parser("segment", help="Merge a caption file into timed sentences.")
    seg.add_argument("captions_file", help="Caption file path, or '-' for stdin.")
    seg.add_argument(
        "--caption-format",
        choices=CAPTION_FORMATS,
        default="auto",
        help="Caption payload format (default: %(default)s).",
    )
    seg.add_argument(
        "--formats",
        default=None,
        help="Comma-separated output formats. Available: {}. Default: all.".format(
            ", ".join(sorted(FORMATTERS.keys()))
        ),
    )
    seg.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: next to the input file).",
    )
    seg.add_argument(
        "--gap-threshold",
        type=float,
        default=GAP_THRESHOLD_S,
        help="Silence in seconds that ends an unpunctuated sentence (default: %(default)s).",
    )
    seg.add_argument(
        "--max-words",
        type=int,
        default=MAX_SENTENCE_WORDS,
        help="Word cap for unpunctuated sentences (default: %(default)s).",
    )
    seg.add_argument(
        "--final-duration",
        type=float,
        default=DEFAULT_FINAL_SEGMENT_DURATION_S,
        help="Duration of the last transcript-panel row in seconds (default: %(default)s).",
    )
    seg.set_defaults(func=_cmd_segment)

    sc = sub.add_parser("score", help="Score a spoken attempt against a reference sentence.")
    sc.add_argument("reference", help="The reference sentence.")
    sc.add_argument("candidate", help="The recognised spoken attempt (may be empty).")
    sc.add_argument("--json", action="store_true", help="Print the JSON score report.")
    sc.set_defaults(func=_cmd_score)

    ses = sub.add_parser("session", help="Score a practice run against a sentence list.")
    ses.add_argument("sentences_file", help="A -sentences.json file from the segment command.")
    ses.add_argument(
        "attempts_file",
        help="JSON list with one attempt per sentence (string, or null when skipped).",
    )
    ses.add_argument("--json", action="store_true", help="Print results and summary as JSON.")
    ses.set_defaults(func=_cmd_session)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``shadowtalk`` console script.

    argv=None means use sys.argv (normal CLI invocation); explicit argv is
    for testing.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        args.func(args)
    except (CLIError, jsonschema.ValidationError, ValueError) as exc:
        # ValueError covers CaptionParseError, InvalidSegmentError, EmptyInputError
        logger.debug("Command failed", exc_info=True)
        message = exc.message if isinstance(exc, jsonschema.ValidationError) else str(exc)
        print("Error: {}".format(message), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
