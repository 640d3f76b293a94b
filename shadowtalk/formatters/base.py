"""Abstract base formatter and output container.

WHY: Every sentence output format consumes the same list of Sentence
records but produces different file content. This base class enforces a
consistent interface so the CLI and API layers can work with any
formatter generically.

HOW: BaseFormatter is an ABC with two requirements: a ``name`` property
and a ``format()`` method. FormatterOutput is a plain dataclass that
bundles a file suffix with its content and MIME type.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` returns a list so a formatter may emit several files
- ``suffix`` starts with a hyphen, e.g. ``"-sentences.json"``
- The caller is responsible for prepending the source filename stem
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Sequence

from shadowtalk.core.ir import Sentence


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the source stem,
                e.g. ``"-sentences.json"`` → ``"lecture-sentences.json"``.
        content: The file content.
        media_type: MIME type for the content, e.g. ``"application/json"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all sentence output formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'Sentences JSON'."""

    @abstractmethod
    def format(self, sentences: Sequence[Sentence], source_name: str = "") -> List[FormatterOutput]:
        """Convert sentences into one or more output files.

        Args:
            sentences: Sentences in stream order.
            source_name: Name of the caption source (for embedding in output).

        Returns:
            List of FormatterOutput objects.
        """
