"""Abstract base formatter and output container.

WHY: Every export consumes the same Timeline but produces different file
content. This base class gives the CLI and API one interface for all of
them.

HOW: BaseFormatter is an ABC with a ``name`` property and a ``format()``
method. FormatterOutput bundles a file suffix with its content and MIME
type.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` returns a list; single-file formatters return one item
- ``suffix`` starts with a hyphen, e.g. ``"-timeline.json"``
- The caller prepends the source video's filename stem
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Union

from caption_timeline.core.ir import Timeline


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the source stem,
                e.g. ``"-timeline.json"`` -> ``"clip-timeline.json"``.
        content: The file content as a string or bytes.
        media_type: MIME type for the content.
    """

    suffix: str
    content: Union[str, bytes]
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all timeline exporters.

    To add a new export format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'Timeline JSON'."""

    @abstractmethod
    def format(self, timeline: Timeline) -> List[FormatterOutput]:
        """Serialize a Timeline into one or more output files."""
