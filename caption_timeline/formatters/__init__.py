"""Timeline exporter registry.

WHY: The CLI and API need a single lookup to find an exporter by name.
Adding a format means creating the formatter class, importing it here, and
adding one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["timeline_json"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags and API queries)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from caption_timeline.formatters.srt_pages import SRTPagesFormatter
from caption_timeline.formatters.timeline_json import TimelineJSONFormatter

if TYPE_CHECKING:
    from caption_timeline.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "timeline_json": TimelineJSONFormatter,
    "srt_pages": SRTPagesFormatter,
}
