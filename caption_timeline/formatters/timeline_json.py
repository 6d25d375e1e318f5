"""Timeline JSON formatter — the frame schedule for a rendering driver.

WHY: The renderer is decoupled from the scheduling code. It only needs an
ordered list of (startFrame, durationFrames, page) entries plus the
styling to draw each page with. JSON is the hand-off format.

HOW: Serializes the Timeline into a single document and validates it
against TIMELINE_SCHEMA with jsonschema before returning it, so a driver
never receives a structurally broken schedule.

RULES:
- One output file: ``-timeline.json``
- Keys are camelCase to match the composition props vocabulary
- ``durationInFrames`` is null when the video length is unknown
- Each window carries ``pageIndex`` (stable render key) and ``endFrame``
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

import jsonschema

from caption_timeline.core.ir import DisplayWindow, Timeline
from caption_timeline.formatters.base import BaseFormatter, FormatterOutput

_TOKEN_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["text", "startMs"],
    "properties": {
        "text": {"type": "string"},
        "startMs": {"type": "number", "minimum": 0},
    },
}

TIMELINE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["source", "fps", "durationInFrames", "style", "windows"],
    "properties": {
        "source": {"type": "string"},
        "fps": {"type": "number", "exclusiveMinimum": 0},
        "durationInFrames": {"type": ["integer", "null"], "minimum": 0},
        "style": {"type": "object"},
        "windows": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["pageIndex", "startFrame", "durationFrames", "endFrame", "page"],
                "properties": {
                    "pageIndex": {"type": "integer", "minimum": 0},
                    "startFrame": {"type": "integer", "minimum": 0},
                    "durationFrames": {"type": "integer", "minimum": 1},
                    "endFrame": {"type": "integer", "minimum": 1},
                    "page": {
                        "type": "object",
                        "required": ["startMs", "text", "tokens"],
                        "properties": {
                            "startMs": {"type": "number", "minimum": 0},
                            "text": {"type": "string"},
                            "tokens": {"type": "array", "minItems": 1, "items": _TOKEN_SCHEMA},
                        },
                    },
                },
            },
        },
    },
}


def _window_to_dict(window: DisplayWindow) -> Dict[str, Any]:
    return {
        "pageIndex": window.page_index,
        "startFrame": window.start_frame,
        "durationFrames": window.duration_frames,
        "endFrame": window.end_frame,
        "page": window.page.to_dict(),
    }


def timeline_to_dict(timeline: Timeline) -> Dict[str, Any]:
    """Plain-dict form of a Timeline (also used by the HTTP API)."""
    return {
        "source": timeline.source,
        "fps": timeline.fps,
        "durationInFrames": timeline.duration_in_frames,
        "style": timeline.presentation.to_dict(),
        "windows": [_window_to_dict(w) for w in timeline.windows],
    }


class TimelineJSONFormatter(BaseFormatter):
    """Formatter producing the frame schedule as one JSON document."""

    @property
    def name(self) -> str:
        return "Timeline JSON"

    def format(self, timeline: Timeline) -> List[FormatterOutput]:
        """Serialize and schema-validate the timeline.

        Raises:
            jsonschema.ValidationError: If the generated document does not
                conform to TIMELINE_SCHEMA.
        """
        doc = timeline_to_dict(timeline)
        jsonschema.validate(instance=doc, schema=TIMELINE_SCHEMA)
        return [FormatterOutput(
            suffix="-timeline.json",
            content=json.dumps(doc, indent=2, ensure_ascii=False),
            media_type="application/json",
        )]
