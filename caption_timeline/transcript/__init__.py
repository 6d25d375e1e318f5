"""Transcript source — subtitles path derivation and fail-open loading.

WHY: Transcripts live next to their videos under a parallel directory
("uploads" -> "subs") with a ``.json`` extension. Loading one is the only
I/O the caption pipeline depends on, and it must never block a render.

HOW: paths.py derives the subtitles location from a video path, loader.py
fetches (httpx) or reads the JSON, validates its shape (jsonschema), and
returns WordCaption tuples — or an empty tuple on any failure.

RULES:
- All transcript I/O goes through load_transcript()
- Failures are logged and degrade to an empty transcript
"""

from caption_timeline.transcript.loader import (
    TranscriptLoadError,
    load_transcript,
    parse_transcript,
    read_transcript,
)
from caption_timeline.transcript.paths import resolve_location, subtitles_path_for

__all__ = [
    "TranscriptLoadError",
    "load_transcript",
    "parse_transcript",
    "read_transcript",
    "resolve_location",
    "subtitles_path_for",
]
