"""Fail-open transcript loading and shape validation.

WHY: A missing or broken transcript must never stop a video from rendering —
the video plays without captions instead. At the same time the transform
must only ever see well-formed words, so everything the source returns is
validated before it is trusted.

HOW: read_transcript() fetches a URL with httpx (or reads a local file),
decodes JSON, validates it against TRANSCRIPT_SCHEMA with jsonschema and
builds WordCaption objects. Any failure along the way is re-raised as
TranscriptLoadError. load_transcript() is the fail-open wrapper: it derives
the location from the video path, calls read_transcript(), and converts
TranscriptLoadError into a logged, empty transcript.

RULES:
- Non-2xx responses, transport errors, unreadable or non-UTF-8 files,
  invalid or too deeply nested JSON, wrong shape, and negative/non-finite
  timestamps all degrade to ()
- Failures are logged at ERROR (fetch) or WARNING (shape) with the location
- A provided httpx.AsyncClient is used as-is and never closed here
- Word order is preserved exactly as stored
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional, Tuple

import httpx
import jsonschema

from caption_timeline.config import FETCH_TIMEOUT_S, SUBS_BASE_URL
from caption_timeline.core.ir import WordCaption
from caption_timeline.transcript.paths import is_remote, resolve_location, subtitles_path_for

logger = logging.getLogger(__name__)

TRANSCRIPT_SCHEMA: dict = {
    "type": "array",
    "items": {
        "type": "object",
        "required": ["text", "startMs"],
        "properties": {
            "text": {"type": "string"},
            "startMs": {"type": "number", "minimum": 0},
            "endMs": {"type": ["number", "null"], "minimum": 0},
            "timestampMs": {"type": ["number", "null"]},
            "confidence": {"type": ["number", "null"]},
        },
    },
}
"""JSON schema of a word transcript (array of caption objects)."""


class TranscriptLoadError(Exception):
    """Raised when a transcript cannot be fetched, decoded, or validated.

    RULES:
    - location is the URL or file path that failed
    - reason is a short human-readable cause
    - malformed is True when the source answered but the content was unusable
    """

    def __init__(self, location: str, reason: str, malformed: bool = False) -> None:
        self.location = location
        self.reason = reason
        self.malformed = malformed
        super().__init__("Could not load transcript {}: {}".format(location, reason))


def parse_transcript(data: Any, location: str = "<memory>") -> Tuple[WordCaption, ...]:
    """Validate decoded transcript JSON and build WordCaption objects.

    Raises:
        TranscriptLoadError: If the data does not match TRANSCRIPT_SCHEMA or
            holds out-of-range values (e.g. NaN timestamps).
    """
    try:
        jsonschema.validate(instance=data, schema=TRANSCRIPT_SCHEMA)
    except jsonschema.ValidationError as exc:
        raise TranscriptLoadError(
            location, "invalid shape: {}".format(exc.message), malformed=True
        ) from exc

    try:
        return tuple(WordCaption.from_dict(item) for item in data)
    except (TypeError, ValueError) as exc:
        raise TranscriptLoadError(
            location, "invalid value: {}".format(exc), malformed=True
        ) from exc


async def _fetch_text(location: str, client: httpx.AsyncClient) -> str:
    try:
        resp = await client.get(location)
    except httpx.HTTPError as exc:
        raise TranscriptLoadError(location, "request failed: {}".format(exc)) from exc
    if resp.status_code // 100 != 2:
        raise TranscriptLoadError(
            location, "HTTP {} {}".format(resp.status_code, resp.reason_phrase)
        )
    return resp.text


async def read_transcript(
    location: str,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = FETCH_TIMEOUT_S,
) -> Tuple[WordCaption, ...]:
    """Fetch or read a transcript and parse it.

    Args:
        location: http(s) URL or local file path of the transcript JSON.
        client: Optional shared httpx.AsyncClient (used for URLs only).
        timeout: Request timeout in seconds when a client is created here.

    Raises:
        TranscriptLoadError: On any fetch, decode, or validation failure.
    """
    if is_remote(location):
        if client is not None:
            text = await _fetch_text(location, client)
        else:
            async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as own_client:
                text = await _fetch_text(location, own_client)
    else:
        try:
            text = Path(location).read_text(encoding="utf-8")
        except OSError as exc:
            raise TranscriptLoadError(location, "unreadable file: {}".format(exc)) from exc
        except UnicodeDecodeError as exc:
            raise TranscriptLoadError(
                location, "not UTF-8 text: {}".format(exc), malformed=True
            ) from exc

    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as exc:
        raise TranscriptLoadError(
            location, "invalid JSON: {}".format(exc), malformed=True
        ) from exc

    return parse_transcript(data, location)


async def load_transcript(
    src: str,
    client: Optional[httpx.AsyncClient] = None,
    base_url: Optional[str] = SUBS_BASE_URL,
    subtitles: Optional[str] = None,
    timeout: float = FETCH_TIMEOUT_S,
) -> Tuple[WordCaption, ...]:
    """Load the word transcript for a video, returning () on any failure.

    WHY: This is the single suspension point of the caption pipeline. The
    composition awaits it before building the timeline, and a failure must
    resume the render with no captions rather than stall or crash it.

    Args:
        src: Path or URL of the source video.
        client: Optional shared httpx.AsyncClient.
        base_url: Base URL for relative transcript paths (None = local files).
        subtitles: Explicit transcript location, bypassing path derivation.
        timeout: Request timeout in seconds.

    Returns:
        Word captions in stored order, or an empty tuple.
    """
    location = resolve_location(subtitles or subtitles_path_for(src), base_url)
    try:
        words = await read_transcript(location, client=client, timeout=timeout)
    except TranscriptLoadError as exc:
        if exc.malformed:
            logger.warning("Ignoring malformed transcript %s: %s", exc.location, exc.reason)
        else:
            logger.error("Error fetching subtitles %s: %s", exc.location, exc.reason)
        return ()

    logger.debug("Loaded %d words from %s", len(words), location)
    return words
