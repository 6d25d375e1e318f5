"""Shared test fixtures for the caption_timeline test suite.

WHY: Most test modules need the same small transcript: two bursts of speech
separated by a pause, so the default two-word threshold produces exactly
two pages. Centralizing it keeps the expected frame numbers in one place.

HOW: SAMPLE_CAPTIONS is the raw transcript JSON (camelCase, as stored under
``subs/``). Fixtures provide the parsed WordCaption tuple, default props,
and an on-disk uploads/subs layout for loader, CLI, and API tests.

RULES:
- Default config: 2 words per caption -> 600 ms threshold and max window
- At 60 fps the sample schedules to windows [0, 36) and [90, 126)
- The memoized transform cache is cleared before every test
"""

import json
from typing import Any, Dict, List

import pytest

from caption_timeline.core.ir import WordCaption
from caption_timeline.core.options import CaptionedVideoProps
from caption_timeline.core.pipeline import clear_cache


SAMPLE_CAPTIONS: List[Dict[str, Any]] = [
    {"text": "Hey",       "startMs": 0,    "endMs": 200,  "timestampMs": 100,  "confidence": 0.98},
    {"text": " there",    "startMs": 220,  "endMs": 480,  "timestampMs": 350,  "confidence": 0.95},
    {"text": " welcome",  "startMs": 1500, "endMs": 1900, "timestampMs": 1700, "confidence": 0.97},
    {"text": " back",     "startMs": 1950, "endMs": 2200, "timestampMs": 2075, "confidence": 0.96},
    {"text": " everyone", "startMs": 2300, "endMs": 2800, "timestampMs": 2550, "confidence": 0.93},
]


@pytest.fixture(autouse=True)
def _fresh_transform_cache():
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def sample_captions():
    """Raw transcript JSON objects."""
    return [dict(c) for c in SAMPLE_CAPTIONS]


@pytest.fixture
def sample_words():
    """SAMPLE_CAPTIONS parsed into WordCaption objects."""
    return tuple(WordCaption.from_dict(c) for c in SAMPLE_CAPTIONS)


@pytest.fixture
def media_tree(tmp_path):
    """A video under uploads/ with its transcript under subs/.

    Returns the video path; the transcript is at the derived location.
    """
    uploads = tmp_path / "uploads"
    subs = tmp_path / "subs"
    uploads.mkdir()
    subs.mkdir()
    video = uploads / "clip.mp4"
    video.write_bytes(b"not really a video")
    (subs / "clip.json").write_text(json.dumps(SAMPLE_CAPTIONS), encoding="utf-8")
    return video


@pytest.fixture
def sample_props(media_tree):
    return CaptionedVideoProps(src=str(media_tree))
