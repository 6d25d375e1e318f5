"""Configuration constants, caption defaults, and .env loading.

WHY: Centralizes every tunable value — frame rate, reading speed, styling
defaults, transcript location, probe binary — so they are easy to find and
override without touching the pipeline code.

HOW: python-dotenv loads the .env file on import. Constants are plain
module-level values. Deployment-specific settings read from environment
variables with sensible defaults.

RULES:
- FPS is fixed at 60 for the captioned video composition
- BASE_SWITCH_SPEED_MS is the assumed reading time per word (300 ms)
- Presentation defaults are forwarded opaquely to the renderer
- All environment overrides are optional
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Timing
# ---------------------------------------------------------------------------

FPS = 60
"""Frame rate of the captioned video composition."""

BASE_SWITCH_SPEED_MS = 300
"""Assumed per-word reading time used to derive the caption switch speed."""

DEFAULT_WORDS_PER_CAPTION = 2

# ---------------------------------------------------------------------------
# Presentation defaults (renderer-owned, no timing semantics)
# ---------------------------------------------------------------------------

DEFAULT_FONT_SIZE = 120
DEFAULT_FONT_COLOR = "white"
DEFAULT_STROKE_COLOR = "black"
DEFAULT_STROKE_WIDTH = 20
DEFAULT_HIGHLIGHT_COLOR = "#39E508"
DEFAULT_Y_POSITION = 350
DEFAULT_ASPECT_RATIO = "9:16"

# ---------------------------------------------------------------------------
# Transcript location
# ---------------------------------------------------------------------------

VIDEO_EXTENSIONS: tuple[str, ...] = (".mp4", ".mkv", ".mov", ".webm")
"""Video suffixes swapped for ``.json`` when deriving the subtitles path (in priority order)."""

UPLOADS_SEGMENT = "uploads"
SUBS_SEGMENT = "subs"

SUBS_BASE_URL = os.getenv("CAPTION_SUBS_BASE_URL", "").strip() or None
"""Base URL that relative subtitles paths are resolved against. Unset = local files."""

FETCH_TIMEOUT_S = float(os.getenv("CAPTION_FETCH_TIMEOUT_S", "30"))

# ---------------------------------------------------------------------------
# Media probing and API
# ---------------------------------------------------------------------------

FFPROBE_BINARY = os.getenv("FFPROBE_BINARY", "ffprobe")
PROBE_TIMEOUT_S = float(os.getenv("CAPTION_PROBE_TIMEOUT_S", "30"))

API_HOST = os.getenv("CAPTION_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("CAPTION_API_PORT", "8000"))

API_ALLOW_LOCAL_TRANSCRIPTS = (
    os.getenv("CAPTION_API_ALLOW_LOCAL", "").strip().lower() in ("1", "true", "yes")
)
"""Let API callers name transcripts on the server's filesystem. Off = http(s) only."""
