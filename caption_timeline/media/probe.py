"""Probe a video's duration and derive the composition metadata.

WHY: The caption timeline is laid over a video whose length decides how
many frames the composition has. The length comes from the container
metadata, read with ffprobe.

HOW: probe_duration_s() runs ``ffprobe -show_format`` with JSON output and
reads ``format.duration``. calculate_metadata() applies the fixed frame
rate: ``duration_in_frames = floor(duration_s * FPS)``.

RULES:
- FPS is fixed at 60
- ffprobe failures (missing binary, non-zero exit, timeout, no duration)
  raise ProbeError; there is no silent default duration
"""

from __future__ import annotations

import json
import logging
import math
import subprocess
from dataclasses import dataclass
from typing import Optional

from caption_timeline.config import FFPROBE_BINARY, FPS, PROBE_TIMEOUT_S

logger = logging.getLogger(__name__)


class ProbeError(RuntimeError):
    """Raised when a video's duration cannot be determined."""


@dataclass(frozen=True)
class VideoMetadata:
    """Frame rate and length of the captioned video composition."""

    fps: float
    duration_in_frames: int


def probe_duration_s(
    src: str,
    ffprobe: str = FFPROBE_BINARY,
    timeout: float = PROBE_TIMEOUT_S,
) -> float:
    """Return the duration of a video file or URL in seconds.

    Raises:
        ProbeError: If ffprobe is missing, fails, or reports no positive duration.
    """
    cmd = [
        ffprobe,
        "-v", "error",
        "-print_format", "json",
        "-show_format",
        src,
    ]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except FileNotFoundError as exc:
        raise ProbeError("ffprobe not found: {}".format(ffprobe)) from exc
    except subprocess.TimeoutExpired as exc:
        raise ProbeError("ffprobe timed out after {}s on {}".format(timeout, src)) from exc

    if result.returncode != 0:
        raise ProbeError("ffprobe failed on {}: {}".format(src, result.stderr.strip()))

    try:
        info = json.loads(result.stdout)
        duration = float(info["format"]["duration"])
    except (ValueError, KeyError, TypeError) as exc:
        raise ProbeError("No duration reported for {}".format(src)) from exc

    if not math.isfinite(duration) or duration <= 0:
        raise ProbeError("Invalid duration {!r} for {}".format(duration, src))

    logger.debug("Probed %s: %.3f s", src, duration)
    return duration


def calculate_metadata(
    src: Optional[str] = None,
    duration_s: Optional[float] = None,
    fps: float = FPS,
) -> VideoMetadata:
    """Composition metadata for a video: fixed fps and its length in frames.

    Either pass a known ``duration_s`` or a ``src`` to probe.
    """
    if duration_s is None:
        if src is None:
            raise ValueError("calculate_metadata needs either src or duration_s")
        duration_s = probe_duration_s(src)
    elif not math.isfinite(duration_s) or duration_s < 0:
        raise ValueError("Video duration must be a finite number >= 0, got {!r}".format(duration_s))
    return VideoMetadata(fps=fps, duration_in_frames=math.floor(duration_s * fps))
