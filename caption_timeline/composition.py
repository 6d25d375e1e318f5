"""The captioned video composition: load, join, then schedule.

WHY: Building a caption timeline needs two slow, independent inputs (the
word transcript from network or disk, and the video length from ffprobe)
plus one fast, pure step that depends on both. Running the pure step before
the transcript settles would schedule an empty caption track.

HOW: Two phases.
  1. Load: load_transcript() runs as a task while the metadata probe runs
     in a worker thread. The transcript side is fail-open (empty on failure);
     a failed probe cancels the pending transcript task.
  2. Join: once both have settled, compose() resolves the config and runs
     the memoized paginate -> schedule transform into an immutable Timeline.

RULES:
- compose() is pure and safe to re-run on every input change
- build_timeline() is the only coroutine; it awaits exactly one fetch
- A transcript failure yields a Timeline with zero windows, never an exception
- A probe failure raises ProbeError (the video itself is unusable)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Optional

import httpx

from caption_timeline.config import FPS, SUBS_BASE_URL
from caption_timeline.core.ir import Timeline, WordCaption
from caption_timeline.core.options import CaptionedVideoProps, resolve_config
from caption_timeline.core.pipeline import build_windows
from caption_timeline.media.probe import VideoMetadata, calculate_metadata
from caption_timeline.transcript.loader import load_transcript

logger = logging.getLogger(__name__)


def compose(
    words: Iterable[WordCaption],
    props: CaptionedVideoProps,
    fps: float = FPS,
    duration_in_frames: Optional[int] = None,
) -> Timeline:
    """Build the Timeline for already-loaded words (pure)."""
    config = resolve_config(props, fps)
    windows = build_windows(words, config)
    return Timeline(
        source=props.src,
        fps=config.fps,
        windows=windows,
        duration_in_frames=duration_in_frames,
        presentation=config.presentation,
    )


async def build_timeline(
    props: CaptionedVideoProps,
    duration_s: Optional[float] = None,
    probe: bool = True,
    client: Optional[httpx.AsyncClient] = None,
    subtitles: Optional[str] = None,
    base_url: Optional[str] = SUBS_BASE_URL,
    fps: float = FPS,
) -> Timeline:
    """Load the transcript and video metadata, then schedule the captions.

    Args:
        props: Validated composition props (video src + caption options).
        duration_s: Known video duration; skips probing when given.
        probe: Probe the video with ffprobe when duration_s is None.
        client: Optional shared httpx.AsyncClient for the transcript fetch.
        subtitles: Explicit transcript location (skips path derivation).
        base_url: Base URL for relative transcript paths.
        fps: Frame rate of the composition.

    Returns:
        The complete Timeline.

    Raises:
        ProbeError: If probing was requested and failed.
    """
    # Invalid config or duration fails before any I/O starts
    resolve_config(props, fps)
    metadata: Optional[VideoMetadata] = None
    if duration_s is not None:
        metadata = calculate_metadata(duration_s=duration_s, fps=fps)

    transcript = asyncio.create_task(load_transcript(
        props.src, client=client, base_url=base_url, subtitles=subtitles
    ))
    if metadata is None and probe:
        try:
            metadata = await asyncio.to_thread(calculate_metadata, props.src, None, fps)
        except BaseException:
            transcript.cancel()
            raise
    words = await transcript

    timeline = compose(
        words,
        props,
        fps=fps,
        duration_in_frames=metadata.duration_in_frames if metadata else None,
    )
    logger.info(
        "Built caption timeline for %s: %d words, %d windows",
        props.src, len(words), len(timeline.windows),
    )
    return timeline
