"""Map caption pages onto exact, non-overlapping frame windows.

WHY: Pages have millisecond start times; a video timeline is addressed in
whole frames. Each page must appear on the frame its first word is spoken
and disappear either when the next page appears or after the maximum
display duration, whichever comes first, so captions never linger over
silence and never overlap.

HOW: For page i:
  start_i = floor(start_ms_i / 1000 * fps)
  next_i  = floor(start_ms_{i+1} / 1000 * fps), or unbounded for the last page
  end_i   = min(next_i, start_i + floor(max_window_ms / 1000 * fps))
Pages whose window comes out empty (end_i <= start_i) get no window.

RULES:
- Frames are floored, never rounded
- Window length never exceeds floor(max_window_ms / 1000 * fps)
- A window ends at or before the next page's start frame
- Pages with duration <= 0 frames are omitted; surviving windows keep page order
- The last window is bounded only by the max duration; the renderer closes it at clip end
"""

from __future__ import annotations

import logging
import math
from typing import List, Sequence, Tuple

from caption_timeline.core.ir import DisplayWindow, Page

logger = logging.getLogger(__name__)


def ms_to_frame(ms: float, fps: float) -> int:
    """Frame on which an event at ``ms`` milliseconds is shown."""
    return math.floor(ms / 1000 * fps)


def frames_to_ms(frames: int, fps: float) -> float:
    """Milliseconds elapsed after ``frames`` frames."""
    return frames / fps * 1000


def max_duration_frames(max_window_ms: float, fps: float) -> int:
    """Longest window, in whole frames, that ``max_window_ms`` allows."""
    return math.floor(max_window_ms / 1000 * fps)


def schedule(
    pages: Sequence[Page],
    fps: float,
    max_window_ms: float,
) -> Tuple[DisplayWindow, ...]:
    """Convert pages into display windows on a frame timeline.

    WHY: This is the step that keeps the caption stream visually in sync
    with the video. The renderer mounts each returned window verbatim.

    HOW: Single pass over the pages, looking one page ahead for the
    bounding start frame.

    RULES:
    - Duplicate or near-duplicate page starts (same frame) make the earlier
      page's window empty; that page is dropped, not clamped
    - Output windows carry their page_index in the input sequence

    Args:
        pages: Pages in display order.
        fps: Frame rate of the host timeline (> 0).
        max_window_ms: Longest time a page may stay on screen (> 0).

    Returns:
        Display windows for every page with a positive duration.
    """
    max_frames = max_duration_frames(max_window_ms, fps)
    windows: List[DisplayWindow] = []

    for index, page in enumerate(pages):
        start_frame = ms_to_frame(page.start_ms, fps)
        if index + 1 < len(pages):
            next_start_frame = ms_to_frame(pages[index + 1].start_ms, fps)
        else:
            next_start_frame = math.inf
        end_frame = min(next_start_frame, start_frame + max_frames)
        duration_frames = int(end_frame - start_frame)

        if duration_frames <= 0:
            logger.debug(
                "Dropping page %d at %.1f ms: window of %d frames",
                index, page.start_ms, duration_frames,
            )
            continue

        windows.append(DisplayWindow(
            start_frame=start_frame,
            duration_frames=duration_frames,
            page=page,
            page_index=index,
        ))

    return tuple(windows)
