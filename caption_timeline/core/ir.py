"""Intermediate representation dataclasses for caption timelines.

WHY: A word transcript, its grouped caption pages, and the frame windows a
renderer mounts are three distinct shapes of the same data. Typed, frozen
dataclasses make each stage's contract explicit and let the whole transform
be memoized on its inputs.

HOW: Five dataclasses, leaves first:
  WordCaption   — one transcript word with its start time in milliseconds
  Page          — a contiguous group of words shown together
  DisplayWindow — the frame range during which one page is on screen
  Presentation  — renderer-owned styling, carried opaquely
  Timeline      — the complete scheduled output for one video

RULES:
- All dataclasses are frozen and hashable
- Times on words and pages are milliseconds (float); windows are frames (int)
- WordCaption rejects negative or non-finite start times on construction
- Timeline.windows is ordered by start frame and never overlaps
"""

from __future__ import annotations

import bisect
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from caption_timeline.config import (
    DEFAULT_ASPECT_RATIO,
    DEFAULT_FONT_COLOR,
    DEFAULT_FONT_SIZE,
    DEFAULT_HIGHLIGHT_COLOR,
    DEFAULT_STROKE_COLOR,
    DEFAULT_STROKE_WIDTH,
    DEFAULT_Y_POSITION,
)


@dataclass(frozen=True)
class WordCaption:
    """A single transcript token with its display start time.

    WHY: This is the input unit of the whole transform. Only ``start_ms``
    and ``text`` carry timing semantics; the optional fields ride along so
    renderers can highlight the word currently being spoken.

    RULES:
    - start_ms: finite, >= 0 (ValueError otherwise)
    - text: raw token text, kept verbatim (leading spaces included)
    - end_ms / timestamp_ms / confidence: None when the transcript omits them
    """

    start_ms: float
    text: str
    end_ms: Optional[float] = None
    timestamp_ms: Optional[float] = None
    confidence: Optional[float] = None

    def __post_init__(self) -> None:
        if not math.isfinite(self.start_ms) or self.start_ms < 0:
            raise ValueError(
                "Word start time must be a finite number >= 0, got {!r}".format(self.start_ms)
            )
        if self.end_ms is not None and not math.isfinite(self.end_ms):
            raise ValueError("Word end time must be finite, got {!r}".format(self.end_ms))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> WordCaption:
        """Parse a WordCaption from a transcript JSON object (camelCase keys)."""
        return cls(
            start_ms=float(data["startMs"]),
            text=data["text"],
            end_ms=_optional_float(data.get("endMs")),
            timestamp_ms=_optional_float(data.get("timestampMs")),
            confidence=_optional_float(data.get("confidence")),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"text": self.text, "startMs": self.start_ms}
        if self.end_ms is not None:
            out["endMs"] = self.end_ms
        if self.timestamp_ms is not None:
            out["timestampMs"] = self.timestamp_ms
        if self.confidence is not None:
            out["confidence"] = self.confidence
        return out


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


@dataclass(frozen=True)
class Page:
    """A contiguous group of words displayed together as one caption.

    RULES:
    - tokens is never empty
    - start_ms equals tokens[0].start_ms
    - concatenating all pages' tokens reproduces the transcript exactly
    """

    start_ms: float
    tokens: Tuple[WordCaption, ...]

    @property
    def text(self) -> str:
        """Token texts joined verbatim — transcripts carry their own spacing."""
        return "".join(t.text for t in self.tokens)

    @property
    def end_ms(self) -> Optional[float]:
        """End of the last token, when the transcript supplied one."""
        return self.tokens[-1].end_ms

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startMs": self.start_ms,
            "text": self.text,
            "tokens": [t.to_dict() for t in self.tokens],
        }


@dataclass(frozen=True)
class DisplayWindow:
    """The frame range during which one page is mounted on screen.

    WHY: Renderers work in frames. Each window says exactly when a page
    appears and for how many frames it stays.

    RULES:
    - start_frame >= 0, duration_frames > 0 (degenerate pages never get a window)
    - page_index is the page's position in the paginator output; it stays
      stable when neighbouring pages are dropped and serves as a render key
    """

    start_frame: int
    duration_frames: int
    page: Page
    page_index: int

    @property
    def end_frame(self) -> int:
        """First frame after the window (exclusive)."""
        return self.start_frame + self.duration_frames

    def contains(self, frame: int) -> bool:
        return self.start_frame <= frame < self.end_frame


@dataclass(frozen=True)
class Presentation:
    """Renderer-owned styling. Carries no timing semantics."""

    font_size: float = DEFAULT_FONT_SIZE
    font_color: str = DEFAULT_FONT_COLOR
    stroke_color: str = DEFAULT_STROKE_COLOR
    stroke_width: float = DEFAULT_STROKE_WIDTH
    highlight_color: str = DEFAULT_HIGHLIGHT_COLOR
    y_position: float = DEFAULT_Y_POSITION
    aspect_ratio: str = DEFAULT_ASPECT_RATIO

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fontSize": self.font_size,
            "fontColor": self.font_color,
            "strokeColor": self.stroke_color,
            "strokeWidth": self.stroke_width,
            "highlightColor": self.highlight_color,
            "yPosition": self.y_position,
            "aspectRatio": self.aspect_ratio,
        }


@dataclass(frozen=True)
class Timeline:
    """The complete scheduled caption output for one video.

    WHY: Replaces the host framework's "mount this component for N frames"
    primitive with plain data. Any rendering driver (or exporter) walks
    ``windows`` and mounts each page for its frame range.

    HOW: Built by the composition after the load stage has settled. The
    final window is bounded by the max display duration only; clamping it
    to ``duration_in_frames`` is the renderer's job.

    RULES:
    - windows: ordered, non-overlapping DisplayWindow tuple
    - duration_in_frames: None when the video was not probed
    - window_at(frame) returns the window mounted at that frame, or None
    """

    source: str
    fps: float
    windows: Tuple[DisplayWindow, ...]
    duration_in_frames: Optional[int] = None
    presentation: Presentation = field(default_factory=Presentation)

    def window_at(self, frame: int) -> Optional[DisplayWindow]:
        starts = [w.start_frame for w in self.windows]
        idx = bisect.bisect_right(starts, frame) - 1
        if idx < 0:
            return None
        window = self.windows[idx]
        return window if window.contains(frame) else None
