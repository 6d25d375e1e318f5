"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and automatic OpenAPI documentation.

HOW: The request extends the composition props model, so the API validates
caption options exactly as the CLI and the transform do. Response models
mirror the timeline JSON export (camelCase on the wire via aliases).

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Wire names are camelCase; Python attributes are snake_case
- Invalid caption options are rejected by FastAPI with 422
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from caption_timeline.core.options import CaptionedVideoProps


class OutputFormat(str, Enum):
    """Available export format identifiers.

    RULES:
    - Values match keys in caption_timeline.formatters.FORMATTERS exactly
    """

    timeline_json = "timeline_json"
    srt_pages = "srt_pages"


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class TimelineRequest(CaptionedVideoProps):
    """Composition props plus load-stage controls.

    RULES:
    - durationInSeconds skips ffprobe when given
    - probe=false builds a timeline without a frame count
    - subtitles overrides the derived transcript location
    """

    duration_in_seconds: Optional[float] = Field(
        default=None,
        alias="durationInSeconds",
        ge=0,
        allow_inf_nan=False,
        description="Known video duration in seconds; skips probing.",
    )
    probe: bool = Field(default=True, description="Probe the video duration with ffprobe.")
    subtitles: Optional[str] = Field(
        default=None,
        description="Transcript JSON path or URL. Defaults to the path derived from src.",
    )

    model_config = {"populate_by_name": True, "json_schema_extra": {
        "examples": [
            {
                "src": "https://cdn.example.com/uploads/clip.mp4",
                "wordsPerCaption": 2,
                "durationInSeconds": 12.5,
            }
        ]
    }}


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class TokenModel(BaseModel):
    text: str = Field(description="Raw word text.")
    start_ms: float = Field(alias="startMs", description="Word start time (ms).")
    end_ms: Optional[float] = Field(default=None, alias="endMs", description="Word end time (ms).")

    model_config = {"populate_by_name": True}


class PageModel(BaseModel):
    """One caption page: the words shown together."""

    start_ms: float = Field(alias="startMs", description="Start of the first word (ms).")
    text: str = Field(description="Concatenated page text.")
    tokens: List[TokenModel] = Field(description="Words of the page, in order.")

    model_config = {"populate_by_name": True}


class WindowModel(BaseModel):
    """The frame range during which one page is on screen."""

    page_index: int = Field(alias="pageIndex", description="Index of the page before drops.")
    start_frame: int = Field(alias="startFrame", description="First frame the page is shown.")
    duration_frames: int = Field(alias="durationFrames", description="Number of frames shown.")
    end_frame: int = Field(alias="endFrame", description="First frame after the window.")
    page: PageModel

    model_config = {"populate_by_name": True}


class TimelineResponse(BaseModel):
    """Scheduled caption windows for one video."""

    source: str = Field(description="Source video path or URL.")
    fps: float = Field(description="Frame rate of the composition.")
    duration_in_frames: Optional[int] = Field(
        alias="durationInFrames",
        description="Video length in frames; null when not probed.",
    )
    style: dict = Field(description="Presentation fields forwarded to the renderer.")
    windows: List[WindowModel] = Field(description="Ordered, non-overlapping caption windows.")

    model_config = {"populate_by_name": True}


class FormatInfo(BaseModel):
    key: str = Field(description="Format identifier used in API requests.")
    name: str = Field(description="Human-readable format name.")


class ErrorResponse(BaseModel):
    """Standard error response body."""

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
