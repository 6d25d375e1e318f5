"""FastAPI application exposing the caption timeline builder.

WHY: Render workers and editing tools in other languages need the caption
schedule for a video without embedding Python. A small HTTP API lets them
post the composition props and get the frame windows back.

HOW: POST /timeline validates the props (pydantic), runs the two-phase
build (transcript fetch + probe, then the memoized transform), and returns
the timeline JSON. POST /timeline/export/{format} returns a single export
file instead. GET /formats and GET /health round it out. One shared
httpx.AsyncClient is opened for the app's lifetime.

RULES:
- Invalid props -> 422 (FastAPI request validation)
- A missing or broken transcript is not an error: 200 with zero windows
- Probe failure -> 502
- Transcript locations must be http(s) URLs (400 otherwise) unless
  CAPTION_API_ALLOW_LOCAL enables server-side files
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

import httpx
from fastapi import FastAPI, HTTPException
from fastapi.responses import Response

from caption_timeline import __version__
from caption_timeline.composition import build_timeline
from caption_timeline.config import (
    API_ALLOW_LOCAL_TRANSCRIPTS,
    API_HOST,
    API_PORT,
    FETCH_TIMEOUT_S,
    SUBS_BASE_URL,
)
from caption_timeline.core.ir import Timeline
from caption_timeline.formatters import FORMATTERS
from caption_timeline.formatters.timeline_json import timeline_to_dict
from caption_timeline.media.probe import ProbeError
from caption_timeline.server.models import (
    ErrorResponse,
    FormatInfo,
    HealthResponse,
    OutputFormat,
    TimelineRequest,
    TimelineResponse,
)
from caption_timeline.transcript.paths import is_remote, resolve_location, subtitles_path_for

logger = logging.getLogger(__name__)

_http: Optional[httpx.AsyncClient] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the shared transcript HTTP client on startup, close it on shutdown."""
    global _http
    _http = httpx.AsyncClient(timeout=FETCH_TIMEOUT_S, follow_redirects=True)
    try:
        yield
    finally:
        await _http.aclose()
        _http = None


app = FastAPI(
    lifespan=lifespan,
    title="Caption Timeline API",
    description=(
        "Groups a video's word transcript into TikTok-style caption pages and "
        "schedules them onto the video's frame timeline. Post the composition "
        "props, get back the ordered caption windows."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


async def _build(request: TimelineRequest) -> Timeline:
    location = resolve_location(
        request.subtitles or subtitles_path_for(request.src), SUBS_BASE_URL
    )
    if not is_remote(location) and not API_ALLOW_LOCAL_TRANSCRIPTS:
        raise HTTPException(
            status_code=400,
            detail="Transcript location must be an http(s) URL, got {}".format(location),
        )
    try:
        return await build_timeline(
            request,
            duration_s=request.duration_in_seconds,
            probe=request.probe,
            client=_http,
            subtitles=request.subtitles,
            base_url=SUBS_BASE_URL,
        )
    except ProbeError as exc:
        logger.warning("Probe failed for %s: %s", request.src, exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc


# ---------------------------------------------------------------------------
# Endpoints: Timeline
# ---------------------------------------------------------------------------


@app.post(
    "/timeline",
    response_model=TimelineResponse,
    tags=["timeline"],
    summary="Build a caption timeline",
    description=(
        "Loads the transcript derived from the video path, probes the video "
        "length (unless durationInSeconds is given), and returns the ordered "
        "caption windows. A missing transcript yields zero windows."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Transcript location not allowed"},
        502: {"model": ErrorResponse, "description": "Video could not be probed"},
    },
)
async def create_timeline(request: TimelineRequest) -> TimelineResponse:
    timeline = await _build(request)
    return TimelineResponse.model_validate(timeline_to_dict(timeline))


@app.post(
    "/timeline/export/{format_key}",
    tags=["timeline"],
    summary="Export a caption timeline",
    description="Builds the timeline like POST /timeline and returns one export file.",
    responses={
        200: {"description": "Export file content"},
        400: {"model": ErrorResponse, "description": "Transcript location not allowed"},
        502: {"model": ErrorResponse, "description": "Video could not be probed"},
    },
)
async def export_timeline(format_key: OutputFormat, request: TimelineRequest) -> Response:
    timeline = await _build(request)
    output = FORMATTERS[format_key.value]().format(timeline)[0]
    return Response(content=output.content, media_type=output.media_type)


# ---------------------------------------------------------------------------
# Endpoints: Formats / Health
# ---------------------------------------------------------------------------


@app.get(
    "/formats",
    response_model=List[FormatInfo],
    tags=["formats"],
    summary="List available export formats",
)
async def list_formats() -> List[FormatInfo]:
    return [
        FormatInfo(key=key, name=formatter_cls().name)
        for key, formatter_cls in sorted(FORMATTERS.items())
    ]


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api() -> None:
    """Entry point for the caption-timeline-api console script."""
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    uvicorn.run(app, host=API_HOST, port=API_PORT)
