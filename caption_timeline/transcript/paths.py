"""Derive the transcript location for a video.

WHY: Uploaded videos and their word transcripts are stored side by side in
parallel trees: ``/uploads/clip.mp4`` has its words at ``/subs/clip.json``.
Callers only know the video path.

HOW: Swap the video suffix for ``.json`` (first matching suffix only), then
rename the first ``uploads`` occurrence to ``subs``. For http(s) URLs the
suffix swap applies to the URL path so query strings survive.

RULES:
- Suffixes are checked in VIDEO_EXTENSIONS order; at most one is swapped
- Suffix matching is case-sensitive and anchored at the end of the path
- Paths with no known suffix keep their extension
- "uploads" -> "subs" is a literal substring replacement of the first occurrence only
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import urljoin, urlsplit, urlunsplit

from caption_timeline.config import SUBS_SEGMENT, UPLOADS_SEGMENT, VIDEO_EXTENSIONS


def _is_url(path: str) -> bool:
    return urlsplit(path).scheme in ("http", "https")


def _swap_suffix(path: str) -> str:
    for ext in VIDEO_EXTENSIONS:
        if path.endswith(ext):
            return path[: -len(ext)] + ".json"
    return path


def subtitles_path_for(src: str) -> str:
    """Return the transcript JSON path (or URL) for a video path (or URL).

    Examples:
        >>> subtitles_path_for("/uploads/clip.mp4")
        '/subs/clip.json'
        >>> subtitles_path_for("https://cdn.example.com/uploads/a.webm?v=2")
        'https://cdn.example.com/subs/a.json?v=2'
    """
    if _is_url(src):
        parts = urlsplit(src)
        derived = urlunsplit(parts._replace(path=_swap_suffix(parts.path)))
    else:
        derived = _swap_suffix(src)
    return derived.replace(UPLOADS_SEGMENT, SUBS_SEGMENT, 1)


def resolve_location(path: str, base_url: Optional[str] = None) -> str:
    """Resolve a transcript path against an optional base URL.

    RULES:
    - Absolute http(s) URLs are returned unchanged
    - With base_url, relative and root-relative paths become URLs under it
    - Without base_url, the path is returned unchanged (local file)
    """
    if _is_url(path) or not base_url:
        return path
    return urljoin(base_url.rstrip("/") + "/", path.lstrip("/"))


def is_remote(location: str) -> bool:
    return _is_url(location)
