"""Memoized paginate -> schedule transform.

WHY: Rendering hosts re-evaluate the caption layer many times (once per
preview refresh, once per render worker). The transform is pure, so
identical inputs can return the cached windows instead of recomputing.

HOW: build_windows() freezes the word sequence into a tuple and looks the
(words, config) pair up in a bounded LRU table. Both halves are frozen
dataclasses, so the key is value-based: a re-fetched but identical
transcript hits the cache too.

RULES:
- Same inputs -> same output object
- The cache holds at most TIMELINE_CACHE_SIZE entries
- clear_cache() empties it (tests, long-running servers after config edits)
"""

from __future__ import annotations

from functools import lru_cache
from typing import Iterable, Tuple

from caption_timeline.core.ir import DisplayWindow, WordCaption
from caption_timeline.core.options import ResolvedConfig
from caption_timeline.core.paginator import paginate
from caption_timeline.core.scheduler import schedule

TIMELINE_CACHE_SIZE = 64


@lru_cache(maxsize=TIMELINE_CACHE_SIZE)
def _build_windows_cached(
    words: Tuple[WordCaption, ...],
    config: ResolvedConfig,
) -> Tuple[DisplayWindow, ...]:
    pages = paginate(words, config.combine_threshold_ms)
    return schedule(pages, config.fps, config.max_window_ms)


def build_windows(
    words: Iterable[WordCaption],
    config: ResolvedConfig,
) -> Tuple[DisplayWindow, ...]:
    """Group words into pages and schedule them onto frames.

    Args:
        words: Word captions in transcript order.
        config: Resolved timing configuration.

    Returns:
        Ordered, non-overlapping display windows.
    """
    return _build_windows_cached(tuple(words), config)


def clear_cache() -> None:
    _build_windows_cached.cache_clear()


def cache_info():
    """Hit/miss statistics of the transform cache (functools CacheInfo)."""
    return _build_windows_cached.cache_info()
