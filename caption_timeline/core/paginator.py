"""Group timestamped words into caption pages.

WHY: Showing one word at a time is unreadable; showing whole sentences
hides which word is being spoken. TikTok-style captions show a small group
of words that were spoken close together, and switch as soon as speech
pauses.

HOW: A single left-to-right scan. Each word joins the current page when it
starts within ``threshold_ms`` of the page's most recently added word;
otherwise it opens a new page. Gaps are measured word-to-word (a chain
merge), so a page can span more than ``threshold_ms`` in total as long as
every consecutive gap stays tight.

RULES:
- Empty input -> no pages; one word -> one single-token page
- No page is empty; no word is dropped, duplicated, or reordered
- gap <= threshold_ms merges; gap > threshold_ms splits
- Input order is trusted; timestamps are not re-sorted
"""

from __future__ import annotations

import math
from typing import Iterable, List, Tuple

from caption_timeline.core.ir import Page, WordCaption


def paginate(words: Iterable[WordCaption], threshold_ms: float) -> Tuple[Page, ...]:
    """Partition an ordered word sequence into caption pages.

    Args:
        words: Word captions in transcript order.
        threshold_ms: Maximum gap between consecutive words of one page.

    Returns:
        Pages in transcript order.

    Raises:
        ValueError: If threshold_ms is not a positive finite number.
    """
    if not math.isfinite(threshold_ms) or threshold_ms <= 0:
        raise ValueError(
            "Combine threshold must be a positive finite number, got {!r}".format(threshold_ms)
        )

    pages: List[Page] = []
    current: List[WordCaption] = []

    for word in words:
        if current and word.start_ms - current[-1].start_ms > threshold_ms:
            pages.append(Page(start_ms=current[0].start_ms, tokens=tuple(current)))
            current = []
        current.append(word)

    if current:
        pages.append(Page(start_ms=current[0].start_ms, tokens=tuple(current)))

    return tuple(pages)
