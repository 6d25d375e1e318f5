"""SRT formatter — one subtitle cue per scheduled caption page.

WHY: Editors and players that cannot run the renderer still need to preview
the exact caption grouping and switch timing. An SRT with one cue per
display window shows precisely what the renderer will mount, frame-accurate
to the millisecond.

HOW: Each window's start and end frames are converted back to milliseconds
at the timeline's frame rate and written as a numbered SRT block. Page text
is stripped of the leading/trailing whitespace transcripts carry.

RULES:
- One output file: ``-pages.srt``
- Cue times come from frames, not from word timestamps
- Cues never overlap (windows never do)
- Empty timeline -> empty string
"""

from __future__ import annotations

from typing import List

from caption_timeline.core.ir import Timeline
from caption_timeline.core.scheduler import frames_to_ms
from caption_timeline.formatters.base import BaseFormatter, FormatterOutput


def ms_to_srt_time(ms: float) -> str:
    """Convert milliseconds to SRT timestamp format: HH:MM:SS,mmm"""
    total = int(round(ms))
    hours, rem = divmod(total, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    secs, millis = divmod(rem, 1000)
    return "{:02d}:{:02d}:{:02d},{:03d}".format(hours, minutes, secs, millis)


class SRTPagesFormatter(BaseFormatter):
    """Formatter writing the scheduled pages as SRT cues."""

    @property
    def name(self) -> str:
        return "SRT Pages"

    def format(self, timeline: Timeline) -> List[FormatterOutput]:
        lines: List[str] = []
        for i, window in enumerate(timeline.windows, 1):
            start = frames_to_ms(window.start_frame, timeline.fps)
            end = frames_to_ms(window.end_frame, timeline.fps)
            lines.append(str(i))
            lines.append("{} --> {}".format(ms_to_srt_time(start), ms_to_srt_time(end)))
            lines.append(window.page.text.strip())
            lines.append("")

        return [FormatterOutput(
            suffix="-pages.srt",
            content="\n".join(lines),
            media_type="application/x-subrip",
        )]
