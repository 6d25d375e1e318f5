"""Command-line interface for building caption timelines.

WHY: Render pipelines and editors need the caption schedule for a video
without running the HTTP service. The CLI wires the whole pipeline —
option validation, transcript loading, video probing, scheduling, export —
behind one command.

HOW: argparse collects the video path and caption options, which are
validated through the same pydantic props model the API uses. The async
build runs via asyncio.run(). Status messages go to stderr; output files
are written next to the video (or to --output-dir).

RULES:
- Positional argument: video path or URL
- Transcript location is derived from the video path unless --subtitles is given
- --duration skips ffprobe; --no-probe builds a timeline without a frame count
- --formats: comma-separated exporter keys (default: all registered)
- Output naming: {stem}{suffix}, numeric suffix on conflict (-timeline-2.json)
- A missing or broken transcript is not an error (zero caption windows)
- Invalid options or a failed probe exit with status 1
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit

from pydantic import ValidationError

from caption_timeline.composition import build_timeline
from caption_timeline.config import FPS
from caption_timeline.core.options import CaptionedVideoProps
from caption_timeline.formatters import FORMATTERS
from caption_timeline.formatters.base import FormatterOutput
from caption_timeline.media.probe import ProbeError
from caption_timeline.transcript.paths import is_remote


def _status(msg: str) -> None:
    """Print a status message to stderr so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


def _error(msg: str) -> None:
    print("Error: {}".format(msg), file=sys.stderr)
    sys.exit(1)


def _video_stem(video: str) -> str:
    if is_remote(video):
        return PurePosixPath(urlsplit(video).path).stem or "video"
    return Path(video).stem


def _resolve_output_path(stem: str, suffix: str, output_dir: Path) -> Path:
    """Resolve the output file path, adding a numeric suffix on conflict.

    RULES:
    - First attempt: {stem}{suffix} (e.g. clip-timeline.json)
    - Conflict: counter inserted before the extension (clip-timeline-2.json)
    - Counter starts at 2 and increments
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    dot_idx = suffix.rfind(".")
    if dot_idx > 0:
        suffix_name, suffix_ext = suffix[:dot_idx], suffix[dot_idx:]
    else:
        suffix_name, suffix_ext = suffix, ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(output: FormatterOutput, stem: str, output_dir: Path) -> Path:
    path = _resolve_output_path(stem, output.suffix, output_dir)
    if isinstance(output.content, bytes):
        path.write_bytes(output.content)
    else:
        path.write_text(output.content, encoding="utf-8")
    return path


def _props_from_args(args: argparse.Namespace) -> CaptionedVideoProps:
    """Build validated composition props from CLI flags (unset flags keep defaults)."""
    raw: Dict[str, Any] = {"src": args.video}
    optional = {
        "wordsPerCaption": args.words_per_caption,
        "captionSwitchSpeed": args.caption_switch_speed,
        "fontSize": args.font_size,
        "fontColor": args.font_color,
        "strokeColor": args.stroke_color,
        "strokeWidth": args.stroke_width,
        "highlightColor": args.highlight_color,
        "yPosition": args.y_position,
        "aspectRatio": args.aspect_ratio,
    }
    raw.update({k: v for k, v in optional.items() if v is not None})
    return CaptionedVideoProps.model_validate(raw)


def _format_keys(formats: Optional[str]) -> List[str]:
    if not formats:
        return list(FORMATTERS.keys())
    keys = [f.strip() for f in formats.split(",") if f.strip()]
    for key in keys:
        if key not in FORMATTERS:
            _error("Unknown format '{}'. Available formats: {}".format(
                key, ", ".join(sorted(FORMATTERS.keys()))
            ))
    return keys


async def _run_pipeline(args: argparse.Namespace) -> List[Path]:
    """Build the timeline for one video and save every requested export."""
    format_keys = _format_keys(args.formats)

    try:
        props = _props_from_args(args)
    except ValidationError as exc:
        _error("Invalid caption options:\n{}".format(exc))

    if args.output_dir:
        output_dir = Path(args.output_dir).resolve()
    elif is_remote(args.video):
        output_dir = Path.cwd()
    else:
        output_dir = Path(args.video).resolve().parent
    if not output_dir.is_dir():
        _error("Output directory does not exist: {}".format(output_dir))

    _status("Building caption timeline for {}...".format(args.video))
    try:
        timeline = await build_timeline(
            props,
            duration_s=args.duration,
            probe=args.probe,
            subtitles=args.subtitles,
            fps=args.fps,
        )
    except (ProbeError, ValueError) as exc:
        _error(str(exc))

    _status("  {} caption windows".format(len(timeline.windows)))
    if timeline.duration_in_frames is not None:
        _status("  {} frames at {} fps".format(timeline.duration_in_frames, timeline.fps))

    stem = _video_stem(args.video)
    saved: List[Path] = []
    for key in format_keys:
        formatter = FORMATTERS[key]()
        for output in formatter.format(timeline):
            path = _save_output(output, stem, output_dir)
            saved.append(path)
            _status("  Saved: {}".format(path.name))

    _status("Done! Saved {} file(s) to {}".format(len(saved), output_dir))
    return saved


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser (separate from main() so tests can inspect it)."""
    parser = argparse.ArgumentParser(
        prog="caption_timeline",
        description="Group a video's word transcript into TikTok-style caption pages "
                    "and schedule them onto the video's frame timeline.",
    )
    parser.add_argument("video", help="Path or URL of the source video.")
    parser.add_argument(
        "--subtitles",
        default=None,
        help="Transcript JSON path or URL (default: derived from the video path).",
    )
    parser.add_argument(
        "--words-per-caption",
        type=int,
        default=None,
        help="Target words per caption page (default: 2).",
    )
    parser.add_argument(
        "--caption-switch-speed",
        type=float,
        default=None,
        help="Combine threshold and max page duration in ms (default: 300 x words per caption).",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Video duration in seconds (skips ffprobe).",
    )
    parser.add_argument(
        "--probe",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Probe the video duration with ffprobe (default: %(default)s).",
    )
    parser.add_argument("--fps", type=float, default=FPS, help=argparse.SUPPRESS)
    parser.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: all.".format(", ".join(sorted(FORMATTERS.keys()))),
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: next to the video).",
    )

    style = parser.add_argument_group("presentation (forwarded to the renderer)")
    style.add_argument("--font-size", type=float, default=None)
    style.add_argument("--font-color", default=None)
    style.add_argument("--stroke-color", default=None)
    style.add_argument("--stroke-width", type=float, default=None)
    style.add_argument("--highlight-color", default=None)
    style.add_argument("--y-position", type=float, default=None)
    style.add_argument("--aspect-ratio", default=None)

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug details (dropped pages, fetch locations).",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for ``python -m caption_timeline`` and the console script."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    asyncio.run(_run_pipeline(args))


if __name__ == "__main__":
    main()
