"""Caption Timeline — grouped word captions scheduled onto a video frame timeline.

WHY: Short-form video ("TikTok-style") captions show a couple of words at a
time, switching in sync with speech. A word-level transcript has
millisecond timestamps; a renderer works in frames. This package turns the
former into an ordered list of frame windows the renderer can mount.

HOW: Three-stage pipeline — load (transcript fetch + video probe), transform
(paginate words into pages, schedule pages onto frames), export (pluggable
formatters). The transform is pure and memoized; loading is async and
fail-open.

RULES:
- The Timeline is the stable contract between scheduling and rendering
- The transform never fetches, probes, or logs at INFO level
- Adding a new export format = one new formatter module, no core changes
"""

__version__ = "0.1.0"
