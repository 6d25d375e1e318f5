"""Video metadata probing for the captioned video composition."""

from caption_timeline.media.probe import (
    ProbeError,
    VideoMetadata,
    calculate_metadata,
    probe_duration_s,
)

__all__ = ["ProbeError", "VideoMetadata", "calculate_metadata", "probe_duration_s"]
