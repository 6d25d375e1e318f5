"""Caption options validation and resolution to concrete timing values.

WHY: Every composition parameter is optional, and two of them interact: the
caption switch speed defaults to a per-word reading time multiplied by the
words per caption. The transform must only ever see validated, concrete
numbers, so all of that happens here, at the boundary.

HOW: CaptionOptions is a pydantic model mirroring the composition props
(camelCase aliases, snake_case names both accepted). resolve_config()
turns a validated model plus the host frame rate into a frozen, hashable
ResolvedConfig that doubles as the memo key for the transform.

RULES:
- wordsPerCaption defaults to 2 and must be an integer >= 1
- captionSwitchSpeed, when given, is used verbatim; else 300 ms x wordsPerCaption
- The switch speed is both the grouping threshold and the max window length
- fps comes from the host timeline and must be a positive finite number
- Invalid props raise pydantic.ValidationError; an invalid fps raises ConfigurationError
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, Field

from caption_timeline.config import (
    BASE_SWITCH_SPEED_MS,
    DEFAULT_ASPECT_RATIO,
    DEFAULT_FONT_COLOR,
    DEFAULT_FONT_SIZE,
    DEFAULT_HIGHLIGHT_COLOR,
    DEFAULT_STROKE_COLOR,
    DEFAULT_STROKE_WIDTH,
    DEFAULT_WORDS_PER_CAPTION,
    DEFAULT_Y_POSITION,
    FPS,
)
from caption_timeline.core.ir import Presentation


class ConfigurationError(ValueError):
    """Raised when a resolved timing value is out of range.

    RULES:
    - Message names the offending field and value
    """


class CaptionOptions(BaseModel):
    """Optional caption parameters of the captioned video composition.

    WHY: Callers (CLI flags, API bodies, render props) all speak the same
    camelCase vocabulary. A single pydantic model validates every surface
    identically and documents the defaults.

    RULES:
    - Every field is optional with the documented default
    - captionSwitchSpeed is None unless explicitly supplied
    """

    font_size: float = Field(default=DEFAULT_FONT_SIZE, alias="fontSize", gt=0,
                             description="Caption font size in pixels.")
    font_color: str = Field(default=DEFAULT_FONT_COLOR, alias="fontColor",
                            description="Caption text colour.")
    stroke_color: str = Field(default=DEFAULT_STROKE_COLOR, alias="strokeColor",
                              description="Caption outline colour.")
    stroke_width: float = Field(default=DEFAULT_STROKE_WIDTH, alias="strokeWidth", ge=0,
                                description="Caption outline width in pixels.")
    highlight_color: str = Field(default=DEFAULT_HIGHLIGHT_COLOR, alias="highlightColor",
                                 description="Colour of the word currently being spoken.")
    words_per_caption: int = Field(default=DEFAULT_WORDS_PER_CAPTION, alias="wordsPerCaption", ge=1,
                                   description="Target words per caption page.")
    caption_switch_speed: Optional[float] = Field(
        default=None,
        alias="captionSwitchSpeed",
        gt=0,
        allow_inf_nan=False,
        description=(
            "Combine threshold and max page duration in milliseconds. "
            "Defaults to 300 ms per word."
        ),
    )
    y_position: float = Field(default=DEFAULT_Y_POSITION, alias="yPosition",
                              description="Vertical caption offset in pixels.")
    aspect_ratio: str = Field(default=DEFAULT_ASPECT_RATIO, alias="aspectRatio",
                              description="Output aspect ratio, e.g. '9:16'.")

    model_config = {"populate_by_name": True}

    @property
    def resolved_switch_speed_ms(self) -> float:
        if self.caption_switch_speed is not None:
            return self.caption_switch_speed
        return BASE_SWITCH_SPEED_MS * self.words_per_caption

    def presentation(self) -> Presentation:
        return Presentation(
            font_size=self.font_size,
            font_color=self.font_color,
            stroke_color=self.stroke_color,
            stroke_width=self.stroke_width,
            highlight_color=self.highlight_color,
            y_position=self.y_position,
            aspect_ratio=self.aspect_ratio,
        )


class CaptionedVideoProps(CaptionOptions):
    """Full props of the captioned video composition: the video source plus caption options."""

    src: str = Field(description="Path or URL of the source video.")


@dataclass(frozen=True)
class ResolvedConfig:
    """Concrete, validated timing values plus opaque presentation.

    RULES:
    - fps > 0, combine_threshold_ms > 0, max_window_ms > 0, words_per_page >= 1
    - Frozen and hashable; used as part of the transform memo key
    """

    fps: float
    combine_threshold_ms: float
    max_window_ms: float
    words_per_page: int
    presentation: Presentation = field(default_factory=Presentation)


def resolve_config(
    options: Union[CaptionOptions, Mapping[str, Any], None] = None,
    fps: float = FPS,
) -> ResolvedConfig:
    """Resolve optional caption parameters to a concrete configuration.

    Args:
        options: A validated CaptionOptions (or props) model, a mapping of
                 raw camelCase/snake_case overrides, or None for defaults.
        fps: Frame rate of the host timeline.

    Returns:
        A frozen ResolvedConfig.

    Raises:
        pydantic.ValidationError: If a mapping contains invalid values.
        ConfigurationError: If fps is not a positive finite number.
    """
    if options is None:
        options = CaptionOptions()
    elif not isinstance(options, CaptionOptions):
        options = CaptionOptions.model_validate(dict(options))

    if isinstance(fps, bool) or not isinstance(fps, (int, float)) or not math.isfinite(fps) or fps <= 0:
        raise ConfigurationError("fps must be a positive finite number, got {!r}".format(fps))

    switch_speed_ms = options.resolved_switch_speed_ms
    return ResolvedConfig(
        fps=fps,
        combine_threshold_ms=switch_speed_ms,
        max_window_ms=switch_speed_ms,
        words_per_page=options.words_per_caption,
        presentation=options.presentation(),
    )
