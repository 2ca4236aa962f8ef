from __future__ import annotations

from dataclasses import dataclass, field
import itertools

from leafprint_core.core.config import parse_hex_rgba
from leafprint_core.geo.projection import LatLng
from leafprint_ui.style.theme import DEFAULT_CALLOUT_THEME, CalloutTheme
from leafprint_ui.text.renderer import FontSpec


RGBA = tuple[int, int, int, int]
DEFAULT_MARKER_CALLOUT_ANCHOR = (1.0, -34.0)
_callout_ids = itertools.count(1)


@dataclass(frozen=True)
class Padding:
    left: float = 0.0
    right: float = 0.0
    top: float = 0.0
    bottom: float = 0.0

    def __post_init__(self) -> None:
        if min(self.left, self.right, self.top, self.bottom) < 0:
            raise ValueError("Padding values must be >= 0")


@dataclass(frozen=True)
class CalloutStyle:
    padding: Padding = field(
        default_factory=lambda: Padding(
            left=DEFAULT_CALLOUT_THEME.padding_left,
            right=DEFAULT_CALLOUT_THEME.padding_right,
            top=DEFAULT_CALLOUT_THEME.padding_top,
            bottom=DEFAULT_CALLOUT_THEME.padding_bottom,
        )
    )
    line_height: float = DEFAULT_CALLOUT_THEME.line_height_px
    font: FontSpec = field(default_factory=lambda: FontSpec(family=DEFAULT_CALLOUT_THEME.font_family))
    font_size_px: float = DEFAULT_CALLOUT_THEME.font_size_px
    corner_radius: float = DEFAULT_CALLOUT_THEME.corner_radius
    tail_size: float = DEFAULT_CALLOUT_THEME.tail_size
    min_width: float = DEFAULT_CALLOUT_THEME.min_width
    background: RGBA = (255, 255, 255, 255)
    border: RGBA = (0, 0, 0, 51)
    text_color: RGBA = (51, 51, 51, 255)
    shadow: RGBA = (0, 0, 0, 102)
    shadow_blur: float = DEFAULT_CALLOUT_THEME.shadow_blur
    shadow_offset_y: float = DEFAULT_CALLOUT_THEME.shadow_offset_y

    def __post_init__(self) -> None:
        if self.line_height <= 0:
            raise ValueError("CalloutStyle line_height must be > 0")
        if self.font_size_px <= 0:
            raise ValueError("CalloutStyle font_size_px must be > 0")
        if self.corner_radius < 0 or self.tail_size < 0 or self.min_width < 0 or self.shadow_blur < 0:
            raise ValueError("CalloutStyle radius, tail size, min width and blur must be >= 0")

    @classmethod
    def from_theme(cls, theme: CalloutTheme) -> "CalloutStyle":
        return cls(
            padding=Padding(
                left=theme.padding_left,
                right=theme.padding_right,
                top=theme.padding_top,
                bottom=theme.padding_bottom,
            ),
            line_height=theme.line_height_px,
            font=FontSpec(family=theme.font_family),
            font_size_px=theme.font_size_px,
            corner_radius=theme.corner_radius,
            tail_size=theme.tail_size,
            min_width=theme.min_width,
            background=parse_hex_rgba(theme.background),
            border=parse_hex_rgba(theme.border),
            text_color=parse_hex_rgba(theme.text),
            shadow=parse_hex_rgba(theme.shadow),
            shadow_blur=theme.shadow_blur,
            shadow_offset_y=theme.shadow_offset_y,
        )


@dataclass
class Callout:
    """A floating text box pinned to a geographic anchor (a map popup)."""

    anchor: LatLng | None
    content: str = ""
    anchor_offset: tuple[float, float] = (0.0, 0.0)
    user_offset: tuple[float, float] | None = None
    width_override: float | None = None
    style: CalloutStyle = field(default_factory=CalloutStyle)
    callout_id: str = field(default_factory=lambda: f"callout-{next(_callout_ids)}")


@dataclass(frozen=True)
class CalloutLayout:
    box_left: float
    box_top: float
    box_width: float
    box_height: float
    tail_apex_x: float
    tail_apex_y: float
    lines: tuple[str, ...] = ("",)
    padding: Padding = field(default_factory=Padding)
    line_height: float = 0.0

    @property
    def box_bottom(self) -> float:
        return self.box_top + self.box_height

    @property
    def box_center_x(self) -> float:
        return self.box_left + self.box_width / 2.0

    def line_origins(self) -> list[tuple[float, float]]:
        """Left baseline point of each line."""

        x = self.box_left + self.padding.left
        return [(x, self.box_top + self.padding.top + i * self.line_height) for i in range(len(self.lines))]
