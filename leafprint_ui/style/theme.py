from __future__ import annotations

from dataclasses import asdict, dataclass
import re
from typing import Any, Mapping

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")


@dataclass(frozen=True)
class CalloutTheme:
    """Default token set for map callouts (popup look of the reference web map)."""

    background: str = "#FFFFFF"
    border: str = "#00000033"
    text: str = "#333333"
    shadow: str = "#00000066"
    font_family: str = "Helvetica Neue"
    font_size_px: float = 13.0
    line_height_px: float = 18.0
    padding_left: float = 21.0
    padding_right: float = 25.0
    padding_top: float = 14.0
    padding_bottom: float = 14.0
    corner_radius: float = 12.0
    tail_size: float = 10.0
    min_width: float = 50.0
    shadow_blur: float = 7.0
    shadow_offset_y: float = 3.0


DEFAULT_CALLOUT_THEME = CalloutTheme()

_COLOR_TOKENS = ("background", "border", "text", "shadow")
_NON_NEGATIVE_TOKENS = (
    "padding_left",
    "padding_right",
    "padding_top",
    "padding_bottom",
    "corner_radius",
    "tail_size",
    "min_width",
    "shadow_blur",
)


def validate_callout_theme(overrides: Mapping[str, Any] | None = None) -> CalloutTheme:
    """Validate and merge token overrides against the defaults."""

    raw: dict[str, Any] = asdict(DEFAULT_CALLOUT_THEME)
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ValueError(f"Unknown callout theme token: {key}")
            raw[key] = value

    for key in _COLOR_TOKENS:
        if not isinstance(raw[key], str) or not _HEX_COLOR.match(raw[key]):
            raise ValueError(f"Token `{key}` must be a hex color (#RRGGBB or #RRGGBBAA)")

    if not isinstance(raw["font_family"], str) or not raw["font_family"].strip():
        raise ValueError("Token `font_family` must be a non-empty string")

    for key in ("font_size_px", "line_height_px"):
        if not isinstance(raw[key], (int, float)) or float(raw[key]) <= 0:
            raise ValueError(f"Token `{key}` must be a positive number")

    for key in _NON_NEGATIVE_TOKENS:
        if not isinstance(raw[key], (int, float)) or float(raw[key]) < 0:
            raise ValueError(f"Token `{key}` must be a non-negative number")

    if not isinstance(raw["shadow_offset_y"], (int, float)):
        raise ValueError("Token `shadow_offset_y` must be a number")

    return CalloutTheme(
        **{key: (str(value) if isinstance(value, str) else float(value)) for key, value in raw.items()}
    )
