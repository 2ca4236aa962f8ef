"""Text metrics and line rasterization for callouts."""

from .renderer import FontSpec, PillowTextMeasurer, TextMeasurer, load_font, render_line_mask

__all__ = [
    "FontSpec",
    "PillowTextMeasurer",
    "TextMeasurer",
    "load_font",
    "render_line_mask",
]
