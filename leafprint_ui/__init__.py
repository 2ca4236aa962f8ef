"""Callout layout, painting and text metrics for leafprint map renders."""

from .callout import Callout, CalloutLayout, CalloutStyle, Padding, layout, normalize_content, paint
from .style.theme import CalloutTheme, validate_callout_theme
from .text.renderer import FontSpec, PillowTextMeasurer, TextMeasurer

__all__ = [
    "Callout",
    "CalloutLayout",
    "CalloutStyle",
    "CalloutTheme",
    "FontSpec",
    "Padding",
    "PillowTextMeasurer",
    "TextMeasurer",
    "layout",
    "normalize_content",
    "paint",
    "validate_callout_theme",
]
