from .layout import layout, normalize_content
from .model import DEFAULT_MARKER_CALLOUT_ANCHOR, Callout, CalloutLayout, CalloutStyle, Padding
from .painter import paint

__all__ = [
    "DEFAULT_MARKER_CALLOUT_ANCHOR",
    "Callout",
    "CalloutLayout",
    "CalloutStyle",
    "Padding",
    "layout",
    "normalize_content",
    "paint",
]
