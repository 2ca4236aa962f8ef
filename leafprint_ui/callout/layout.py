from __future__ import annotations

import html
import re

from leafprint_core.core.errors import NoAnchorError
from leafprint_core.core.scene import Viewport
from leafprint_core.geo.projection import Projection
from leafprint_ui.text.renderer import PillowTextMeasurer, TextMeasurer

from .model import Callout, CalloutLayout


_BREAK_TAG = re.compile(r"<br\s*/?\s*>", re.IGNORECASE)
_BLOCK_END_TAG = re.compile(r"</(?:p|div|li|h[1-6])\s*>", re.IGNORECASE)
_ANY_TAG = re.compile(r"<[^>]*>")

_default_measurer = PillowTextMeasurer()


def normalize_content(raw: str) -> list[str]:
    """Convert popup markup into trimmed display lines.

    Break tags become line breaks, remaining tags are dropped, and runs of blank lines
    collapse to one. Never returns an empty list.
    """

    text = _BREAK_TAG.sub("\n", raw)
    text = _BLOCK_END_TAG.sub("\n", text)
    text = html.unescape(_ANY_TAG.sub("", text))
    lines: list[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        if stripped == "" and lines and lines[-1] == "":
            continue
        lines.append(stripped)
    return lines or [""]


def layout(
    viewport: Viewport,
    callout: Callout,
    *,
    projection: Projection,
    measurer: TextMeasurer | None = None,
) -> CalloutLayout:
    measurer = measurer or _default_measurer
    style = callout.style
    ax, ay = _anchor_point(callout, projection)

    lines = normalize_content(callout.content)
    widths = [measurer.measure(line, style.font, style.font_size_px) for line in lines]
    content_width = max(widths) if widths else 0.0
    if callout.width_override is not None:
        content_width = max(content_width, float(callout.width_override))

    pad = style.padding
    box_width = max(style.min_width, content_width + pad.left + pad.right)
    box_height = max(1, len(lines)) * style.line_height + pad.top + pad.bottom

    # Box sits above the anchor; the tail closes the gap down to it.
    screen_y = ay if projection.y_axis == "down" else viewport.height - ay
    box_left = ax - box_width / 2.0
    box_top = screen_y - style.tail_size - box_height

    return CalloutLayout(
        box_left=box_left,
        box_top=box_top,
        box_width=box_width,
        box_height=box_height,
        tail_apex_x=box_left + box_width / 2.0,
        tail_apex_y=box_top + box_height + style.tail_size,
        lines=tuple(lines),
        padding=pad,
        line_height=style.line_height,
    )


def _anchor_point(callout: Callout, projection: Projection) -> tuple[float, float]:
    if callout.anchor is None:
        raise NoAnchorError(callout.callout_id)
    projected = projection.project(callout.anchor)
    if projected is None:
        raise NoAnchorError(callout.callout_id, reason="anchor could not be projected for the current view")
    x, y = projected
    ox, oy = callout.anchor_offset
    x += ox
    y += oy
    if callout.user_offset is not None:
        ux, uy = callout.user_offset
        x += ux
        y += uy
    return (x, y)
