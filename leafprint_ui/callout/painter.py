from __future__ import annotations

import math

import numpy as np
from PIL import Image, ImageDraw, ImageFilter
import torch

from leafprint_core.render.frame import blend_mask, round_half_up
from leafprint_ui.text.renderer import render_line_mask

from .model import CalloutLayout, CalloutStyle


BORDER_WIDTH_PX = 1


def paint(raster: torch.Tensor, layout: CalloutLayout, style: CalloutStyle) -> None:
    """Draw one callout onto `raster` in place.

    Order is shadow, fill, tail, outline, text; each step covers the seams left by
    the previous one. Anything outside the raster is clipped.
    """

    left = round_half_up(layout.box_left)
    top = round_half_up(layout.box_top)
    width = max(1, round_half_up(layout.box_width))
    height = max(1, round_half_up(layout.box_height))
    radius = int(min(style.corner_radius, width / 2.0, height / 2.0))

    _paint_shadow(raster, left, top, width, height, radius, style)
    box = _rounded_rect_mask(width, height, radius, fill=True)
    blend_mask(raster, box, left, top, style.background)
    _paint_tail(raster, layout, style)
    outline = _rounded_rect_mask(width, height, radius, fill=False)
    blend_mask(raster, outline, left, top, style.border)
    _paint_text(raster, layout, style)


def _rounded_rect_mask(width: int, height: int, radius: int, *, fill: bool) -> np.ndarray:
    image = Image.new("L", (width, height), 0)
    draw = ImageDraw.Draw(image)
    box = (0, 0, width - 1, height - 1)
    if fill:
        draw.rounded_rectangle(box, radius=radius, fill=255)
    else:
        draw.rounded_rectangle(box, radius=radius, outline=255, width=BORDER_WIDTH_PX)
    return np.asarray(image, dtype=np.uint8)


def _paint_shadow(
    raster: torch.Tensor,
    left: int,
    top: int,
    width: int,
    height: int,
    radius: int,
    style: CalloutStyle,
) -> None:
    if style.shadow[3] <= 0:
        return
    margin = int(math.ceil(style.shadow_blur * 3))
    image = Image.new("L", (width + 2 * margin, height + 2 * margin), 0)
    draw = ImageDraw.Draw(image)
    draw.rounded_rectangle((margin, margin, margin + width - 1, margin + height - 1), radius=radius, fill=255)
    if style.shadow_blur > 0:
        image = image.filter(ImageFilter.GaussianBlur(radius=style.shadow_blur))
    mask = np.asarray(image, dtype=np.uint8)
    blend_mask(raster, mask, left - margin, top - margin + round_half_up(style.shadow_offset_y), style.shadow)


def tail_points(layout: CalloutLayout, tail_size: float) -> list[tuple[float, float]]:
    """Kite corners (top, right, apex, left) of a tail whose lower tip is the apex."""

    ax = layout.tail_apex_x
    ay = layout.tail_apex_y
    return [
        (ax, ay - 2.0 * tail_size),
        (ax + tail_size, ay - tail_size),
        (ax, ay),
        (ax - tail_size, ay - tail_size),
    ]


def _paint_tail(raster: torch.Tensor, layout: CalloutLayout, style: CalloutStyle) -> None:
    if style.tail_size <= 0:
        return
    points = tail_points(layout, style.tail_size)
    x0 = int(math.floor(min(p[0] for p in points)))
    y0 = int(math.floor(min(p[1] for p in points)))
    x1 = int(math.ceil(max(p[0] for p in points)))
    y1 = int(math.ceil(max(p[1] for p in points)))
    local = [(x - x0, y - y0) for x, y in points]
    size = (x1 - x0 + 1, y1 - y0 + 1)

    fill = Image.new("L", size, 0)
    ImageDraw.Draw(fill).polygon(local, fill=255)
    blend_mask(raster, np.asarray(fill, dtype=np.uint8), x0, y0, style.background)

    # Only the two lower edges show below the box; the upper ones lie inside it.
    edge = Image.new("L", size, 0)
    ImageDraw.Draw(edge).line([local[1], local[2], local[3]], fill=255, width=BORDER_WIDTH_PX)
    blend_mask(raster, np.asarray(edge, dtype=np.uint8), x0, y0, style.border)


def _paint_text(raster: torch.Tensor, layout: CalloutLayout, style: CalloutStyle) -> None:
    for line, (x, y) in zip(layout.lines, layout.line_origins(), strict=True):
        if not line:
            continue
        mask, dx, dy = render_line_mask(line, style.font, style.font_size_px)
        blend_mask(raster, mask, round_half_up(x) + dx, round_half_up(y) + dy, style.text_color)
