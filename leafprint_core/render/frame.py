from __future__ import annotations

import math

import numpy as np
import torch


RGBA = tuple[int, int, int, int]
TRANSPARENT: RGBA = (0, 0, 0, 0)


def new_frame(width: int, height: int, color: RGBA = TRANSPARENT) -> torch.Tensor:
    if width <= 0 or height <= 0:
        raise ValueError("frame dimensions must be > 0")
    frame = torch.zeros((height, width, 4), dtype=torch.uint8)
    frame[:, :, 0] = color[0]
    frame[:, :, 1] = color[1]
    frame[:, :, 2] = color[2]
    frame[:, :, 3] = color[3]
    return frame


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clip_window(frame: torch.Tensor, x: int, y: int, w: int, h: int) -> tuple[int, int, int, int, int, int] | None:
    x0 = max(0, x)
    y0 = max(0, y)
    x1 = min(frame.shape[1], x + w)
    y1 = min(frame.shape[0], y + h)
    if x1 <= x0 or y1 <= y0:
        return None
    return x0, y0, x1, y1, x0 - x, y0 - y


def blend_raster(frame: torch.Tensor, src: np.ndarray, x: int, y: int) -> None:
    """Source-over blend of a straight-alpha RGBA raster onto `frame` at (x, y).

    Pixels outside the frame are clipped; nothing outside the window is touched.
    """

    h, w = src.shape[0], src.shape[1]
    if h <= 0 or w <= 0:
        return
    window = _clip_window(frame, x, y, w, h)
    if window is None:
        return
    x0, y0, x1, y1, sx0, sy0 = window
    patch = torch.tensor(np.ascontiguousarray(src[sy0 : sy0 + (y1 - y0), sx0 : sx0 + (x1 - x0)]))
    src_rgb = patch[:, :, :3].to(torch.float32)
    src_alpha = patch[:, :, 3].to(torch.float32) / 255.0
    _source_over(frame, x0, y0, x1, y1, src_rgb, src_alpha)


def blend_mask(frame: torch.Tensor, mask: np.ndarray, x: int, y: int, color: RGBA) -> None:
    """Blend a solid colour through an 8-bit coverage mask placed at (x, y)."""

    h, w = mask.shape
    if h <= 0 or w <= 0:
        return
    window = _clip_window(frame, x, y, w, h)
    if window is None:
        return
    x0, y0, x1, y1, sx0, sy0 = window
    cov = mask[sy0 : sy0 + (y1 - y0), sx0 : sx0 + (x1 - x0)].astype(np.float32) / 255.0
    src_alpha = torch.from_numpy(np.ascontiguousarray(cov)) * (color[3] / 255.0)
    if not bool((src_alpha > 0).any()):
        return
    src_rgb = torch.tensor(color[:3], dtype=torch.float32).view(1, 1, 3).expand(y1 - y0, x1 - x0, 3)
    _source_over(frame, x0, y0, x1, y1, src_rgb, src_alpha)


def _source_over(
    frame: torch.Tensor,
    x0: int,
    y0: int,
    x1: int,
    y1: int,
    src_rgb: torch.Tensor,
    src_alpha: torch.Tensor,
) -> None:
    dst = frame[y0:y1, x0:x1]
    dst_rgb = dst[:, :, :3].to(torch.float32)
    dst_alpha = dst[:, :, 3].to(torch.float32) / 255.0

    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
    out_rgb_num = src_rgb * src_alpha.unsqueeze(-1) + dst_rgb * (dst_alpha * (1.0 - src_alpha)).unsqueeze(-1)
    visible = out_alpha > 1e-6
    safe = torch.where(visible, out_alpha, torch.ones_like(out_alpha))
    out_rgb = torch.where(visible.unsqueeze(-1), out_rgb_num / safe.unsqueeze(-1), torch.zeros_like(out_rgb_num))

    dst[:, :, :3] = torch.clamp(torch.round(out_rgb), 0, 255).to(torch.uint8)
    dst[:, :, 3] = torch.clamp(torch.round(out_alpha * 255.0), 0, 255).to(torch.uint8)
