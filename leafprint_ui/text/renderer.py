from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import logging
from pathlib import Path
from typing import Protocol

import numpy as np
from PIL import Image, ImageDraw, ImageFont


LOGGER = logging.getLogger(__name__)

DEFAULT_FONT_FAMILY = "Helvetica Neue"
FALLBACK_FONT_PATTERNS = (
    "notosans-regular",
    "notosans",
    "helveticaneue",
    "helvetica",
    "arial",
    "dejavusans",
    "liberationsans",
)
FONT_DIRS = (
    Path.home() / "Library" / "Fonts",
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path("/System/Library/Fonts/Supplemental"),
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
)

LoadedFont = ImageFont.FreeTypeFont | ImageFont.ImageFont


@dataclass(frozen=True)
class FontSpec:
    """Font definition from either system lookup or explicit file path.

    If `file_path` is set it wins over family lookup.
    """

    family: str = DEFAULT_FONT_FAMILY
    file_path: str | None = None

    def __post_init__(self) -> None:
        if not self.family.strip() and self.file_path is None:
            raise ValueError("FontSpec requires `family` when `file_path` is not set")
        if self.file_path is not None and not str(self.file_path).strip():
            raise ValueError("FontSpec `file_path` must be non-empty when provided")


class TextMeasurer(Protocol):
    def measure(self, text: str, font: FontSpec, size_px: float) -> float:
        ...


class PillowTextMeasurer:
    """Advance-width measurement backed by the same fonts the painter draws with."""

    def measure(self, text: str, font: FontSpec, size_px: float) -> float:
        if not text:
            return 0.0
        return float(load_font(font, size_px).getlength(text))


def load_font(font: FontSpec, size_px: float) -> LoadedFont:
    if size_px <= 0:
        raise ValueError("font size must be > 0")
    return _load_font(_resolve_font_path(font), max(1, int(round(size_px))))


def render_line_mask(text: str, font: FontSpec, size_px: float) -> tuple[np.ndarray, int, int]:
    """Rasterize one line to an 8-bit coverage mask.

    Returns `(mask, dx, dy)` where the offsets place the mask relative to the line's
    left baseline origin; `dy` is negative for ink above the baseline.
    """

    if not text:
        return np.zeros((0, 0), dtype=np.uint8), 0, 0
    return _render_mask(text, load_font(font, size_px))


@lru_cache(maxsize=256)
def _render_mask(text: str, font: LoadedFont) -> tuple[np.ndarray, int, int]:
    left, top, right, bottom = font.getbbox(text, anchor="ls")
    width = max(1, int(right - left))
    height = max(1, int(bottom - top))
    image = Image.new("L", (width, height), 0)
    draw = ImageDraw.Draw(image)
    draw.text((-left, -top), text, fill=255, font=font, anchor="ls")
    return np.asarray(image, dtype=np.uint8), int(left), int(top)


@lru_cache(maxsize=64)
def _load_font(font_path: str, size: int) -> LoadedFont:
    if font_path:
        try:
            return ImageFont.truetype(font_path, size=size)
        except OSError as exc:
            LOGGER.warning("unable to load font %s, using Pillow default: %s", font_path, exc)
    return ImageFont.load_default(size=size)


def _resolve_font_path(font: FontSpec) -> str:
    if font.file_path:
        return str(Path(font.file_path).resolve())
    return _resolve_system_font_path(font.family)


@lru_cache(maxsize=32)
def _resolve_system_font_path(family: str) -> str:
    wanted = (family.strip() or DEFAULT_FONT_FAMILY).lower().replace(" ", "")
    candidates: list[Path] = []
    for base in FONT_DIRS:
        if not base.exists():
            continue
        for ext in ("*.ttf", "*.otf", "*.ttc"):
            candidates.extend(sorted(base.rglob(ext)))
    for pattern in (wanted,) + FALLBACK_FONT_PATTERNS:
        for path in candidates:
            name = path.name.lower().replace(" ", "")
            stem = path.stem.lower().replace(" ", "")
            if pattern in name or pattern in stem:
                return str(path)
    LOGGER.warning("no font file found for family %r; falling back to Pillow's default font", family)
    return ""
