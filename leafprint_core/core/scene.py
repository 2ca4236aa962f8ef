from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import itertools
import logging
import math
import re
import threading
from typing import Protocol

import numpy as np


LOGGER = logging.getLogger(__name__)
_CSS_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_layer_ids = itertools.count(1)


class LayerKind(str, Enum):
    PRE_RENDERED = "pre_rendered"
    IMAGE_ASSET = "image_asset"


@dataclass(frozen=True)
class Viewport:
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Viewport width and height must be > 0")


def parse_css_length(value: float | int | str | None) -> float | None:
    """Parse a style offset the way `parseFloat` reads `"12.5px"`; `None` when unusable."""

    if value is None:
        return None
    if isinstance(value, (int, float)):
        parsed = float(value)
    else:
        match = _CSS_NUMBER.match(value)
        if match is None:
            return None
        parsed = float(match.group(1))
    if not math.isfinite(parsed):
        return None
    return parsed


@dataclass(eq=False)
class DrawableLayer:
    """One paintable unit of the scene, in paint order.

    `style_left`/`style_top` are the explicit style offsets; `offset_left`/`offset_top`
    are the layout-derived fallbacks. `decoded` is the lazily populated decode of an
    image asset and belongs to this instance.
    """

    kind: LayerKind
    surface: np.ndarray | None = None
    source: str | None = None
    style_left: float | str | None = None
    style_top: float | str | None = None
    offset_left: float | None = None
    offset_top: float | None = None
    width: int | None = None
    height: int | None = None
    layer_id: str = field(default_factory=lambda: f"layer-{next(_layer_ids)}")
    decoded: np.ndarray | None = field(default=None, repr=False)
    _decode_lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @classmethod
    def pre_rendered(cls, surface: np.ndarray, **kwargs) -> "DrawableLayer":
        return cls(kind=LayerKind.PRE_RENDERED, surface=surface, **kwargs)

    @classmethod
    def image_asset(cls, source: str, **kwargs) -> "DrawableLayer":
        return cls(kind=LayerKind.IMAGE_ASSET, source=source, **kwargs)

    def resolved_position(self) -> tuple[float, float]:
        return (
            _first_finite(parse_css_length(self.style_left), self.offset_left),
            _first_finite(parse_css_length(self.style_top), self.offset_top),
        )

    def resolved_size(self, natural: tuple[int, int]) -> tuple[int, int]:
        natural_w, natural_h = natural
        return (self.width or natural_w, self.height or natural_h)


def _first_finite(*candidates: float | None) -> float:
    for value in candidates:
        if value is not None and math.isfinite(value):
            return float(value)
    return 0.0


class SceneSource(Protocol):
    """Enumerates the drawable layers attached to a map view, in paint order."""

    def enumerate_layers(self, viewport: Viewport) -> list[DrawableLayer]:
        ...

    def add_synthetic_shape(self, viewport: Viewport) -> object:
        ...

    def remove_shape(self, token: object) -> None:
        ...


class Scene:
    """In-memory ordered arena of layers; insertion order is paint order."""

    def __init__(self, layers: list[DrawableLayer] | None = None) -> None:
        self._layers: list[DrawableLayer] = list(layers or [])
        self._lock = threading.Lock()

    def add(self, layer: DrawableLayer) -> DrawableLayer:
        with self._lock:
            self._layers.append(layer)
        return layer

    def remove(self, layer: DrawableLayer) -> None:
        with self._lock:
            self._layers = [item for item in self._layers if item is not layer]

    def __len__(self) -> int:
        return len(self._layers)

    def __contains__(self, layer: object) -> bool:
        return any(item is layer for item in self._layers)

    @property
    def layers(self) -> list[DrawableLayer]:
        with self._lock:
            return list(self._layers)

    def enumerate_layers(self, viewport: Viewport) -> list[DrawableLayer]:
        _ = viewport
        return self.layers

    def add_synthetic_shape(self, viewport: Viewport) -> object:
        # A zero-opacity shape still forces the vector renderer to produce a surface.
        surface = np.zeros((viewport.height, viewport.width, 4), dtype=np.uint8)
        layer = DrawableLayer.pre_rendered(surface, layer_id="synthetic-shape", style_left=0, style_top=0)
        LOGGER.debug("added synthetic shape layer for empty scene (%dx%d)", viewport.width, viewport.height)
        return self.add(layer)

    def remove_shape(self, token: object) -> None:
        if isinstance(token, DrawableLayer):
            self.remove(token)
