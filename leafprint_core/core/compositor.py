from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass, field
import logging
from typing import Iterator

import numpy as np
from PIL import Image
import torch

from leafprint_core.render.frame import blend_raster, new_frame, round_half_up

from .errors import DecodeError, EmptySceneError
from .resolver import RasterSourceResolver
from .scene import DrawableLayer, LayerKind, SceneSource, Viewport


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayerFailure:
    layer_id: str
    locator: str | None
    message: str


@dataclass
class CompositeResult:
    frame: torch.Tensor
    composited: list[str] = field(default_factory=list)
    failures: list[LayerFailure] = field(default_factory=list)


class LayerCompositor:
    """Merges the scene's drawable layers into one transparent-backed RGBA frame.

    Layers are blended strictly in the order given. Image assets may be resolved on a
    worker pool when `max_workers > 1`; blending stays serialized in scene order.
    """

    def __init__(
        self,
        resolver: RasterSourceResolver | None = None,
        *,
        scene: SceneSource | None = None,
        max_workers: int = 1,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self._resolver = resolver or RasterSourceResolver()
        self._scene = scene
        self._max_workers = max_workers

    def composite(self, viewport: Viewport, layers: list[DrawableLayer]) -> torch.Tensor:
        return self.composite_with_report(viewport, layers).frame

    def composite_with_report(self, viewport: Viewport, layers: list[DrawableLayer]) -> CompositeResult:
        result = CompositeResult(frame=new_frame(viewport.width, viewport.height))
        if layers:
            self._composite_layers(result, list(layers))
            return result
        with self._synthetic_shape(viewport) as fallback_layers:
            if not fallback_layers:
                raise EmptySceneError(
                    "Unable to create canvas renderer: scene has no drawable layers after synthetic shape injection"
                )
            self._composite_layers(result, fallback_layers)
        return result

    @contextmanager
    def _synthetic_shape(self, viewport: Viewport) -> Iterator[list[DrawableLayer]]:
        if self._scene is None:
            raise EmptySceneError("scene has no drawable layers and no scene source to inject a synthetic shape")
        token = self._scene.add_synthetic_shape(viewport)
        try:
            yield list(self._scene.enumerate_layers(viewport))
        finally:
            self._scene.remove_shape(token)

    def _composite_layers(self, result: CompositeResult, layers: list[DrawableLayer]) -> None:
        pending = self._prefetch(layers)
        for index, layer in enumerate(layers):
            try:
                raster = pending[index].result() if index in pending else self._resolver.resolve(layer)
            except DecodeError as exc:
                LOGGER.warning("skipping layer %s: %s", layer.layer_id, exc)
                result.failures.append(LayerFailure(layer.layer_id, exc.locator, str(exc)))
                continue
            self._draw(result.frame, layer, raster)
            result.composited.append(layer.layer_id)

    def _prefetch(self, layers: list[DrawableLayer]) -> dict[int, Future[np.ndarray]]:
        if self._max_workers <= 1:
            return {}
        assets = [i for i, layer in enumerate(layers) if layer.kind == LayerKind.IMAGE_ASSET]
        if len(assets) < 2:
            return {}
        pending: dict[int, Future[np.ndarray]] = {}
        with ThreadPoolExecutor(max_workers=min(self._max_workers, len(assets))) as pool:
            for i in assets:
                pending[i] = pool.submit(self._resolver.resolve, layers[i])
        return pending

    def _draw(self, frame: torch.Tensor, layer: DrawableLayer, raster: np.ndarray) -> None:
        x, y = layer.resolved_position()
        natural = self._resolver.natural_size(raster)
        width, height = layer.resolved_size(natural)
        if (width, height) != natural:
            raster = _resize(raster, width, height)
        blend_raster(frame, raster, round_half_up(x), round_half_up(y))


def _resize(raster: np.ndarray, width: int, height: int) -> np.ndarray:
    if width <= 0 or height <= 0:
        return np.zeros((0, 0, 4), dtype=np.uint8)
    image = Image.fromarray(np.ascontiguousarray(raster))
    return np.array(image.resize((width, height), resample=Image.Resampling.BILINEAR), dtype=np.uint8)
