from __future__ import annotations

import logging
from typing import Callable

import numpy as np

from .errors import DecodeError, UnsupportedLayerError
from .image_loader import ImageLoader, decode_image, load_image_source
from .scene import DrawableLayer, LayerKind


LOGGER = logging.getLogger(__name__)


class RasterSourceResolver:
    """Turns a layer descriptor into its RGBA pixels.

    Pre-rendered layers hand back their surface directly. Image assets are fetched
    through `loader`, decoded once and cached on the layer instance.
    """

    def __init__(
        self,
        loader: ImageLoader | None = None,
        decoder: Callable[[bytes], np.ndarray] = decode_image,
    ) -> None:
        self._loader = loader or load_image_source
        self._decoder = decoder

    def resolve(self, layer: DrawableLayer) -> np.ndarray:
        kind = layer.kind
        if kind == LayerKind.PRE_RENDERED:
            if layer.surface is None:
                raise DecodeError("pre-rendered layer has no surface", layer_id=layer.layer_id)
            _check_rgba(layer.surface, layer)
            return layer.surface
        if kind == LayerKind.IMAGE_ASSET:
            return self._resolve_image(layer)
        raise UnsupportedLayerError(kind, layer_id=layer.layer_id)

    def natural_size(self, raster: np.ndarray) -> tuple[int, int]:
        return (int(raster.shape[1]), int(raster.shape[0]))

    def _resolve_image(self, layer: DrawableLayer) -> np.ndarray:
        if not layer.source:
            raise DecodeError("image layer without source", layer_id=layer.layer_id)
        with layer._decode_lock:
            if layer.decoded is not None:
                LOGGER.debug("decode cache hit for %s", layer.source)
                return layer.decoded
            try:
                data = self._loader(layer.source)
                raster = self._decoder(data)
            except OSError as exc:
                raise DecodeError(str(exc), locator=layer.source, layer_id=layer.layer_id) from exc
            _check_rgba(raster, layer)
            layer.decoded = raster
            return raster


def _check_rgba(raster: np.ndarray, layer: DrawableLayer) -> None:
    if raster.ndim != 3 or raster.shape[2] != 4:
        raise DecodeError(
            f"raster has shape {raster.shape}, expected (h, w, 4)",
            locator=layer.source,
            layer_id=layer.layer_id,
        )
