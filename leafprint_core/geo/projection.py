from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Literal, Protocol


YAxis = Literal["down", "up"]
MAX_LATITUDE = 85.0511287798
EARTH_RADIUS_M = 6378137.0


@dataclass(frozen=True)
class LatLng:
    lat: float
    lng: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.lat) and math.isfinite(self.lng)):
            raise ValueError(f"LatLng must be finite, got ({self.lat}, {self.lng})")


class Projection(Protocol):
    """Geographic to viewport pixel transform for the current view.

    `y_axis` declares which way pixel y grows: "down" for a top-left origin, "up" for
    a bottom-left origin.
    """

    y_axis: YAxis

    def project(self, latlng: LatLng) -> tuple[float, float] | None:
        ...


class WebMercatorProjection:
    """Spherical Mercator (EPSG:3857) view transform with a top-left pixel origin."""

    y_axis: YAxis = "down"

    def __init__(self, center: LatLng, zoom: float, size: tuple[int, int], tile_size: int = 256) -> None:
        if tile_size <= 0:
            raise ValueError("tile_size must be > 0")
        self.center = center
        self.zoom = float(zoom)
        self.size = size
        self.tile_size = tile_size

    @property
    def scale(self) -> float:
        return self.tile_size * (2.0 ** self.zoom)

    def world_pixel(self, latlng: LatLng) -> tuple[float, float]:
        lat = max(-MAX_LATITUDE, min(MAX_LATITUDE, latlng.lat))
        x = EARTH_RADIUS_M * math.radians(latlng.lng)
        sin = math.sin(math.radians(lat))
        y = EARTH_RADIUS_M * math.log((1.0 + sin) / (1.0 - sin)) / 2.0
        k = 0.5 / (math.pi * EARTH_RADIUS_M)
        return (self.scale * (k * x + 0.5), self.scale * (-k * y + 0.5))

    def pixel_origin(self) -> tuple[float, float]:
        # Whole-pixel origin keeps tile edges on pixel boundaries.
        cx, cy = self.world_pixel(self.center)
        width, height = self.size
        return (math.floor(cx - width / 2.0 + 0.5), math.floor(cy - height / 2.0 + 0.5))

    def project(self, latlng: LatLng) -> tuple[float, float] | None:
        wx, wy = self.world_pixel(latlng)
        ox, oy = self.pixel_origin()
        return (wx - ox, wy - oy)

    def with_size(self, size: tuple[int, int]) -> "WebMercatorProjection":
        return WebMercatorProjection(self.center, self.zoom, size, tile_size=self.tile_size)
