from __future__ import annotations

from dataclasses import dataclass, field, replace
import logging
from pathlib import Path

import torch

from leafprint_core.core.compositor import CompositeResult, LayerCompositor
from leafprint_core.core.config import RenderConfig, parse_hex_rgba
from leafprint_core.core.errors import NoAnchorError
from leafprint_core.core.image_loader import UrlImageLoader
from leafprint_core.core.resolver import RasterSourceResolver
from leafprint_core.core.scene import Scene, Viewport
from leafprint_core.geo.projection import Projection
from leafprint_core.render.export import encode_frame, save_frame
from leafprint_core.render.frame import blend_raster, new_frame
from leafprint_ui.callout import Callout, CalloutLayout, layout, paint
from leafprint_ui.text.renderer import TextMeasurer


LOGGER = logging.getLogger(__name__)


@dataclass
class RenderReport:
    composite: CompositeResult
    callouts: list[tuple[str, CalloutLayout]] = field(default_factory=list)
    skipped_callouts: list[str] = field(default_factory=list)


class MapHandle:
    """A headless map view: scene, projection and size plus render/export methods."""

    def __init__(
        self,
        scene: Scene,
        projection: Projection,
        *,
        config: RenderConfig | None = None,
        resolver: RasterSourceResolver | None = None,
        measurer: TextMeasurer | None = None,
    ) -> None:
        self.scene = scene
        self.projection = projection
        self.config = config or RenderConfig()
        self._resolver = resolver or RasterSourceResolver(
            UrlImageLoader(timeout_s=self.config.fetch_timeout_s, user_agent=self.config.user_agent)
        )
        self._measurer = measurer
        self._callouts: list[Callout] = []

    @property
    def size(self) -> Viewport:
        return Viewport(self.config.width, self.config.height)

    def set_size(self, width: int, height: int) -> "MapHandle":
        self.config = replace(self.config, width=width, height=height)
        with_size = getattr(self.projection, "with_size", None)
        if with_size is not None:
            self.projection = with_size((width, height))
        return self

    @property
    def callouts(self) -> list[Callout]:
        return list(self._callouts)

    def open_callout(self, callout: Callout) -> Callout:
        self._callouts.append(callout)
        return callout

    def close_callout(self, callout_id: str) -> None:
        self._callouts = [c for c in self._callouts if c.callout_id != callout_id]

    def render(self) -> torch.Tensor:
        return self.render_with_report().composite.frame

    def render_with_report(self) -> RenderReport:
        viewport = self.size
        compositor = LayerCompositor(self._resolver, scene=self.scene, max_workers=self.config.max_workers)
        result = compositor.composite_with_report(viewport, self.scene.enumerate_layers(viewport))
        if self.config.background is not None:
            backed = new_frame(viewport.width, viewport.height, parse_hex_rgba(self.config.background))
            _underlay(backed, result.frame)
            result.frame = backed
        report = RenderReport(composite=result)
        for callout in self._callouts:
            try:
                box = layout(viewport, callout, projection=self.projection, measurer=self._measurer)
            except NoAnchorError as exc:
                LOGGER.warning("skipping callout: %s", exc)
                report.skipped_callouts.append(callout.callout_id)
                continue
            paint(result.frame, box, callout.style)
            report.callouts.append((callout.callout_id, box))
        return report

    def to_buffer(self, format: str = "png") -> bytes:
        return encode_frame(self.render(), format)

    def save_image(self, path: Path) -> Path:
        return save_frame(self.render(), Path(path))


def _underlay(background: torch.Tensor, frame: torch.Tensor) -> None:
    blend_raster(background, frame.cpu().numpy(), 0, 0)
