from .compositor import CompositeResult, LayerCompositor, LayerFailure
from .config import RenderConfig, load_render_config, parse_hex_rgba, render_config_from_mapping
from .errors import DecodeError, EmptySceneError, LeafprintError, NoAnchorError, UnsupportedLayerError
from .image_loader import ImageFetchError, ImageLoader, UrlImageLoader, decode_image, load_image_source
from .resolver import RasterSourceResolver
from .scene import DrawableLayer, LayerKind, Scene, SceneSource, Viewport, parse_css_length

__all__ = [
    "CompositeResult",
    "DecodeError",
    "DrawableLayer",
    "EmptySceneError",
    "ImageFetchError",
    "ImageLoader",
    "LayerCompositor",
    "LayerFailure",
    "LayerKind",
    "LeafprintError",
    "NoAnchorError",
    "RasterSourceResolver",
    "RenderConfig",
    "Scene",
    "SceneSource",
    "UnsupportedLayerError",
    "UrlImageLoader",
    "Viewport",
    "decode_image",
    "load_image_source",
    "load_render_config",
    "parse_css_length",
    "parse_hex_rgba",
    "render_config_from_mapping",
]
