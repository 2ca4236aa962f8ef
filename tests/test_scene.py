from __future__ import annotations

import unittest

import numpy as np

from leafprint_core.core.scene import DrawableLayer, LayerKind, Scene, Viewport, parse_css_length
from leafprint_core.render.frame import blend_raster, new_frame, round_half_up


class SceneModelTests(unittest.TestCase):
    def test_parse_css_length_reads_leading_number(self) -> None:
        self.assertEqual(parse_css_length("12.5px"), 12.5)
        self.assertEqual(parse_css_length("-3px"), -3.0)
        self.assertEqual(parse_css_length(7), 7.0)
        self.assertIsNone(parse_css_length("auto"))
        self.assertIsNone(parse_css_length(""))
        self.assertIsNone(parse_css_length(float("inf")))
        self.assertIsNone(parse_css_length(None))

    def test_position_falls_back_per_axis(self) -> None:
        layer = DrawableLayer.pre_rendered(np.zeros((1, 1, 4), dtype=np.uint8), style_left="4px", offset_top=9)
        self.assertEqual(layer.resolved_position(), (4.0, 9.0))
        self.assertEqual(DrawableLayer(kind=LayerKind.PRE_RENDERED).resolved_position(), (0.0, 0.0))

    def test_size_override_per_axis(self) -> None:
        layer = DrawableLayer.image_asset("a.png", width=30)
        self.assertEqual(layer.resolved_size((10, 20)), (30, 20))

    def test_scene_preserves_insertion_order(self) -> None:
        a = DrawableLayer.image_asset("a.png")
        b = DrawableLayer.image_asset("b.png")
        scene = Scene([a])
        scene.add(b)
        self.assertEqual(scene.enumerate_layers(Viewport(1, 1)), [a, b])
        scene.remove(a)
        self.assertEqual(scene.layers, [b])

    def test_synthetic_shape_is_transparent_viewport_layer(self) -> None:
        scene = Scene()
        token = scene.add_synthetic_shape(Viewport(6, 4))
        self.assertIn(token, scene)
        (layer,) = scene.layers
        self.assertEqual(layer.surface.shape, (4, 6, 4))
        self.assertEqual(int(layer.surface.sum()), 0)
        scene.remove_shape(token)
        self.assertEqual(len(scene), 0)

    def test_viewport_rejects_non_positive_sizes(self) -> None:
        with self.assertRaises(ValueError):
            Viewport(0, 10)


class FrameTests(unittest.TestCase):
    def test_round_half_up(self) -> None:
        self.assertEqual([round_half_up(v) for v in (0.5, 1.5, 2.4, -0.5, -1.6)], [1, 2, 2, 0, -2])

    def test_blend_raster_clips_at_frame_edges(self) -> None:
        frame = new_frame(4, 4)
        src = np.full((3, 3, 4), 255, dtype=np.uint8)
        blend_raster(frame, src, 2, -1)
        self.assertEqual(int(frame[:, :, 3].gt(0).sum()), 4)
        self.assertEqual(frame[0, 3].tolist(), [255, 255, 255, 255])
        self.assertEqual(frame[2, 3].tolist(), [0, 0, 0, 0])

    def test_semi_transparent_over_transparent_keeps_straight_color(self) -> None:
        frame = new_frame(1, 1)
        blend_raster(frame, np.array([[[200, 100, 50, 64]]], dtype=np.uint8), 0, 0)
        self.assertEqual(frame[0, 0].tolist(), [200, 100, 50, 64])


if __name__ == "__main__":
    unittest.main()
