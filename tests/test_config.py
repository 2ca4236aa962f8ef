from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from leafprint_core.core.config import RenderConfig, load_render_config, parse_hex_rgba, render_config_from_mapping
from leafprint_ui.callout import CalloutStyle
from leafprint_ui.style.theme import DEFAULT_CALLOUT_THEME, validate_callout_theme


class RenderConfigTests(unittest.TestCase):
    def test_defaults_match_headless_map_size(self) -> None:
        config = RenderConfig()
        self.assertEqual((config.width, config.height), (1024, 1024))
        self.assertEqual(config.max_workers, 1)

    def test_load_render_table_from_toml(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "scene.toml"
            path.write_text(
                "[render]\nwidth = 320\nheight = 200\nmax_workers = 4\nbackground = \"#FFFFFF\"\n",
                encoding="utf-8",
            )
            config = load_render_config(path)
        self.assertEqual((config.width, config.height, config.max_workers), (320, 200, 4))
        self.assertEqual(config.background, "#FFFFFF")

    def test_missing_render_table_gives_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "scene.toml"
            path.write_text("[map]\nzoom = 3\n", encoding="utf-8")
            self.assertEqual(load_render_config(path), RenderConfig())

    def test_unknown_and_invalid_options_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            render_config_from_mapping({"widht": 10})
        with self.assertRaises(ValueError):
            render_config_from_mapping({"width": 0})
        with self.assertRaises(ValueError):
            render_config_from_mapping({"background": "white"})

    def test_parse_hex_rgba(self) -> None:
        self.assertEqual(parse_hex_rgba("#102030"), (16, 32, 48, 255))
        self.assertEqual(parse_hex_rgba("#10203080"), (16, 32, 48, 128))
        with self.assertRaises(ValueError):
            parse_hex_rgba("102030")


class CalloutThemeTests(unittest.TestCase):
    def test_overrides_merge_with_defaults(self) -> None:
        theme = validate_callout_theme({"background": "#FFEEDD", "font_size_px": 16})
        self.assertEqual(theme.background, "#FFEEDD")
        self.assertEqual(theme.font_size_px, 16.0)
        self.assertEqual(theme.min_width, DEFAULT_CALLOUT_THEME.min_width)

    def test_unknown_token_rejected(self) -> None:
        with self.assertRaises(ValueError):
            validate_callout_theme({"button_bg_idle": "#000000"})

    def test_bad_values_rejected(self) -> None:
        with self.assertRaises(ValueError):
            validate_callout_theme({"border": "black"})
        with self.assertRaises(ValueError):
            validate_callout_theme({"line_height_px": 0})
        with self.assertRaises(ValueError):
            validate_callout_theme({"tail_size": -1})

    def test_style_from_theme_parses_colors_and_padding(self) -> None:
        style = CalloutStyle.from_theme(validate_callout_theme({"shadow": "#00000000", "padding_left": 4}))
        self.assertEqual(style.shadow, (0, 0, 0, 0))
        self.assertEqual(style.padding.left, 4.0)
        self.assertEqual(style.background, (255, 255, 255, 255))

    def test_default_style_matches_default_theme(self) -> None:
        self.assertEqual(CalloutStyle(), CalloutStyle.from_theme(DEFAULT_CALLOUT_THEME))


if __name__ == "__main__":
    unittest.main()
