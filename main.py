from __future__ import annotations

import argparse
from dataclasses import replace
import logging
from pathlib import Path
import tomllib
from typing import Any

from leafprint_core.core import DrawableLayer, Scene, render_config_from_mapping
from leafprint_core.geo.projection import LatLng, WebMercatorProjection
from leafprint_core.map.handle import MapHandle
from leafprint_ui.callout import Callout, CalloutStyle
from leafprint_ui.style.theme import validate_callout_theme


LOGGER = logging.getLogger("leafprint")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="leafprint")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a TOML scene description to an image file.")
    render.add_argument("scene", type=Path)
    render.add_argument("--out", type=Path, required=True)
    render.add_argument("--width", type=int, default=None, help="Override [render].width.")
    render.add_argument("--height", type=int, default=None, help="Override [render].height.")
    render.add_argument(
        "--format",
        choices=["png", "jpeg"],
        default=None,
        help="Output format. Default: taken from the --out suffix.",
    )
    render.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    if args.command == "render":
        handle = build_map_from_file(args.scene)
        if args.width is not None or args.height is not None:
            handle.set_size(args.width or handle.size.width, args.height or handle.size.height)
        if args.format is None:
            out = handle.save_image(args.out)
        else:
            args.out.write_bytes(handle.to_buffer(args.format))
            out = args.out
        LOGGER.info("wrote %s (%dx%d)", out, handle.size.width, handle.size.height)
        print(out)
    return 0


def build_map_from_file(path: Path) -> MapHandle:
    with path.open("rb") as f:
        raw = tomllib.load(f)
    return build_map(raw, base_dir=path.parent)


def build_map(raw: dict[str, Any], *, base_dir: Path) -> MapHandle:
    """Build a map handle from a parsed scene description.

    Relative image paths resolve against `base_dir`.
    """

    config = render_config_from_mapping(raw.get("render", {}))
    view = raw.get("map", {})
    center = view.get("center", [0.0, 0.0])
    if len(center) != 2:
        raise ValueError("map.center must be [lat, lng]")
    projection = WebMercatorProjection(
        LatLng(float(center[0]), float(center[1])),
        float(view.get("zoom", 0)),
        (config.width, config.height),
    )

    scene = Scene()
    for entry in raw.get("layers", []):
        scene.add(
            DrawableLayer.image_asset(
                _resolve_source(str(entry["source"]), base_dir),
                style_left=entry.get("left"),
                style_top=entry.get("top"),
                width=entry.get("width"),
                height=entry.get("height"),
            )
        )

    style = CalloutStyle.from_theme(validate_callout_theme(raw.get("theme")))
    handle = MapHandle(scene, projection, config=config)
    for entry in raw.get("callouts", []):
        offset = entry.get("anchor_offset", [0.0, 0.0])
        callout = Callout(
            anchor=LatLng(float(entry["lat"]), float(entry["lng"])),
            content=str(entry.get("content", "")),
            anchor_offset=(float(offset[0]), float(offset[1])),
            style=style,
        )
        if "min_width" in entry:
            callout = replace(callout, style=replace(style, min_width=float(entry["min_width"])))
        handle.open_callout(callout)
    return handle


def _resolve_source(source: str, base_dir: Path) -> str:
    if "://" in source or Path(source).is_absolute():
        return source
    return str(base_dir / source)


if __name__ == "__main__":
    raise SystemExit(main())
