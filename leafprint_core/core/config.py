from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
import re
import tomllib
from typing import Any, Mapping

from .image_loader import DEFAULT_FETCH_TIMEOUT_S, DEFAULT_USER_AGENT


_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")


@dataclass(frozen=True)
class RenderConfig:
    """Per-map render options; the default map size matches a 1024x1024 viewport."""

    width: int = 1024
    height: int = 1024
    max_workers: int = 1
    fetch_timeout_s: float = DEFAULT_FETCH_TIMEOUT_S
    user_agent: str = DEFAULT_USER_AGENT
    background: str | None = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("RenderConfig width/height must be > 0")
        if self.max_workers < 1:
            raise ValueError("RenderConfig max_workers must be >= 1")
        if self.fetch_timeout_s <= 0:
            raise ValueError("RenderConfig fetch_timeout_s must be > 0")
        if not self.user_agent.strip():
            raise ValueError("RenderConfig user_agent must be non-empty")
        if self.background is not None and not _HEX_COLOR.match(self.background):
            raise ValueError("RenderConfig background must be a hex color (#RRGGBB or #RRGGBBAA)")


def render_config_from_mapping(raw: Mapping[str, Any]) -> RenderConfig:
    known = {f.name for f in fields(RenderConfig)}
    for key in raw:
        if key not in known:
            raise ValueError(f"Unknown render option: {key}")
    merged: dict[str, Any] = asdict(RenderConfig())
    merged.update(raw)
    return RenderConfig(
        width=int(merged["width"]),
        height=int(merged["height"]),
        max_workers=int(merged["max_workers"]),
        fetch_timeout_s=float(merged["fetch_timeout_s"]),
        user_agent=str(merged["user_agent"]),
        background=None if merged["background"] is None else str(merged["background"]),
    )


def load_render_config(path: Path) -> RenderConfig:
    """Read the `[render]` table of a TOML file; a missing table yields defaults."""

    with path.open("rb") as f:
        raw = tomllib.load(f)
    table = raw.get("render", {})
    if not isinstance(table, dict):
        raise ValueError("`render` must be a TOML table")
    return render_config_from_mapping(table)


def parse_hex_rgba(value: str) -> tuple[int, int, int, int]:
    if not _HEX_COLOR.match(value):
        raise ValueError(f"color must be #RRGGBB or #RRGGBBAA, got `{value}`")
    raw = value[1:]
    alpha = int(raw[6:8], 16) if len(raw) == 8 else 255
    return (int(raw[0:2], 16), int(raw[2:4], 16), int(raw[4:6], 16), alpha)
