from __future__ import annotations

import io
from pathlib import Path
from typing import Protocol
import urllib.error
import urllib.request

import numpy as np
from PIL import Image, UnidentifiedImageError


DEFAULT_USER_AGENT = "leafprint"
DEFAULT_FETCH_TIMEOUT_S = 30.0


class ImageLoader(Protocol):
    def __call__(self, locator: str) -> bytes:
        ...


class ImageFetchError(OSError):
    pass


def strip_querystring(locator: str) -> str:
    index = locator.find("?")
    return locator if index == -1 else locator[:index]


class UrlImageLoader:
    """Fetches image bytes from http(s) URLs, `file://` URLs or local paths."""

    def __init__(self, *, timeout_s: float = DEFAULT_FETCH_TIMEOUT_S, user_agent: str = DEFAULT_USER_AGENT) -> None:
        if timeout_s <= 0:
            raise ValueError("timeout_s must be > 0")
        self.timeout_s = timeout_s
        self.user_agent = user_agent

    def __call__(self, locator: str) -> bytes:
        if locator.startswith(("http://", "https://")):
            return self._load_url(locator)
        if locator.startswith("file://"):
            return _load_file(locator[len("file://") :])
        return _load_file(locator)

    def _load_url(self, url: str) -> bytes:
        req = urllib.request.Request(url=url, headers={"User-Agent": self.user_agent}, method="GET")
        try:
            with urllib.request.urlopen(req, timeout=self.timeout_s) as resp:
                return resp.read()
        except urllib.error.HTTPError as exc:
            raise ImageFetchError(f"Failed to fetch image from {url}: {exc.code} {exc.reason}") from exc
        except urllib.error.URLError as exc:
            raise ImageFetchError(f"Failed to fetch image from {url}: {exc.reason}") from exc


def _load_file(path: str) -> bytes:
    clean = Path(strip_querystring(path))
    if not clean.is_file():
        raise ImageFetchError(f"Could not find image: {clean}")
    return clean.read_bytes()


load_image_source = UrlImageLoader()


def decode_image(data: bytes) -> np.ndarray:
    """Decode encoded image bytes into a straight-alpha RGBA uint8 array."""

    try:
        with Image.open(io.BytesIO(data)) as image:
            rgba = image.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise ImageFetchError(f"unable to decode image: {exc}") from exc
    return np.array(rgba, dtype=np.uint8)
