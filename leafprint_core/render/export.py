from __future__ import annotations

import io
from pathlib import Path

from PIL import Image
import torch


_FORMATS = {"png": "PNG", "jpeg": "JPEG", "jpg": "JPEG"}


def frame_to_image(frame: torch.Tensor) -> Image.Image:
    if frame.ndim != 3 or frame.shape[2] != 4:
        raise ValueError(f"frame must have shape (h, w, 4), got {tuple(frame.shape)}")
    return Image.fromarray(frame.contiguous().cpu().numpy())


def encode_frame(frame: torch.Tensor, format: str = "png") -> bytes:
    pil_format = _FORMATS.get(format.lower())
    if pil_format is None:
        raise ValueError(f"unsupported image format: {format}")
    image = frame_to_image(frame)
    if pil_format == "JPEG":
        # JPEG has no alpha channel.
        flat = Image.new("RGBA", image.size, (255, 255, 255, 255))
        flat.alpha_composite(image)
        image = flat.convert("RGB")
    buffer = io.BytesIO()
    image.save(buffer, format=pil_format)
    return buffer.getvalue()


def save_frame(frame: torch.Tensor, path: Path) -> Path:
    fmt = path.suffix.lstrip(".") or "png"
    path.write_bytes(encode_frame(frame, fmt))
    return path
