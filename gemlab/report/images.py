"""Raster asset decoding and aspect-preserving placement."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from io import BytesIO
from typing import Any

from reportlab.lib.utils import ImageReader

from .errors import UnsupportedImageFormat
from .pager import ImageElement
from .pdf_layout import Box, assert_aspect_preserved, fit_rect_preserve_aspect

LOGGER = logging.getLogger(__name__)

PNG_MAGIC = b"\x89PNG"
JPEG_MAGIC = b"\xff\xd8"


def detect_image_format(data: bytes) -> str:
    """Return ``"png"`` or ``"jpeg"`` from the leading bytes of *data*."""
    if data[:4] == PNG_MAGIC:
        return "png"
    if data[:2] == JPEG_MAGIC:
        return "jpeg"
    raise UnsupportedImageFormat(
        f"Unsupported image format (leading bytes {data[:4].hex() or 'empty'})"
    )


@dataclass(frozen=True)
class EmbeddedImage:
    data: bytes = field(repr=False)
    fmt: str
    width: int
    height: int
    reader: Any = field(repr=False, compare=False)


def load_image(data: bytes | None, *, name: str = "image") -> EmbeddedImage | None:
    """Decode *data*; ``None`` or empty input means "no image" and returns ``None``."""
    if not data:
        return None
    fmt = detect_image_format(data)
    try:
        reader = ImageReader(BytesIO(data))
        width, height = reader.getSize()
        # Force a full decode so truncated files fail here, not mid-serialization.
        reader.getRGBData()
    except Exception as exc:
        raise UnsupportedImageFormat(f"Could not decode {fmt} {name}: {exc}") from exc
    if width <= 0 or height <= 0:
        raise UnsupportedImageFormat(f"{name} has no pixels ({width}x{height})")
    LOGGER.debug("Decoded %s %s %dx%d", fmt, name, width, height)
    return EmbeddedImage(data=data, fmt=fmt, width=int(width), height=int(height), reader=reader)


def fit_image(image: EmbeddedImage, box: Box) -> Box:
    x, y, w, h = fit_rect_preserve_aspect(image.width, image.height, box.x, box.y, box.w, box.h)
    assert_aspect_preserved(image.width, image.height, w, h, tolerance=0.03)
    return Box(x, y, w, h)


def place_image(
    image: EmbeddedImage | None, box: Box, *, opacity: float = 1.0
) -> ImageElement | None:
    """Element drawing *image* fitted into *box*; ``None`` when there is no image."""
    if image is None:
        return None
    fitted = fit_image(image, box)
    return ImageElement(image, fitted.x, fitted.y, fitted.w, fitted.h, opacity=opacity)
