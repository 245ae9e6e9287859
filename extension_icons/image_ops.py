"""Image manipulation utilities.

This module wraps the Pillow operations behind icon generation: decoding
an upload (raw bytes or a data URL) and rendering a cover-fit, centre
cropped square icon at a fixed size. Every rendered icon is PNG encoded.
"""

from __future__ import annotations

import base64
import binascii
import logging
from io import BytesIO
from typing import NamedTuple, Tuple

from PIL import Image, ImageOps  # type: ignore[import]

from .config import ICON_FORMAT, resample_filter
from .errors import DecodeFailure, ResizeFailure
from .models import IconBitmap, SourceImage

logger = logging.getLogger(__name__)


class CoverFit(NamedTuple):
    """Placement of a scaled source on a square canvas.

    ``x`` and ``y`` are the canvas offsets of the scaled image's top-left
    corner. Both are <= 0 because the scaled image covers the canvas.
    """

    ratio: float
    width: float
    height: float
    x: float
    y: float


def decode_data_url(data: str | bytes) -> bytes:
    """Return the raw bytes behind a ``data:...;base64,`` URL.

    Byte strings are assumed to be raw already and are returned unchanged.

    Raises:
        ValueError: If a text value is not a base64 data URL.
    """
    if isinstance(data, bytes):
        return data
    if not data.startswith("data:") or "," not in data:
        raise ValueError("Expected a base64 data URL.")
    header, b64 = data.split(",", 1)
    if not header.endswith(";base64"):
        raise ValueError("Only base64 encoded data URLs are supported.")
    try:
        return base64.b64decode(b64, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"Invalid base64 payload: {exc}") from exc


def open_image(data: bytes) -> Image.Image:
    """Open raw image bytes with Pillow, apply EXIF orientation and convert to RGBA."""
    try:
        img = Image.open(BytesIO(data))
        img.load()
        img = ImageOps.exif_transpose(img)
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
        raise DecodeFailure(f"Cannot read image: {exc}") from exc
    if img.width <= 0 or img.height <= 0:
        raise DecodeFailure("Image has no pixels.")
    if img.mode != "RGBA":
        img = img.convert("RGBA")
    return img


def cover_fit(width: int, height: int, size: int) -> CoverFit:
    """Scale and centre a ``width`` x ``height`` image over a square.

    The larger of the two axis ratios is used so that the scaled image
    covers the whole ``size`` x ``size`` square; the overflow on the longer
    axis is split evenly on both sides.
    """
    ratio = max(size / width, size / height)
    scaled_w = width * ratio
    scaled_h = height * ratio
    return CoverFit(
        ratio=ratio,
        width=scaled_w,
        height=scaled_h,
        x=(size - scaled_w) / 2,
        y=(size - scaled_h) / 2,
    )


def crop_box(width: int, height: int, size: int) -> Tuple[float, float, float, float]:
    """Return the region of the source that ends up visible in the icon.

    The box is in source pixel coordinates and clamped to the source
    bounds, so rounding can never leave an uncovered strip on the canvas.
    """
    fit = cover_fit(width, height, size)
    left = -fit.x / fit.ratio
    top = -fit.y / fit.ratio
    span = size / fit.ratio
    return (
        max(0.0, left),
        max(0.0, top),
        min(float(width), left + span),
        min(float(height), top + span),
    )


def resize_icon(source: SourceImage, size: int, resample: str | None = None) -> IconBitmap:
    """Render ``source`` as a ``size`` x ``size`` PNG icon.

    The source keeps its aspect ratio: it is scaled to cover the square and
    the longer axis is cropped symmetrically.

    Args:
        source: Decoded source image.
        size: Edge length of the icon in pixels.
        resample: Optional Pillow filter name overriding ``ICON_RESAMPLE``.

    Returns:
        The rendered icon.

    Raises:
        ResizeFailure: If the size or source is unusable, or Pillow fails to
            render or encode the icon.
        ValueError: If the resampling filter name is unknown.
    """
    if size <= 0:
        raise ResizeFailure(size, "size must be a positive integer")
    if source.width <= 0 or source.height <= 0:
        raise ResizeFailure(size, "source image has no pixels")

    method = resample_filter(resample)
    box = crop_box(source.width, source.height, size)
    buffer = BytesIO()
    try:
        rgba = source.image if source.image.mode == "RGBA" else source.image.convert("RGBA")
        try:
            # Freshly allocated output; every pixel comes from the source window
            scaled = rgba.resize((size, size), method, box=box)
        finally:
            if rgba is not source.image:
                rgba.close()
        try:
            scaled.save(buffer, format=ICON_FORMAT)
        finally:
            scaled.close()
    except (OSError, ValueError, MemoryError) as exc:
        raise ResizeFailure(size, str(exc)) from exc

    logger.debug("Rendered %sx%s icon from %sx%s source", size, size, source.width, source.height)
    return IconBitmap(size=size, data=buffer.getvalue())
