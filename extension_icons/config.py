"""Configuration constants for icon generation.

The icon sizes and manifest fields are fixed constants of the generator.
A handful of runtime settings can be tuned through environment variables.

Environment variables:
    ICON_RESAMPLE: Pillow resampling filter used when scaling the source
        ('lanczos' by default; also 'bicubic', 'bilinear', 'box',
        'hamming' or 'nearest').
    ICON_ARCHIVE_COMPRESSION: 'deflated' (default) or 'stored'.
    ICON_OUTPUT_DIR: Directory used by the local download sink (default
        './icon_downloads').
    ICON_LOG_LEVEL: Logging level for the package logger (default 'INFO').
"""

from __future__ import annotations

import os
import zipfile
from enum import IntEnum
from typing import Tuple

from PIL import Image  # type: ignore[import]


class IconSize(IntEnum):
    """Square icon sizes (in pixels) required by a Chrome extension."""

    SMALL = 16
    TOOLBAR = 32
    MANAGEMENT = 48
    STORE = 128


ICON_SIZES: Tuple[IconSize, ...] = tuple(sorted(IconSize))

ICON_FORMAT = "PNG"
ICON_EXTENSION = "png"
ICON_MIME_TYPE = "image/png"

MANIFEST_VERSION = 3
EXTENSION_NAME = "Chrome Extension"
EXTENSION_VERSION = "1.0.0"
MANIFEST_FILENAME = "manifest.json"

ARCHIVE_SUFFIX = "-chrome-icons"
ARCHIVE_EXTENSION = "zip"
DEFAULT_ICON_NAME = "icon"

ICON_RESAMPLE: str = os.getenv("ICON_RESAMPLE", "lanczos").lower()
ICON_ARCHIVE_COMPRESSION: str = os.getenv("ICON_ARCHIVE_COMPRESSION", "deflated").lower()
ICON_OUTPUT_DIR: str = os.getenv("ICON_OUTPUT_DIR", "./icon_downloads")
ICON_LOG_LEVEL: str = os.getenv("ICON_LOG_LEVEL", "INFO").upper()

_COMPRESSION = {
    "deflated": zipfile.ZIP_DEFLATED,
    "stored": zipfile.ZIP_STORED,
}


def icon_filename(size: int) -> str:
    """Return the conventional file name for an icon, e.g. ``icon48.png``."""
    return f"icon{int(size)}.{ICON_EXTENSION}"


def resample_filter(name: str | None = None) -> Image.Resampling:
    """Resolve a filter name to a Pillow resampling constant.

    Args:
        name: Filter name such as 'lanczos'. Defaults to ``ICON_RESAMPLE``.

    Returns:
        The matching ``PIL.Image.Resampling`` member.

    Raises:
        ValueError: If the name is not a Pillow resampling filter.
    """
    key = (name or ICON_RESAMPLE).strip().upper()
    try:
        return Image.Resampling[key]
    except KeyError:
        raise ValueError(f"Unknown resampling filter '{name or ICON_RESAMPLE}'.") from None


def archive_compression(name: str | None = None) -> int:
    """Resolve a compression name to a ``zipfile`` constant."""
    key = (name or ICON_ARCHIVE_COMPRESSION).strip().lower()
    if key not in _COMPRESSION:
        raise ValueError(f"Unsupported archive compression '{key}'.")
    return _COMPRESSION[key]
