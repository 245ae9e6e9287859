"""Build the extension manifest that lists the generated icons."""

from __future__ import annotations

from typing import Iterable

from .config import (
    EXTENSION_NAME,
    EXTENSION_VERSION,
    ICON_SIZES,
    MANIFEST_VERSION,
    icon_filename,
)
from .models import Manifest


def build_manifest(sizes: Iterable[int] = ICON_SIZES) -> Manifest:
    """Return the manifest for an icon set.

    The result depends only on ``sizes``; icons are listed in ascending size
    order.
    """
    ordered = sorted({int(size) for size in sizes})
    return Manifest(
        manifest_version=MANIFEST_VERSION,
        name=EXTENSION_NAME,
        version=EXTENSION_VERSION,
        icons={str(size): icon_filename(size) for size in ordered},
    )
