"""One generation pass: decode an upload, render every icon, build the manifest.

Callers own any session state. Each call to :func:`generate` starts from
scratch and returns a new :class:`IconGeneration`; nothing is cached
between uploads.
"""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import PurePath
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from . import image_ops
from .config import DEFAULT_ICON_NAME, ICON_SIZES, IconSize, resample_filter
from .errors import DecodeFailure, ResizeFailure
from .manifest import build_manifest
from .models import IconBitmap, Manifest, SourceImage
from .packager import archive_filename, pack

logger = logging.getLogger(__name__)

_EXTENSION_RE = re.compile(r"\..*$")


class IconGeneration(BaseModel):
    """Result of one generation pass.

    Attributes:
        name: Name derived from the upload, used for the archive file name.
        icons: Rendered icons keyed by size. Sizes that failed are absent.
        manifest: Manifest listing the fixed icon sizes.
        failed: Sizes that could not be rendered.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    icons: Dict[int, IconBitmap]
    manifest: Manifest
    failed: Tuple[int, ...] = ()

    @property
    def complete(self) -> bool:
        return not self.failed and len(self.icons) == len(ICON_SIZES)

    @property
    def archive_filename(self) -> str:
        return archive_filename(self.name)

    def archive(self) -> bytes:
        """Pack the icons and manifest into a ZIP archive."""
        return pack(self.icons, self.manifest)


def derive_name(filename: str | None) -> str:
    """Strip directories and everything from the first dot of an upload name.

    ``"logo.final.png"`` becomes ``"logo"``. Names that end up empty fall
    back to ``"icon"``.
    """
    if not filename:
        return DEFAULT_ICON_NAME
    stem = _EXTENSION_RE.sub("", PurePath(filename.replace("\\", "/")).name)
    return stem or DEFAULT_ICON_NAME


def is_image_upload(content_type: str | None) -> bool:
    """True if the MIME type names an image, e.g. ``image/png``."""
    return bool(content_type) and content_type.strip().lower().startswith("image/")


async def decode_image(
    data: bytes | str,
    filename: str | None = None,
    content_type: Optional[str] = None,
) -> SourceImage:
    """Decode an upload into a :class:`SourceImage`.

    Args:
        data: Raw file bytes or a base64 ``data:`` URL.
        filename: Name of the uploaded file.
        content_type: MIME type reported for the upload, if known.

    Raises:
        DecodeFailure: If the upload is not an image or cannot be decoded.
    """
    if content_type is not None and not is_image_upload(content_type):
        raise DecodeFailure(f"Unsupported upload type '{content_type}'.")
    try:
        raw = image_ops.decode_data_url(data)
    except ValueError as exc:
        raise DecodeFailure(str(exc)) from exc
    if not raw:
        raise DecodeFailure("No image data provided.")

    image = await asyncio.to_thread(image_ops.open_image, raw)
    name = derive_name(filename)
    logger.info("Decoded '%s' (%sx%s)", name, image.width, image.height)
    return SourceImage(image=image, name=name)


async def _render(source: SourceImage, size: IconSize) -> IconBitmap:
    return await asyncio.to_thread(image_ops.resize_icon, source, size)


async def generate_icons(source: SourceImage) -> Tuple[Dict[int, IconBitmap], Tuple[int, ...]]:
    """Render every fixed icon size concurrently.

    A size that fails is logged and left out; the other sizes are kept.

    Returns:
        The icons keyed by size, and the sizes that failed to render.

    Raises:
        ValueError: If ``ICON_RESAMPLE`` names an unknown filter.
    """
    resample_filter()
    results = await asyncio.gather(
        *(_render(source, size) for size in ICON_SIZES),
        return_exceptions=True,
    )
    icons: Dict[int, IconBitmap] = {}
    failed = []
    for size, result in zip(ICON_SIZES, results):
        if isinstance(result, ResizeFailure):
            logger.warning("Skipping %spx icon: %s", int(size), result)
        elif isinstance(result, Exception):
            logger.error("Skipping %spx icon after unexpected error", int(size), exc_info=result)
        elif isinstance(result, BaseException):
            raise result
        else:
            icons[int(size)] = result
            continue
        failed.append(int(size))
    return icons, tuple(failed)


async def generate(
    data: bytes | str,
    filename: str | None = None,
    content_type: Optional[str] = None,
) -> IconGeneration:
    """Decode an upload and derive the full icon set and manifest from it.

    Raises:
        DecodeFailure: If the upload cannot be decoded. Per-size render
            failures do not raise; they are listed in ``failed``.
        ValueError: If the configured resampling filter is unknown.
    """
    source = await decode_image(data, filename, content_type)
    icons, failed = await generate_icons(source)
    if failed:
        logger.warning("Generated %d of %d icons for '%s'", len(icons), len(ICON_SIZES), source.name)
    else:
        logger.info("Generated %d icons for '%s'", len(icons), source.name)
    return IconGeneration(
        name=source.name,
        icons=icons,
        manifest=build_manifest(ICON_SIZES),
        failed=failed,
    )
