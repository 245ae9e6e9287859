"""Bundle rendered icons and the manifest into a ZIP archive.

The archive is assembled entirely in memory. Icons are written in ascending
size order followed by ``manifest.json``; sizes missing from the icon set
are skipped rather than replaced.
"""

from __future__ import annotations

import logging
import zipfile
from io import BytesIO
from typing import Mapping, Union

from .config import (
    ARCHIVE_EXTENSION,
    ARCHIVE_SUFFIX,
    DEFAULT_ICON_NAME,
    ICON_SIZES,
    MANIFEST_FILENAME,
    archive_compression,
    icon_filename,
)
from .errors import PackagingFailure
from .image_ops import decode_data_url
from .models import IconBitmap, Manifest

logger = logging.getLogger(__name__)

IconEntry = Union[IconBitmap, str, bytes]

# Fixed entry timestamp keeps archives byte-identical between runs
_ZIP_DATE = (1980, 1, 1, 0, 0, 0)


def archive_filename(name: str) -> str:
    """Return the download name of the archive, e.g. ``logo-chrome-icons.zip``."""
    return f"{name or DEFAULT_ICON_NAME}{ARCHIVE_SUFFIX}.{ARCHIVE_EXTENSION}"


def _icon_bytes(entry: IconEntry) -> bytes:
    if isinstance(entry, IconBitmap):
        return entry.data
    return decode_data_url(entry)


def _write(zf: zipfile.ZipFile, name: str, data: bytes | str, compression: int) -> None:
    info = zipfile.ZipInfo(name, date_time=_ZIP_DATE)
    info.compress_type = compression
    info.external_attr = 0o644 << 16
    zf.writestr(info, data)


def pack(icon_set: Mapping[int, IconEntry], manifest: Manifest | str) -> bytes:
    """Create a ZIP archive holding the icons and the manifest.

    Args:
        icon_set: Mapping of icon size to a rendered icon. Values may also be
            raw PNG bytes or ``data:`` URLs; URLs are decoded to raw bytes.
        manifest: The manifest model or its already serialized JSON text.

    Returns:
        The archive as bytes.

    Raises:
        PackagingFailure: If an entry cannot be decoded or the archive cannot
            be written.
    """
    manifest_text = manifest.to_json() if isinstance(manifest, Manifest) else manifest
    buffer = BytesIO()
    try:
        compression = archive_compression()
        with zipfile.ZipFile(buffer, "w") as zf:
            packed = 0
            for size in ICON_SIZES:
                entry = icon_set.get(size)
                if entry is None:
                    logger.debug("No icon for size %s, leaving it out of the archive", int(size))
                    continue
                _write(zf, icon_filename(size), _icon_bytes(entry), compression)
                packed += 1
            _write(zf, MANIFEST_FILENAME, manifest_text, compression)
    except (OSError, ValueError, MemoryError, zipfile.LargeZipFile) as exc:
        raise PackagingFailure(f"Could not build icon archive: {exc}") from exc

    archive = buffer.getvalue()
    logger.info("Packed %d icon(s) into a %d byte archive", packed, len(archive))
    return archive
