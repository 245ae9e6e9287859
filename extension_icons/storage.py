"""Local download sink for generated icons, manifests and archives.

Generation itself never touches the filesystem. When a caller wants to
hand a result to the user as a file, these helpers write it under a
configurable base directory using the conventional file names.

Environment variables:
    ICON_OUTPUT_DIR: Base directory for written files (default
        './icon_downloads').
"""

from __future__ import annotations

import logging
import os

from .config import ICON_OUTPUT_DIR, MANIFEST_FILENAME
from .models import IconBitmap, Manifest
from .packager import archive_filename

logger = logging.getLogger(__name__)

OUTPUT_DIR: str = ICON_OUTPUT_DIR


def _ensure_dir(path: str) -> None:
    """Create parent directories for the given path if they do not exist."""
    os.makedirs(path, exist_ok=True)


def save_bytes(path: str, data: bytes, base_dir: str | None = None) -> str:
    """Write a byte string below the output directory.

    Args:
        path: Relative file name, for example 'icon48.png'.
        data: Raw byte content to write.
        base_dir: Directory to write into; defaults to ``OUTPUT_DIR``.

    Returns:
        The path of the written file.

    Raises:
        ValueError: If ``path`` would resolve outside the output directory.
    """
    root = os.path.abspath(base_dir or OUTPUT_DIR)
    dest_path = os.path.abspath(os.path.join(root, path))
    if os.path.commonpath([root, dest_path]) != root:
        raise ValueError(f"Refusing to write outside {root}: {path}")
    _ensure_dir(os.path.dirname(dest_path))
    with open(dest_path, "wb") as f:
        f.write(data)
    logger.info("Saved %s (%d bytes)", dest_path, len(data))
    return dest_path


def save_icon(bitmap: IconBitmap, base_dir: str | None = None) -> str:
    """Save a single icon as ``icon<size>.png``."""
    return save_bytes(bitmap.filename, bitmap.data, base_dir)


def save_manifest(
    manifest: Manifest | str,
    filename: str = MANIFEST_FILENAME,
    base_dir: str | None = None,
) -> str:
    """Save the manifest JSON, by default as ``manifest.json``."""
    text = manifest.to_json() if isinstance(manifest, Manifest) else manifest
    return save_bytes(filename, text.encode("utf-8"), base_dir)


def save_archive(archive: bytes, name: str, base_dir: str | None = None) -> str:
    """Save a packed archive as ``<name>-chrome-icons.zip``."""
    return save_bytes(archive_filename(name), archive, base_dir)
