"""Chrome extension icon generation.

This package turns one uploaded image into the fixed set of square
extension icons (16, 32, 48 and 128 pixels), builds the matching
``manifest.json`` and bundles everything into a ZIP archive. See the
individual modules for details.
"""

from .config import ICON_SIZES, IconSize
from .errors import DecodeFailure, IconGenerationError, PackagingFailure, ResizeFailure
from .image_ops import cover_fit, resize_icon
from .manifest import build_manifest
from .models import IconBitmap, Manifest, SourceImage
from .packager import archive_filename, pack
from .pipeline import IconGeneration, decode_image, generate

__all__ = [
    "ICON_SIZES",
    "IconSize",
    "DecodeFailure",
    "IconGenerationError",
    "PackagingFailure",
    "ResizeFailure",
    "cover_fit",
    "resize_icon",
    "build_manifest",
    "IconBitmap",
    "Manifest",
    "SourceImage",
    "archive_filename",
    "pack",
    "IconGeneration",
    "decode_image",
    "generate",
]
