"""Shared fixtures for the icon generator tests.

Source images are built in memory with Pillow so the tests need no
fixture files on disk.
"""

import io

import pytest
from PIL import Image  # type: ignore

from extension_icons.models import SourceImage

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)


def solid(width, height, color=GREEN):
    return Image.new("RGBA", (width, height), color)


def striped(width, height, edge, horizontal=True):
    """Green image with a red band at the start and a blue band at the end.

    ``edge`` is the band thickness in pixels along the long axis.
    """
    img = solid(width, height, GREEN)
    if horizontal:
        img.paste(RED, (0, 0, edge, height))
        img.paste(BLUE, (width - edge, 0, width, height))
    else:
        img.paste(RED, (0, 0, width, edge))
        img.paste(BLUE, (0, height - edge, width, height))
    return img


def to_png(img):
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def open_icon(bitmap):
    return Image.open(io.BytesIO(bitmap.data))


def close_to(pixel, expected, tolerance=2):
    return all(abs(a - b) <= tolerance for a, b in zip(pixel, expected))


@pytest.fixture
def make_source():
    """Factory returning a SourceImage for a Pillow image."""

    def _make(img, name="icon"):
        return SourceImage(image=img, name=name)

    return _make


@pytest.fixture
def png_bytes():
    """A small opaque PNG upload."""
    return to_png(solid(64, 40, GREEN))


@pytest.fixture
def output_dir(tmp_path, monkeypatch):
    """Point the download sink at a temporary directory."""
    from extension_icons import storage

    out = tmp_path / "downloads"
    monkeypatch.setattr(storage, "OUTPUT_DIR", str(out))
    return out
