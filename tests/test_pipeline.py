"""End-to-end tests for a generation pass.

The async entry points are driven with ``asyncio.run`` so no extra pytest
plugin is needed.
"""

import asyncio
import base64
import io
import zipfile

import pytest
from PIL import Image  # type: ignore

from extension_icons import image_ops, pipeline
from extension_icons.errors import DecodeFailure, ResizeFailure
from extension_icons.manifest import build_manifest

from conftest import open_icon


def test_generate_full_icon_set(png_bytes):
    result = asyncio.run(pipeline.generate(png_bytes, "logo.final.png", "image/png"))
    assert result.name == "logo"
    assert sorted(result.icons) == [16, 32, 48, 128]
    assert result.failed == ()
    assert result.complete
    for size, bitmap in result.icons.items():
        with open_icon(bitmap) as icon:
            assert icon.size == (size, size)
    assert result.manifest == build_manifest()


def test_generate_archive(png_bytes):
    result = asyncio.run(pipeline.generate(png_bytes, "logo.png"))
    assert result.archive_filename == "logo-chrome-icons.zip"
    with zipfile.ZipFile(io.BytesIO(result.archive())) as zf:
        assert len(zf.namelist()) == 5
        assert zf.read("icon16.png") == result.icons[16].data


def test_generate_accepts_data_url(png_bytes):
    url = "data:image/png;base64," + base64.b64encode(png_bytes).decode()
    result = asyncio.run(pipeline.generate(url, "upload.png"))
    assert result.complete


def test_regeneration_is_independent(png_bytes):
    first = asyncio.run(pipeline.generate(png_bytes, "a.png"))
    second = asyncio.run(pipeline.generate(png_bytes, "b.png"))
    assert first.icons is not second.icons
    assert first.icons[48].data == second.icons[48].data
    assert second.name == "b"


def test_resize_failure_leaves_size_absent(png_bytes, monkeypatch):
    real_resize = image_ops.resize_icon

    def flaky_resize(source, size, resample=None):
        if size == 32:
            raise ResizeFailure(size, "out of memory")
        return real_resize(source, size, resample)

    monkeypatch.setattr(image_ops, "resize_icon", flaky_resize)
    result = asyncio.run(pipeline.generate(png_bytes, "logo.png"))
    assert sorted(result.icons) == [16, 48, 128]
    assert result.failed == (32,)
    assert not result.complete
    # Manifest still lists the fixed sizes
    assert "32" in result.manifest.icons
    with zipfile.ZipFile(io.BytesIO(result.archive())) as zf:
        assert len(zf.namelist()) == 4


def test_unexpected_error_keeps_other_sizes(png_bytes, monkeypatch):
    real_resize = image_ops.resize_icon

    def broken_resize(source, size, resample=None):
        if size == 48:
            raise TypeError("size must be an int")
        return real_resize(source, size, resample)

    monkeypatch.setattr(image_ops, "resize_icon", broken_resize)
    result = asyncio.run(pipeline.generate(png_bytes, "logo.png"))
    assert sorted(result.icons) == [16, 32, 128]
    assert result.failed == (48,)


def test_unknown_filter_aborts_generation(png_bytes, monkeypatch):
    monkeypatch.setattr("extension_icons.config.ICON_RESAMPLE", "sharpest")
    with pytest.raises(ValueError):
        asyncio.run(pipeline.generate(png_bytes, "logo.png"))


def test_rotated_jpeg_decodes_upright():
    exif = Image.Exif()
    exif[0x0112] = 6
    buf = io.BytesIO()
    Image.new("RGB", (200, 100), (0, 255, 0)).save(buf, format="JPEG", exif=exif)
    source = asyncio.run(pipeline.decode_image(buf.getvalue(), "photo.jpg", "image/jpeg"))
    assert (source.width, source.height) == (100, 200)


def test_decode_rejects_non_image_type(png_bytes):
    with pytest.raises(DecodeFailure):
        asyncio.run(pipeline.decode_image(png_bytes, "notes.txt", "text/plain"))


@pytest.mark.parametrize("data", [b"", b"garbage bytes", "data:image/png;base64,!!!"])
def test_decode_failure(data):
    with pytest.raises(DecodeFailure):
        asyncio.run(pipeline.generate(data, "broken.png"))


def test_decode_image_returns_source(png_bytes):
    source = asyncio.run(pipeline.decode_image(png_bytes, "photo.jpeg"))
    assert (source.width, source.height) == (64, 40)
    assert source.name == "photo"


@pytest.mark.parametrize(
    "filename,expected",
    [
        ("logo.png", "logo"),
        ("logo.final.png", "logo"),
        ("no_extension", "no_extension"),
        (".hidden", "icon"),
        ("dir/sub/brand.webp", "brand"),
        ("C:\\Users\\me\\brand.png", "brand"),
        ("", "icon"),
        (None, "icon"),
    ],
)
def test_derive_name(filename, expected):
    assert pipeline.derive_name(filename) == expected


@pytest.mark.parametrize(
    "content_type,expected",
    [("image/png", True), ("IMAGE/JPEG", True), ("text/plain", False), ("", False), (None, False)],
)
def test_is_image_upload(content_type, expected):
    assert pipeline.is_image_upload(content_type) is expected
