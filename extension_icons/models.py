"""Pydantic models for source images, rendered icons and the manifest.

These are the values passed between the decode, resize and packaging
steps. All of them are immutable once created.
"""

from __future__ import annotations

import base64
import json
from typing import Dict

from PIL import Image  # type: ignore[import]
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import ICON_MIME_TYPE, icon_filename


class SourceImage(BaseModel):
    """A decoded upload together with the name it was uploaded under.

    Attributes:
        image: The decoded Pillow image.
        name: Display name of the upload with its extension removed.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    image: Image.Image
    name: str

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height


class IconBitmap(BaseModel):
    """A PNG-encoded square icon.

    Attributes:
        size: Edge length in pixels; the PNG is exactly ``size`` x ``size``.
        data: Raw PNG bytes.
    """

    model_config = ConfigDict(frozen=True)

    size: int = Field(gt=0)
    data: bytes

    @field_validator("data")
    @classmethod
    def _not_empty(cls, value: bytes) -> bytes:
        if not value:
            raise ValueError("icon data must not be empty")
        return value

    @property
    def filename(self) -> str:
        return icon_filename(self.size)

    @property
    def data_url(self) -> str:
        """The icon as a ``data:image/png;base64,...`` URL."""
        b64 = base64.b64encode(self.data).decode("ascii")
        return f"data:{ICON_MIME_TYPE};base64,{b64}"


class Manifest(BaseModel):
    """Extension manifest describing the generated icons.

    Attributes:
        manifest_version: Manifest schema version.
        name: Human readable extension name.
        version: Extension version string.
        icons: Mapping of stringified icon size to icon file name.
    """

    model_config = ConfigDict(frozen=True)

    manifest_version: int
    name: str
    version: str
    icons: Dict[str, str]

    def to_json(self) -> str:
        """Serialize the manifest with two-space indentation."""
        return json.dumps(self.model_dump(), indent=2)
