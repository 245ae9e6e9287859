"""Exceptions raised while generating and packaging icons."""

from __future__ import annotations


class IconGenerationError(Exception):
    """Base class for all icon generation errors."""


class DecodeFailure(IconGenerationError):
    """The uploaded bytes could not be read as a raster image."""


class ResizeFailure(IconGenerationError):
    """A single icon size could not be rendered or encoded."""

    def __init__(self, size: int, message: str) -> None:
        super().__init__(f"icon{int(size)}: {message}")
        self.size = int(size)


class PackagingFailure(IconGenerationError):
    """The icon archive could not be serialized."""
