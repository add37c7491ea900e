"""Exceptions raised while rendering and comparing documents."""

__all__ = [
    "PixelDiffError",
    "SourceNotFoundError",
    "RenderInitError",
    "RenderError",
    "ImageDecodeError",
    "DimensionMismatchError",
    "PageNotFoundError",
    "CompositionError",
]


class PixelDiffError(Exception):
    """Base class for all pdf-pixel-diff errors."""

    def __init__(self, message: str, page: int | None = None) -> None:
        super().__init__(message)
        self.page = page

    def __reduce__(self):
        return (type(self), (str(self), self.page))


class SourceNotFoundError(PixelDiffError):
    """Raised when an input document path does not exist."""


class RenderInitError(PixelDiffError):
    """Raised when the renderer cannot be set up."""


class RenderError(PixelDiffError):
    """Raised when a document cannot be inspected or rasterized."""


class ImageDecodeError(PixelDiffError):
    """Raised when a page image cannot be decoded."""


class DimensionMismatchError(PixelDiffError):
    """Raised when baseline and actual page images differ in size."""


class PageNotFoundError(PixelDiffError):
    """Raised when a page image is missing from a rendered directory."""


class CompositionError(PixelDiffError):
    """Raised when the combined diff image cannot be built."""
