"""Exception hierarchy shared by the core and the orchestration layer."""

from __future__ import annotations


class SlicerError(Exception):
    """Base class for every error raised by sticker_slicer."""


class InvalidDimensions(SlicerError, ValueError):
    """A width or height was zero or negative."""


class LayoutNotFound(SlicerError):
    """No allowed tile count divides the image into acceptable tiles."""

    def __init__(self, width: int, height: int, counts: tuple[int, ...]) -> None:
        self.width = width
        self.height = height
        self.counts = tuple(counts)
        listed = ", ".join(str(c) for c in self.counts)
        super().__init__(
            f"No valid layout for a {width}x{height} image; "
            f"it must split evenly into one of {listed} tiles."
        )


class ExtractionOutOfBounds(SlicerError, IndexError):
    """A tile position lies outside the layout it was extracted from."""


class UnreadableImage(SlicerError, OSError):
    """A file or upload could not be decoded as an image."""
