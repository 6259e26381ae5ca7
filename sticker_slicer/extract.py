"""Cut single tiles out of a sticker sheet and resample them."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np
from PIL import Image

from sticker_slicer.background import DEFAULT_THRESHOLD, strip_background
from sticker_slicer.errors import InvalidDimensions
from sticker_slicer.layout import Layout

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Tile:
    """One resampled sticker and its 1-based row-major position."""

    index: int
    row: int
    col: int
    pixels: np.ndarray


def extract_tile(
    source: np.ndarray,
    layout: Layout,
    row: int,
    col: int,
    target_width: int,
    target_height: int,
    remove_background: bool = False,
    threshold: float = DEFAULT_THRESHOLD,
) -> np.ndarray:
    """Resample the tile at (*row*, *col*) to the requested size.

    Background stripping runs on the resampled buffer, never on the source
    region, so the Lanczos filter does not smear keyed pixels into fringes.

    Args:
        source:            (H, W, 4) uint8 RGBA sheet. Not modified.
        layout:            Layout detected for *source*.
        row, col:          Zero-based tile position.
        target_width:      Output width in pixels.
        target_height:     Output height in pixels.
        remove_background: Key out the tile's top-left colour afterwards.
        threshold:         RGB distance used for keying.

    Returns:
        (target_height, target_width, 4) uint8 RGBA.

    Raises:
        ExtractionOutOfBounds: if the position is outside *layout*.
        InvalidDimensions: if the target size is not positive.
    """
    if target_width <= 0 or target_height <= 0:
        raise InvalidDimensions(
            f"target size must be positive, got {target_width}x{target_height}"
        )
    h, w = source.shape[:2]
    left, top, right, bottom = layout.tile_box(w, h, row, col)

    region = np.ascontiguousarray(source[top:bottom, left:right])
    img = Image.fromarray(region).convert("RGBA")
    img = img.resize((target_width, target_height), Image.LANCZOS)
    out = np.array(img, dtype=np.uint8)

    if remove_background:
        strip_background(out, threshold)
    return out


def iter_tiles(
    source: np.ndarray,
    layout: Layout,
    target_width: int,
    target_height: int,
    remove_background: bool = False,
    threshold: float = DEFAULT_THRESHOLD,
) -> Iterator[Tile]:
    """Yield every tile of *source* in row-major order."""
    for row, col in layout.positions():
        pixels = extract_tile(
            source, layout, row, col, target_width, target_height,
            remove_background=remove_background, threshold=threshold,
        )
        yield Tile(layout.index_of(row, col), row, col, pixels)
    logger.debug(
        "Extracted %d tiles at %dx%d", layout.count, target_width, target_height,
    )
