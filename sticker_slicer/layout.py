"""Grid layout detection from raw image dimensions.

A sticker sheet carries no markers, so the grid is inferred purely from
its pixel size: every allowed tile count is factored into (rows, cols)
pairs, pairs that do not split the image into whole-pixel tiles or that
give implausible tile shapes are dropped, and the survivor whose tile
aspect ratio sits closest to the target wins.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

from sticker_slicer.errors import ExtractionOutOfBounds, InvalidDimensions

logger = logging.getLogger(__name__)

DEFAULT_TARGET_ASPECT = 370 / 320
DEFAULT_ASPECT_RANGE = (0.8, 1.4)


@dataclass(frozen=True)
class Layout:
    """A rows x cols partition of a sticker sheet."""

    rows: int
    cols: int
    count: int

    def __post_init__(self) -> None:
        if self.rows <= 0 or self.cols <= 0:
            raise ValueError(f"rows and cols must be positive, got {self.rows}x{self.cols}")
        if self.rows * self.cols != self.count:
            raise ValueError(
                f"count {self.count} does not match {self.rows} rows x {self.cols} cols"
            )

    def tile_size(self, width: int, height: int) -> tuple[int, int]:
        """Return the (w, h) of one tile of a *width* x *height* sheet."""
        if width % self.cols or height % self.rows:
            raise ValueError(
                f"{width}x{height} does not split evenly into "
                f"{self.rows} rows x {self.cols} cols"
            )
        return width // self.cols, height // self.rows

    def tile_box(
        self, width: int, height: int, row: int, col: int,
    ) -> tuple[int, int, int, int]:
        """Return the (left, top, right, bottom) source box of one tile."""
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise ExtractionOutOfBounds(
                f"tile ({row}, {col}) outside {self.rows}x{self.cols} layout"
            )
        tw, th = self.tile_size(width, height)
        return col * tw, row * th, (col + 1) * tw, (row + 1) * th

    def index_of(self, row: int, col: int) -> int:
        """1-based, row-major position of a tile."""
        return row * self.cols + col + 1

    def positions(self) -> Iterator[tuple[int, int]]:
        """Yield every (row, col) in row-major order."""
        for row in range(self.rows):
            for col in range(self.cols):
                yield row, col


@dataclass(frozen=True)
class Candidate:
    rows: int
    cols: int
    count: int
    distance: float

    def to_layout(self) -> Layout:
        return Layout(rows=self.rows, cols=self.cols, count=self.count)


def _check_inputs(
    width: int,
    height: int,
    allowed_counts: Sequence[int],
    target_aspect: float,
    aspect_range: tuple[float, float],
) -> None:
    if width <= 0 or height <= 0:
        raise InvalidDimensions(f"image size must be positive, got {width}x{height}")
    if not allowed_counts:
        raise ValueError("allowed_counts must not be empty")
    if any(c <= 0 for c in allowed_counts):
        raise ValueError(f"tile counts must be positive, got {list(allowed_counts)}")
    if target_aspect <= 0:
        raise ValueError(f"target_aspect must be positive, got {target_aspect}")
    lo, hi = aspect_range
    if lo > hi:
        raise ValueError(f"aspect_range is inverted: {aspect_range}")


def iter_candidates(
    width: int,
    height: int,
    allowed_counts: Iterable[int],
    target_aspect: float = DEFAULT_TARGET_ASPECT,
    aspect_range: tuple[float, float] = DEFAULT_ASPECT_RANGE,
) -> Iterator[Candidate]:
    """Yield every acceptable candidate in discovery order.

    Counts are visited in the order given; within a count, rows ascend
    from 1. The order is what :func:`solve_layout` falls back on to break
    ties, so it must not change.
    """
    counts = tuple(allowed_counts)
    _check_inputs(width, height, counts, target_aspect, aspect_range)
    lo, hi = aspect_range

    for count in counts:
        for rows in range(1, count + 1):
            if count % rows:
                continue
            cols = count // rows
            if width % cols or height % rows:
                continue
            ratio = (width / cols) / (height / rows)
            if not lo <= ratio <= hi:
                logger.debug(
                    "Reject %dx%d (count %d): ratio %.4f outside [%.2f, %.2f]",
                    rows, cols, count, ratio, lo, hi,
                )
                continue
            yield Candidate(rows, cols, count, abs(ratio - target_aspect))


def solve_layout(
    width: int,
    height: int,
    allowed_counts: Iterable[int],
    target_aspect: float = DEFAULT_TARGET_ASPECT,
    aspect_range: tuple[float, float] = DEFAULT_ASPECT_RANGE,
) -> Layout | None:
    """Infer the sticker grid of a *width* x *height* sheet.

    Args:
        width:          Sheet width in pixels.
        height:         Sheet height in pixels.
        allowed_counts: Tile counts to try, in priority order.
        target_aspect:  Preferred tile width / height.
        aspect_range:   Inclusive window of acceptable tile ratios.

    Returns:
        The candidate closest to *target_aspect*, earliest discovered on
        ties, or ``None`` when nothing fits.

    Raises:
        InvalidDimensions: if *width* or *height* is not positive.
    """
    candidates = list(
        iter_candidates(width, height, allowed_counts, target_aspect, aspect_range)
    )
    if not candidates:
        logger.info("No layout found for %dx%d", width, height)
        return None

    # min() keeps the first of equal keys
    best = min(candidates, key=lambda cand: cand.distance)
    logger.info(
        "Layout for %dx%d: %d rows x %d cols = %d (%d candidates, distance %.4f)",
        width, height, best.rows, best.cols, best.count,
        len(candidates), best.distance,
    )
    return best.to_layout()
