"""Flat background removal by colour keying against the top-left pixel."""

from __future__ import annotations

import numpy as np

DEFAULT_THRESHOLD = 30.0


def color_distance(pixels: np.ndarray, color: np.ndarray) -> np.ndarray:
    """Euclidean RGB distance of every pixel to *color*.

    Args:
        pixels: (..., 3+) uint8 - only the first three channels are used.
        color:  (3,) reference colour.

    Returns:
        float64 array shaped like *pixels* without the channel axis.
    """
    diff = pixels[..., :3].astype(np.float64) - np.asarray(color, dtype=np.float64)[:3]
    return np.sqrt(np.sum(diff ** 2, axis=-1))


def strip_background(
    buffer: np.ndarray,
    threshold: float = DEFAULT_THRESHOLD,
) -> np.ndarray:
    """Make every pixel close to the (0, 0) colour fully transparent.

    Only the alpha channel is written; RGB and shape are left alone, so a
    second pass keys against the same colour and changes nothing.

    Args:
        buffer:    (H, W, 4) uint8 RGBA, modified in place.
        threshold: Pixels with distance strictly below this lose their alpha.

    Returns:
        *buffer* itself.
    """
    if buffer.ndim != 3 or buffer.shape[2] != 4 or buffer.dtype != np.uint8:
        raise ValueError(
            f"expected (H, W, 4) uint8 RGBA buffer, got {buffer.shape} {buffer.dtype}"
        )
    if threshold < 0:
        raise ValueError(f"threshold must be >= 0, got {threshold}")
    if buffer.size == 0:
        return buffer

    background = buffer[0, 0, :3].copy()
    mask = color_distance(buffer, background) < threshold
    buffer[..., 3][mask] = 0
    return buffer
