"""Turn a sticker sheet into a ready-to-upload archive.

The sheet's layout is detected once, every tile is exported at sticker
size, and the first tile doubles as the ``main`` and ``tab`` icons.
"""

from __future__ import annotations

import io
import logging
import time
import zipfile
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from sticker_slicer.config import SlicerConfig
from sticker_slicer.errors import LayoutNotFound
from sticker_slicer.extract import Tile, extract_tile, iter_tiles
from sticker_slicer.image_io import encode_png
from sticker_slicer.layout import Layout, solve_layout

logger = logging.getLogger(__name__)

MAIN_NAME = "main.png"
TAB_NAME = "tab.png"


@dataclass(frozen=True)
class StickerSet:
    layout: Layout
    stickers: list[Tile]
    main: np.ndarray
    tab: np.ndarray


def sticker_filename(index: int) -> str:
    """``1`` -> ``"01.png"``."""
    return f"{index:02d}.png"


def archive_name(filename: str, config: SlicerConfig) -> str:
    """``"cats.v2.png"`` -> ``"cats_line_stickers.zip"``.

    Everything from the first dot of the file name on is dropped.
    """
    name = Path(filename).name
    base = name.split(".")[0] or Path(name).stem
    return f"{base}{config.archive_suffix}.zip"


def detect_layout(source: np.ndarray, config: SlicerConfig) -> Layout | None:
    h, w = source.shape[:2]
    return solve_layout(
        w, h,
        config.valid_counts,
        target_aspect=config.target_aspect,
        aspect_range=config.aspect_range,
    )


def require_layout(source: np.ndarray, config: SlicerConfig) -> Layout:
    """Like :func:`detect_layout` but raise :class:`LayoutNotFound`."""
    layout = detect_layout(source, config)
    if layout is None:
        h, w = source.shape[:2]
        raise LayoutNotFound(w, h, config.valid_counts)
    return layout


def build_icons(
    source: np.ndarray,
    layout: Layout,
    config: SlicerConfig,
) -> tuple[np.ndarray, np.ndarray]:
    """Render the ``main`` and ``tab`` icons from the first tile."""
    icons = []
    for width, height in (config.main_size, config.tab_size):
        icons.append(extract_tile(
            source, layout, 0, 0, width, height,
            remove_background=config.remove_background,
            threshold=config.bg_threshold,
        ))
    return icons[0], icons[1]


def build_sticker_set(
    source: np.ndarray,
    config: SlicerConfig,
    layout: Layout | None = None,
) -> StickerSet:
    """Extract every sticker plus both icons.

    Args:
        source: (H, W, 4) uint8 RGBA sheet.
        config: Output sizes, layout search and keying parameters.
        layout: Reuse a layout detected earlier instead of solving again.

    Raises:
        LayoutNotFound: if no layout fits and none was supplied.
    """
    if layout is None:
        layout = require_layout(source, config)

    t0 = time.perf_counter()
    sw, sh = config.sticker_size
    stickers = list(iter_tiles(
        source, layout, sw, sh,
        remove_background=config.remove_background,
        threshold=config.bg_threshold,
    ))
    main, tab = build_icons(source, layout, config)
    logger.info(
        "Built %d stickers + main/tab  (%.2f s, background removal %s)",
        len(stickers), time.perf_counter() - t0,
        "on" if config.remove_background else "off",
    )
    return StickerSet(layout=layout, stickers=stickers, main=main, tab=tab)


def _write_entries(zf: zipfile.ZipFile, sticker_set: StickerSet) -> None:
    for tile in sticker_set.stickers:
        zf.writestr(sticker_filename(tile.index), encode_png(tile.pixels))
    zf.writestr(MAIN_NAME, encode_png(sticker_set.main))
    zf.writestr(TAB_NAME, encode_png(sticker_set.tab))


def archive_bytes(sticker_set: StickerSet) -> bytes:
    """Return the ZIP archive as bytes (for downloads)."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        _write_entries(zf, sticker_set)
    return buf.getvalue()


def write_archive(sticker_set: StickerSet, path: str | Path) -> Path:
    """Write ``01.png`` ... ``NN.png``, ``main.png`` and ``tab.png`` to *path*."""
    path = Path(path)
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        _write_entries(zf, sticker_set)
    logger.info("Wrote %s (%d entries)", path, len(sticker_set.stickers) + 2)
    return path
