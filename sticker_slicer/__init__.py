"""
Sticker Slicer
==============

Split a sheet of sticker artwork into individual stickers. The grid is
inferred from the sheet's pixel size alone:

- **Layout detection** - factor each allowed tile count into rows x cols
  and keep the split whose tile shape is closest to the target aspect
- **Background removal** - key out the flat colour found in each
  sticker's top-left corner
"""

__version__ = "1.0.0"

from sticker_slicer.background import color_distance, strip_background
from sticker_slicer.config import SlicerConfig
from sticker_slicer.errors import (
    ExtractionOutOfBounds,
    InvalidDimensions,
    LayoutNotFound,
    SlicerError,
    UnreadableImage,
)
from sticker_slicer.extract import Tile, extract_tile, iter_tiles
from sticker_slicer.image_io import decode_rgba, encode_png, load_rgba, make_contact_sheet
from sticker_slicer.layout import Layout, iter_candidates, solve_layout
from sticker_slicer.packager import (
    StickerSet,
    archive_bytes,
    build_sticker_set,
    require_layout,
    write_archive,
)

__all__ = [
    "ExtractionOutOfBounds",
    "InvalidDimensions",
    "Layout",
    "LayoutNotFound",
    "SlicerConfig",
    "SlicerError",
    "StickerSet",
    "Tile",
    "UnreadableImage",
    "archive_bytes",
    "build_sticker_set",
    "color_distance",
    "decode_rgba",
    "encode_png",
    "extract_tile",
    "iter_candidates",
    "iter_tiles",
    "load_rgba",
    "make_contact_sheet",
    "require_layout",
    "solve_layout",
    "strip_background",
    "write_archive",
]
