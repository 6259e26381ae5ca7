"""Image loading, PNG encoding, and contact-sheet generation."""

from __future__ import annotations

import io
from collections.abc import Sequence
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from sticker_slicer.errors import UnreadableImage
from sticker_slicer.extract import Tile


def to_rgba_array(img: Image.Image) -> np.ndarray:
    """Convert any PIL image to an (H, W, 4) uint8 array."""
    return np.array(img.convert("RGBA"), dtype=np.uint8)


def load_rgba(path: str | Path) -> np.ndarray:
    """Load an image from disk as (H, W, 4) uint8 RGBA.

    Raises:
        UnreadableImage: if the file is missing or not a decodable image.
    """
    try:
        with Image.open(path) as img:
            return to_rgba_array(img)
    except OSError as exc:
        raise UnreadableImage(f"cannot read image {path}: {exc}") from exc


def decode_rgba(data: bytes) -> np.ndarray:
    """Decode encoded image bytes (PNG, JPEG, WebP ...) to RGBA."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            return to_rgba_array(img)
    except OSError as exc:
        raise UnreadableImage(f"cannot decode image data: {exc}") from exc


def encode_png(array: np.ndarray) -> bytes:
    """Encode an RGBA buffer as PNG bytes."""
    buf = io.BytesIO()
    Image.fromarray(array.astype(np.uint8)).save(buf, format="PNG")
    return buf.getvalue()


def checkerboard(
    width: int,
    height: int,
    cell: int = 10,
    light: tuple[int, int, int] = (255, 255, 255),
    dark: tuple[int, int, int] = (238, 238, 238),
) -> Image.Image:
    """Grey/white checkerboard used behind transparent previews."""
    ys, xs = np.indices((height, width))
    mask = ((xs // cell + ys // cell) % 2).astype(bool)
    arr = np.empty((height, width, 3), dtype=np.uint8)
    arr[~mask] = light
    arr[mask] = dark
    return Image.fromarray(arr).convert("RGBA")


def make_contact_sheet(
    tiles: Sequence[Tile],
    cols: int,
    output_path: str | Path | None = None,
    thumb_width: int = 185,
    gap: int = 8,
) -> Image.Image:
    """Lay out tiles on a checkerboard grid with their index labels.

    Thumbnails keep the tiles' aspect ratio; transparent areas show the
    checkerboard. The sheet is saved when *output_path* is given.
    """
    if not tiles:
        raise ValueError("no tiles to lay out")
    th_src, tw_src = tiles[0].pixels.shape[:2]
    thumb_height = max(1, round(th_src * thumb_width / tw_src))
    label_height = 24

    rows = -(-len(tiles) // cols)
    cell_h = thumb_height + label_height
    total_w = cols * thumb_width + (cols - 1) * gap
    total_h = rows * cell_h + (rows - 1) * gap

    canvas = Image.new("RGBA", (total_w, total_h), (30, 30, 30, 255))
    draw = ImageDraw.Draw(canvas)

    try:
        font = ImageFont.truetype(
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", 14,
        )
    except OSError:
        font = ImageFont.load_default()

    backdrop = checkerboard(thumb_width, thumb_height)
    for i, tile in enumerate(tiles):
        x = (i % cols) * (thumb_width + gap)
        y = (i // cols) * (cell_h + gap)

        thumb = Image.fromarray(tile.pixels).convert("RGBA").resize(
            (thumb_width, thumb_height), Image.LANCZOS,
        )
        panel = Image.alpha_composite(backdrop, thumb)
        canvas.paste(panel, (x, y + label_height))

        label = f"{tile.index:02d}"
        bbox = draw.textbbox((0, 0), label, font=font)
        text_w = bbox[2] - bbox[0]
        draw.text(
            (x + (thumb_width - text_w) // 2, y + 4), label,
            fill=(220, 220, 220), font=font,
        )

    if output_path is not None:
        canvas.convert("RGB").save(output_path)
    return canvas
