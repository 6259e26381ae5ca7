"""Centralised configuration via a frozen dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class SlicerConfig:
    """All tuneable parameters for a slicing run.

    Attributes:
        sticker_size:   (w, h) of every exported sticker.
        main_size:      (w, h) of the "main" icon.
        tab_size:       (w, h) of the small "tab" icon.
        valid_counts:   Tile counts a sheet may hold, in search order.
        target_aspect:  Preferred tile aspect ratio (width / height).
        aspect_range:   Inclusive (min, max) window of acceptable tile ratios.
        remove_background: Strip the flat background colour from each tile.
        bg_threshold:   RGB distance below which a pixel becomes transparent.
        archive_suffix: Appended to the source stem to name the archive.
        input_dir:      Folder to scan for sticker sheets.
        output_dir:     Folder for archives and previews.
    """

    # Output sizes
    sticker_size: tuple[int, int] = (370, 320)
    main_size: tuple[int, int] = (240, 240)
    tab_size: tuple[int, int] = (96, 74)

    # Layout search
    valid_counts: tuple[int, ...] = (8, 16, 24, 32, 40)
    target_aspect: float = 370 / 320
    aspect_range: tuple[float, float] = (0.8, 1.4)

    # Background removal
    remove_background: bool = False
    bg_threshold: float = 30.0

    # Output
    archive_suffix: str = "_line_stickers"

    # Paths
    input_dir: Path = field(default_factory=lambda: Path("images"))
    output_dir: Path = field(default_factory=lambda: Path("output"))

    SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
        {".png", ".jpg", ".jpeg", ".webp"}
    )
