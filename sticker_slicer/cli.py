"""Rich command-line interface powered by Typer."""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from pathlib import Path

import numpy as np
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from sticker_slicer.config import SlicerConfig
from sticker_slicer.errors import SlicerError
from sticker_slicer.extract import iter_tiles
from sticker_slicer.image_io import load_rgba, make_contact_sheet
from sticker_slicer.layout import iter_candidates
from sticker_slicer.packager import (
    archive_name,
    build_sticker_set,
    require_layout,
    write_archive,
)

app = typer.Typer(
    name="sticker-slicer",
    help="Slice sticker sheets into ready-to-upload sticker archives.",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=True)],
    )


def _collect_images(folder: Path, extensions: frozenset[str]) -> list[Path]:
    if not folder.exists():
        return []
    return sorted(
        f for f in folder.iterdir()
        if f.is_file() and f.suffix.lower() in extensions
    )


def _parse_counts(counts: str | None) -> tuple[int, ...] | None:
    if counts is None:
        return None
    try:
        parsed = tuple(int(c.strip()) for c in counts.split(",") if c.strip())
    except ValueError as exc:
        raise typer.BadParameter(
            f"expected comma-separated integers, got {counts!r}", param_hint="--counts",
        ) from exc
    if not parsed:
        raise typer.BadParameter("at least one tile count is required", param_hint="--counts")
    if any(c <= 0 for c in parsed):
        raise typer.BadParameter(
            f"tile counts must be positive, got {counts!r}", param_hint="--counts",
        )
    return parsed


def _load_or_exit(image: Path) -> np.ndarray:
    try:
        return load_rgba(image)
    except SlicerError as exc:
        console.print(f"[red]✗[/red] {exc}")
        raise typer.Exit(1) from exc


def _make_config(
    base: SlicerConfig,
    counts: str | None,
    remove_bg: bool,
    threshold: float,
    **overrides: object,
) -> SlicerConfig:
    parsed = _parse_counts(counts)
    if parsed is not None:
        overrides["valid_counts"] = parsed
    return replace(base, remove_background=remove_bg, bg_threshold=threshold, **overrides)


# Defaults come from SlicerConfig - single source of truth
_DEFAULTS = SlicerConfig()
_COUNTS_HELP = (
    "Comma-separated tile counts to try, e.g. '8,16,24' "
    f"(default {','.join(str(c) for c in _DEFAULTS.valid_counts)})"
)


# -- detect command ----------------------------------------------------

@app.command()
def detect(
    image: Path = typer.Argument(..., help="Path to the sticker sheet"),
    counts: str | None = typer.Option(None, "--counts", "-c", help=_COUNTS_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="List all candidates"),
) -> None:
    """Print the grid layout detected for IMAGE."""
    _setup_logging(verbose)
    cfg = _make_config(_DEFAULTS, counts, _DEFAULTS.remove_background, _DEFAULTS.bg_threshold)

    source = _load_or_exit(image)
    h, w = source.shape[:2]

    if verbose:
        table = Table(title=f"Candidates for {w}x{h}")
        table.add_column("Count", justify="right")
        table.add_column("Rows x Cols")
        table.add_column("Tile")
        table.add_column("Distance", justify="right")
        for cand in iter_candidates(
            w, h, cfg.valid_counts, cfg.target_aspect, cfg.aspect_range,
        ):
            table.add_row(
                str(cand.count),
                f"{cand.rows} x {cand.cols}",
                f"{w // cand.cols}x{h // cand.rows}",
                f"{cand.distance:.4f}",
            )
        console.print(table)

    try:
        layout = require_layout(source, cfg)
    except SlicerError as exc:
        console.print(f"[red]✗[/red] {exc}")
        raise typer.Exit(1) from exc

    tw, th = layout.tile_size(w, h)
    console.print(
        f"[green]✓[/green] {image.name}: {layout.rows} rows x {layout.cols} cols "
        f"= {layout.count} stickers  [dim]tile {tw}x{th}[/dim]"
    )


# -- pack command ------------------------------------------------------

@app.command()
def pack(
    image: Path = typer.Argument(..., help="Path to the sticker sheet"),
    output_dir: Path = typer.Option(
        _DEFAULTS.output_dir, "--output", "-o", help="Folder for the archive",
    ),
    remove_bg: bool = typer.Option(
        _DEFAULTS.remove_background, "--remove-bg/--keep-bg",
        help="Make the top-left colour of each sticker transparent",
    ),
    threshold: float = typer.Option(
        _DEFAULTS.bg_threshold, "--threshold", "-t",
        min=0.0,
        help="RGB distance treated as background",
    ),
    counts: str | None = typer.Option(None, "--counts", "-c", help=_COUNTS_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Slice IMAGE and write a sticker archive to OUTPUT_DIR."""
    _setup_logging(verbose)
    cfg = _make_config(_DEFAULTS, counts, remove_bg, threshold, output_dir=output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    try:
        path = _pack_one(image, cfg)
    except SlicerError as exc:
        console.print(f"[red]✗[/red] {image.name}: {exc}")
        raise typer.Exit(1) from exc
    console.print(f"[green]✓[/green] Saved to {path}")


def _pack_one(image: Path, cfg: SlicerConfig) -> Path:
    logger = logging.getLogger("sticker_slicer")
    source = load_rgba(image)
    h, w = source.shape[:2]
    logger.info("Source: %dx%d", w, h)

    sticker_set = build_sticker_set(source, cfg)
    layout = sticker_set.layout
    logger.info("Layout: %d rows x %d cols = %d", layout.rows, layout.cols, layout.count)

    return write_archive(sticker_set, cfg.output_dir / archive_name(image.name, cfg))


# -- batch command -----------------------------------------------------

@app.command()
def batch(
    input_dir: Path = typer.Option(
        _DEFAULTS.input_dir, "--input", "-i", help="Folder with sticker sheets",
    ),
    output_dir: Path = typer.Option(
        _DEFAULTS.output_dir, "--output", "-o", help="Results folder",
    ),
    remove_bg: bool = typer.Option(
        _DEFAULTS.remove_background, "--remove-bg/--keep-bg",
        help="Make the top-left colour of each sticker transparent",
    ),
    threshold: float = typer.Option(
        _DEFAULTS.bg_threshold, "--threshold", "-t",
        min=0.0,
        help="RGB distance treated as background",
    ),
    counts: str | None = typer.Option(None, "--counts", "-c", help=_COUNTS_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Pack every sheet in INPUT_DIR into archives in OUTPUT_DIR."""
    _setup_logging(verbose)
    cfg = _make_config(
        _DEFAULTS, counts, remove_bg, threshold,
        input_dir=input_dir, output_dir=output_dir,
    )

    input_dir.mkdir(exist_ok=True)
    output_dir.mkdir(exist_ok=True)

    images = _collect_images(input_dir, cfg.SUPPORTED_EXTENSIONS)
    if not images:
        console.print(f"\n[yellow]No images found in {input_dir}/[/yellow]")
        console.print("Place .png / .jpg / .webp sticker sheets there and re-run.\n")
        raise typer.Exit(0)

    console.print(Panel.fit(
        f"[bold]STICKER SLICER[/bold]\n"
        f"Counts: {', '.join(str(c) for c in cfg.valid_counts)}  |  "
        f"Sticker: {cfg.sticker_size[0]}x{cfg.sticker_size[1]}\n"
        f"Background removal: {cfg.remove_background}  |  Images: {len(images)}",
        border_style="cyan",
    ))

    failed = 0
    for idx, img_path in enumerate(images, 1):
        console.rule(f"[bold cyan][{idx}/{len(images)}] {img_path.name}[/bold cyan]")
        t0 = time.perf_counter()
        try:
            path = _pack_one(img_path, cfg)
        except SlicerError as exc:
            failed += 1
            console.print(f"  [red]✗[/red] {exc}")
            continue
        console.print(
            f"  [green]✓[/green] {path.name}  "
            f"[dim]time={time.perf_counter() - t0:.1f}s[/dim]"
        )

    style = "green" if not failed else "yellow"
    console.print(Panel.fit(
        f"[bold {style}]ALL DONE[/bold {style}] - {len(images) - failed} packed, "
        f"{failed} skipped - results in [bold]{output_dir}/[/bold]",
        border_style=style,
    ))


# -- preview command ---------------------------------------------------

@app.command()
def preview(
    image: Path = typer.Argument(..., help="Path to the sticker sheet"),
    output: Path = typer.Option(Path("output/preview.png"), "--output", "-o"),
    remove_bg: bool = typer.Option(_DEFAULTS.remove_background, "--remove-bg/--keep-bg"),
    threshold: float = typer.Option(
        _DEFAULTS.bg_threshold, "--threshold", "-t", min=0.0,
    ),
    counts: str | None = typer.Option(None, "--counts", "-c", help=_COUNTS_HELP),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Render a contact sheet of every sticker in IMAGE."""
    _setup_logging(verbose)
    cfg = _make_config(_DEFAULTS, counts, remove_bg, threshold)
    output.parent.mkdir(parents=True, exist_ok=True)

    source = _load_or_exit(image)
    try:
        layout = require_layout(source, cfg)
    except SlicerError as exc:
        console.print(f"[red]✗[/red] {exc}")
        raise typer.Exit(1) from exc

    h, w = source.shape[:2]
    tw, th = layout.tile_size(w, h)
    tiles = list(iter_tiles(
        source, layout, tw, th,
        remove_background=cfg.remove_background, threshold=cfg.bg_threshold,
    ))
    make_contact_sheet(tiles, layout.cols, output)
    console.print(
        f"[green]✓[/green] Saved to {output}  "
        f"[dim]{layout.rows} x {layout.cols} = {layout.count} stickers[/dim]"
    )


if __name__ == "__main__":
    app()
