#!/usr/bin/env python3
"""
main.py - Quick-start entry point.

Drop sticker sheets into ``images/`` and run:

    python main.py batch

Or use the full CLI:

    python -m sticker_slicer.cli detect my_sheet.png
    python -m sticker_slicer.cli pack my_sheet.png --remove-bg
"""

from sticker_slicer.cli import app

if __name__ == "__main__":
    app()
