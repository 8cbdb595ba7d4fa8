"""Read glyph bitmaps from text grids and image files.

Text grids use one line per pixel row::

    ..##..
    .#..#.
    ######

``#``, ``X``, ``x``, ``@``, ``*`` and ``1`` mark set pixels; ``.``, ``0``,
``-``, ``_`` and space mark clear pixels.  Lines are right-padded with clear
pixels to the longest line; leading and trailing blank lines are dropped.

Images are converted to 8-bit grayscale with Pillow and thresholded: pixels
*darker* than the threshold are set (ink on paper), unless ``invert_image``
is given.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

from fontcode.glyph.bitmap import Bitmap

logger = logging.getLogger(__name__)

SET_CHARS = frozenset("#Xx@*1")
CLEAR_CHARS = frozenset(".0-_ ")

IMAGE_SUFFIXES = frozenset(
    {".png", ".bmp", ".gif", ".pbm", ".pgm", ".ppm", ".tif", ".tiff", ".jpg", ".jpeg"}
)


def bitmap_from_text(text: str) -> Bitmap:
    """Parse a text grid into a bitmap.

    Raises
    ------
    ValueError
        On a character that is neither a set nor a clear marker.
    """
    lines = text.splitlines()
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    if not lines:
        return Bitmap.empty()

    width = max(len(line.rstrip("\r")) for line in lines)
    rows: list[list[bool]] = []
    for lineno, line in enumerate(lines, 1):
        line = line.rstrip("\r").ljust(width)
        row = []
        for col, ch in enumerate(line, 1):
            if ch in SET_CHARS:
                row.append(True)
            elif ch in CLEAR_CHARS:
                row.append(False)
            else:
                raise ValueError(
                    f"Unexpected pixel character {ch!r} at line {lineno}, "
                    f"column {col}"
                )
        rows.append(row)
    return Bitmap.from_rows(rows)


def bitmap_from_image(
    path: Union[str, Path],
    threshold: int = 128,
    invert_image: bool = False,
) -> Bitmap:
    """Threshold an image file into a bitmap.

    Parameters
    ----------
    path : str | Path
        Any format Pillow can open.
    threshold : int
        Gray level in ``[0, 255]``; pixels below it are set.
    invert_image : bool
        Treat light pixels as set instead (light glyph on dark background).
    """
    if not 0 <= threshold <= 255:
        raise ValueError(f"threshold must be in [0, 255], got {threshold}")
    with Image.open(path) as img:
        gray = np.asarray(img.convert("L"), dtype=np.uint8)
    pixels = gray >= threshold if invert_image else gray < threshold
    logger.debug(
        "Loaded %s as %dx%d bitmap (threshold=%d)",
        path, pixels.shape[1], pixels.shape[0], threshold,
    )
    return Bitmap(pixels)


def load_bitmap(
    path: Union[str, Path],
    threshold: int = 128,
    invert_image: bool = False,
) -> Bitmap:
    """Load a glyph from *path*, picking the reader from the file suffix."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Glyph file not found: {path}")
    if path.suffix.lower() in IMAGE_SUFFIXES:
        return bitmap_from_image(path, threshold, invert_image)
    return bitmap_from_text(path.read_text(encoding="utf-8"))
