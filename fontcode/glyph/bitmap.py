"""Glyph bitmaps -- the input vocabulary of the packer.

A *Bitmap* is a rectangular matrix of boolean pixels, row-major with the
origin at the top-left corner.  It wraps a read-only ``numpy`` bool array so
a snapshot handed to a background worker can never change underneath it.

A *Face* is an ordered run of equally-sized glyph bitmaps, indexed from a
first code point (the space character by default), used when a whole font
is exported in one array.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np


def _frozen_pixels(array: np.ndarray) -> np.ndarray:
    pixels = np.array(array, dtype=bool, copy=True)
    if pixels.ndim != 2:
        raise ValueError(
            f"Bitmap pixels must be a 2-D matrix, got {pixels.ndim} dimension(s)"
        )
    pixels.flags.writeable = False
    return pixels


# ---------------------------------------------------------------------------
# Bitmap
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class Bitmap:
    """Immutable boolean pixel matrix of one glyph.

    Parameters
    ----------
    pixels : np.ndarray
        ``(height, width)`` array; copied and coerced to ``bool``.
    """

    pixels: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "pixels", _frozen_pixels(self.pixels))

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[bool | int]]) -> Bitmap:
        """Build a bitmap from nested rows of truthy pixel values.

        Raises
        ------
        ValueError
            If the rows do not all have the same length.
        """
        rows = [list(r) for r in rows]
        if not rows:
            return cls.empty()
        width = len(rows[0])
        for i, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(
                    f"Bitmap row {i} has {len(row)} pixels, expected {width}; "
                    f"every row must have identical length"
                )
        return cls(np.array(rows, dtype=bool).reshape(len(rows), width))

    @classmethod
    def from_array(cls, array: np.ndarray) -> Bitmap:
        return cls(array)

    @classmethod
    def empty(cls, width: int = 0, height: int = 0) -> Bitmap:
        """All-clear bitmap; 0x0 by default."""
        return cls(np.zeros((height, width), dtype=bool))

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        """``(width, height)`` in pixels."""
        return self.width, self.height

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def rows(self) -> Iterable[tuple[bool, ...]]:
        for row in self.pixels:
            yield tuple(bool(p) for p in row)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bitmap):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and bool(
            np.array_equal(self.pixels, other.pixels)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Bitmap(width={self.width}, height={self.height})"


# ---------------------------------------------------------------------------
# Face
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Face:
    """Ordered, equally-sized glyphs exported together.

    Parameters
    ----------
    glyphs : tuple[Bitmap, ...]
        Glyph bitmaps in code point order.
    first_codepoint : int
        Code point of ``glyphs[0]``.  Defaults to 32 (space).
    """

    glyphs: tuple[Bitmap, ...]
    first_codepoint: int = 32

    def __post_init__(self) -> None:
        object.__setattr__(self, "glyphs", tuple(self.glyphs))
        if self.first_codepoint < 0:
            raise ValueError(
                f"first_codepoint must be >= 0, got {self.first_codepoint}"
            )
        if self.glyphs:
            size = self.glyphs[0].size
            for i, glyph in enumerate(self.glyphs):
                if glyph.size != size:
                    raise ValueError(
                        f"Glyph {i} is {glyph.width}x{glyph.height}, face glyphs "
                        f"must all be {size[0]}x{size[1]}"
                    )

    @property
    def glyph_size(self) -> tuple[int, int]:
        """``(width, height)`` shared by every glyph; ``(0, 0)`` when empty."""
        if not self.glyphs:
            return 0, 0
        return self.glyphs[0].size

    def codepoint(self, index: int) -> int:
        return self.first_codepoint + index

    def __len__(self) -> int:
        return len(self.glyphs)
