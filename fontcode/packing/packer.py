"""Bitmap packer -- glyph pixels to bytes.

Each bitmap row is packed independently into ``ceil(width / 8)`` bytes,
pixels taken left to right.

Bit numbering:
    ``MSB``: the first pixel of each byte lands in bit 7, the next in
    bit 6, and so on.  ``LSB``: the first pixel lands in bit 0.

Inversion:
    When ``invert`` is set every *pixel* bit is flipped before packing.
    Rows whose width is not a multiple of 8 are padded on the right with
    zero bits, and padding is never inverted::

        width 5, pixels 1 0 1 1 0, MSB           -> 0b10110_000 = 0xB0
        width 5, pixels 1 0 1 1 0, MSB, inverted -> 0b01001_000 = 0x48

Packing is pure and total, and ``unpack`` reverses it exactly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np

from fontcode.glyph.bitmap import Bitmap, Face


class BitNumbering(Enum):
    """Which end of a byte receives the first pixel."""

    MSB = "msb"
    LSB = "lsb"

    @property
    def bitorder(self) -> str:
        """``numpy.packbits`` bit order for this numbering."""
        return "big" if self is BitNumbering.MSB else "little"


# ---------------------------------------------------------------------------
# Packed glyph
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PackedGlyph:
    """Packed bytes of one glyph, one ``bytes`` object per bitmap row.

    Parameters
    ----------
    rows : tuple[bytes, ...]
        Packed rows, top to bottom.  Each holds ``bytes_per_row`` bytes.
    width, height : int
        Source bitmap dimensions in pixels.
    numbering : BitNumbering
        Bit numbering used to pack ``rows``.
    inverted : bool
        Whether pixel bits were flipped.
    """

    rows: tuple[bytes, ...]
    width: int
    height: int
    numbering: BitNumbering
    inverted: bool

    @property
    def bytes_per_row(self) -> int:
        return bytes_per_row(self.width)

    @property
    def byte_count(self) -> int:
        return self.bytes_per_row * self.height

    @property
    def data(self) -> bytes:
        """All rows concatenated, top to bottom."""
        return b"".join(self.rows)


def bytes_per_row(width: int) -> int:
    """Number of bytes a row of *width* pixels packs into."""
    return (width + 7) // 8


# ---------------------------------------------------------------------------
# Packing
# ---------------------------------------------------------------------------


def pack(
    bitmap: Bitmap,
    numbering: BitNumbering = BitNumbering.LSB,
    invert: bool = False,
) -> PackedGlyph:
    """Pack *bitmap* row by row.

    Parameters
    ----------
    bitmap : Bitmap
        Glyph pixels.
    numbering : BitNumbering
        Position of the first pixel inside each byte.
    invert : bool
        Flip pixel bits (padding bits stay 0).

    Returns
    -------
    PackedGlyph
        ``height`` rows of ``ceil(width / 8)`` bytes each.
    """
    width, height = bitmap.size
    if width == 0 or height == 0:
        rows: tuple[bytes, ...] = tuple(b"" for _ in range(height))
    else:
        pixels = ~bitmap.pixels if invert else bitmap.pixels
        # packbits zero-fills the tail of each row after inversion
        packed = np.packbits(pixels, axis=1, bitorder=numbering.bitorder)
        rows = tuple(row.tobytes() for row in packed)

    return PackedGlyph(
        rows=rows,
        width=width,
        height=height,
        numbering=numbering,
        inverted=invert,
    )


def pack_face(
    face: Face,
    numbering: BitNumbering = BitNumbering.LSB,
    invert: bool = False,
) -> tuple[PackedGlyph, ...]:
    """Pack every glyph of *face* with the same settings."""
    return tuple(pack(glyph, numbering, invert) for glyph in face.glyphs)


def unpack(packed: PackedGlyph) -> Bitmap:
    """Recover the source bitmap: undo inversion, drop padding bits."""
    if packed.width == 0 or packed.height == 0:
        return Bitmap.empty(packed.width, packed.height)

    raw = np.frombuffer(packed.data, dtype=np.uint8).reshape(
        packed.height, packed.bytes_per_row
    )
    bits = np.unpackbits(
        raw, axis=1, count=packed.width, bitorder=packed.numbering.bitorder
    ).astype(bool)
    if packed.inverted:
        bits = ~bits
    return Bitmap(bits)
