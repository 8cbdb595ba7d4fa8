"""
Packing module.

Turns glyph bitmaps into per-row byte sequences under a bit numbering and
optional inversion.  Packing is format-independent: every output format
renders the same PackedGlyph.
"""

from fontcode.packing.packer import (
    BitNumbering,
    PackedGlyph,
    bytes_per_row,
    pack,
    pack_face,
    unpack,
)

__all__ = [
    "BitNumbering",
    "PackedGlyph",
    "bytes_per_row",
    "pack",
    "pack_face",
    "unpack",
]
