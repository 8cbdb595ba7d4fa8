"""
Glyph value types.

Bitmaps are immutable snapshots, safe to hand to background workers.
"""

from fontcode.glyph.bitmap import Bitmap, Face
from fontcode.glyph.loaders import bitmap_from_image, bitmap_from_text, load_bitmap

__all__ = [
    "Bitmap",
    "Face",
    "bitmap_from_image",
    "bitmap_from_text",
    "load_bitmap",
]
