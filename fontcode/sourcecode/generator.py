"""One-shot generation: bitmap or face -> packed bytes -> source text."""

from __future__ import annotations

from typing import Union

from fontcode.glyph.bitmap import Bitmap, Face
from fontcode.packing.packer import pack, pack_face
from fontcode.sourcecode.emitter import emit, emit_face
from fontcode.sourcecode.errors import InvalidOptions
from fontcode.sourcecode.formats import Format, validate_array_name
from fontcode.sourcecode.options import SourceCodeOptions

GlyphSource = Union[Bitmap, Face]
"""What a generation packs: one glyph or a whole face."""

DEFAULT_ARRAY_NAME = "font"


def generate_source(
    source: GlyphSource,
    options: SourceCodeOptions,
    fmt: Format | str = Format.C,
    array_name: str | None = None,
) -> str:
    """Pack *source* under *options* and render it in *fmt*.

    Parameters
    ----------
    source : Bitmap | Face
        Glyph snapshot to export.
    options : SourceCodeOptions
        Numbering, inversion, spacing and indentation.
    fmt : Format | str
        Target format or its identifier; unknown keys fall back to C.
    array_name : str | None
        Array identifier; ``None`` or ``""`` uses ``DEFAULT_ARRAY_NAME``.

    Raises
    ------
    InvalidArrayName
        If the array name is not an identifier in the target language.
    InvalidOptions
        If *options* or *source* is of the wrong type.
    """
    fmt = Format.from_key(fmt)
    name = array_name or DEFAULT_ARRAY_NAME
    if not isinstance(options, SourceCodeOptions):
        raise InvalidOptions(
            f"options must be SourceCodeOptions, got {type(options).__name__}"
        )
    # Reject the name before spending time on packing.
    validate_array_name(name, fmt)

    if isinstance(source, Face):
        packed = pack_face(source, options.bit_numbering, options.invert_bits)
        return emit_face(packed, name, options, fmt, source.first_codepoint)
    if isinstance(source, Bitmap):
        packed_glyph = pack(source, options.bit_numbering, options.invert_bits)
        return emit(packed_glyph, name, options, fmt)
    raise InvalidOptions(
        f"source must be a Bitmap or Face, got {type(source).__name__}"
    )
