"""Source emitter -- packed glyph bytes to C, Arduino or Python text.

Every format renders the same parts in the same order::

    header comment      glyph size, bytes per row, numbering, inversion
    declaration         column 0, named after the array
    body                one indentation level, one bitmap row per line
    footer              column 0

Body lines hold the packed bytes of one bitmap row, wrapped every
``BYTES_PER_LINE`` bytes.  The first line of each row ends with a comment
previewing the row (``#`` set, ``.`` clear).  With
``include_line_spacing`` a blank line separates consecutive rows.

Formats are a closed enum; ``_RENDERERS`` maps each member to a pure
function of the prepared document, so emitting the same input twice gives
byte-identical text.  There is no parser for the emitted text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from io import StringIO
from typing import Callable, Sequence

from fontcode.packing.packer import BitNumbering, PackedGlyph, bytes_per_row, unpack
from fontcode.sourcecode.errors import InvalidOptions
from fontcode.sourcecode.formats import Format, validate_array_name
from fontcode.sourcecode.options import SourceCodeOptions

logger = logging.getLogger(__name__)

BYTES_PER_LINE = 16


# ---------------------------------------------------------------------------
# Prepared document
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _Block:
    label: str | None
    rows: tuple[bytes, ...]
    previews: tuple[str, ...]


@dataclass(frozen=True)
class _Document:
    name: str
    options: SourceCodeOptions
    title: str
    width: int
    height: int
    byte_count: int
    blocks: tuple[_Block, ...]

    @property
    def indent(self) -> str:
        return self.options.indentation.prefix


def _preview_rows(packed: PackedGlyph) -> tuple[str, ...]:
    bitmap = unpack(packed)
    return tuple(
        "".join("#" if p else "." for p in row) for row in bitmap.rows()
    )


def _block(packed: PackedGlyph, label: str | None = None) -> _Block:
    return _Block(label=label, rows=packed.rows, previews=_preview_rows(packed))


def _check_options(options: SourceCodeOptions) -> None:
    if not isinstance(options, SourceCodeOptions):
        raise InvalidOptions(
            f"options must be SourceCodeOptions, got {type(options).__name__}"
        )


def _check_consistent(packed: PackedGlyph, options: SourceCodeOptions) -> None:
    if packed.numbering is not options.bit_numbering or (
        packed.inverted != options.invert_bits
    ):
        raise InvalidOptions(
            "Packed glyph does not match options: packed with "
            f"{packed.numbering.value}/inverted={packed.inverted}, options ask "
            f"{options.bit_numbering.value}/inverted={options.invert_bits}"
        )


def _codepoint_label(index: int, codepoint: int) -> str:
    if codepoint <= 0x10FFFF:
        ch = chr(codepoint)
        if ch.isprintable() and ch != "\\":
            return f"Glyph {index} (U+{codepoint:04X} '{ch}')"
    return f"Glyph {index} (U+{codepoint:04X})"


# ---------------------------------------------------------------------------
# Shared writers
# ---------------------------------------------------------------------------


def _numbering_text(options: SourceCodeOptions) -> str:
    first = "MSB" if options.bit_numbering is BitNumbering.MSB else "LSB"
    inverted = "yes" if options.invert_bits else "no"
    return f"Bit numbering: {first} first, inverted: {inverted}"


def _write_header(buf: StringIO, marker: str, doc: _Document) -> None:
    per_row = bytes_per_row(doc.width)
    unit = "byte" if per_row == 1 else "bytes"
    buf.write(f"{marker}\n")
    buf.write(f"{marker} {doc.title}\n")
    buf.write(
        f"{marker} Size: {doc.width} x {doc.height} px, "
        f"{per_row} {unit} per row, {doc.byte_count} bytes total\n"
    )
    buf.write(f"{marker} {_numbering_text(doc.options)}\n")
    buf.write(f"{marker}\n")
    buf.write("\n")


def _write_body(
    buf: StringIO,
    doc: _Document,
    render_chunk: Callable[[bytes], str],
    label_marker: str,
    comment: str,
) -> None:
    """Write indented row lines for every block.

    Parameters
    ----------
    render_chunk : callable
        Renders up to ``BYTES_PER_LINE`` bytes as one line of literals.
    label_marker : str
        Line comment marker for block labels (``//`` or ``#``).
    comment : str
        Separator placed between the literals and the row preview.
    """
    spacing = doc.options.include_line_spacing
    first_line = True
    for block in doc.blocks:
        if block.label is not None:
            if spacing and not first_line:
                buf.write("\n")
            buf.write(f"{doc.indent}{label_marker} {block.label}\n")
            first_line = True
        for row, preview in zip(block.rows, block.previews):
            if not row:
                continue
            if spacing and not first_line:
                buf.write("\n")
            first_line = False
            for offset in range(0, len(row), BYTES_PER_LINE):
                line = render_chunk(row[offset:offset + BYTES_PER_LINE])
                if offset == 0:
                    line = f"{line}{comment} {preview}"
                buf.write(f"{doc.indent}{line}\n")


def _hex_list(chunk: bytes) -> str:
    return " ".join(f"0x{b:02X}," for b in chunk)


def _bytes_literal(chunk: bytes) -> str:
    return "b'" + "".join(f"\\x{b:02x}" for b in chunk) + "'"


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------


def _render_c(doc: _Document) -> str:
    buf = StringIO()
    _write_header(buf, "//", doc)
    buf.write(f"const unsigned char {doc.name}[{doc.byte_count}] = {{\n")
    _write_body(buf, doc, _hex_list, "//", " //")
    buf.write("};\n")
    return buf.getvalue()


def _render_arduino(doc: _Document) -> str:
    buf = StringIO()
    buf.write("#include <Arduino.h>\n")
    buf.write("\n")
    _write_header(buf, "//", doc)
    buf.write(f"const uint8_t {doc.name}[{doc.byte_count}] PROGMEM = {{\n")
    _write_body(buf, doc, _hex_list, "//", " //")
    buf.write("};\n")
    return buf.getvalue()


def _render_python_list(doc: _Document) -> str:
    buf = StringIO()
    _write_header(buf, "#", doc)
    buf.write(f"{doc.name} = [\n")
    _write_body(buf, doc, _hex_list, "#", "  #")
    buf.write("]\n")
    return buf.getvalue()


def _render_python_bytes(doc: _Document) -> str:
    buf = StringIO()
    _write_header(buf, "#", doc)
    buf.write(f"{doc.name} = (\n")
    # seed literal keeps an empty body a bytes object, not ()
    buf.write(f"{doc.indent}b''\n")
    _write_body(buf, doc, _bytes_literal, "#", "  #")
    buf.write(")\n")
    return buf.getvalue()


_RENDERERS: dict[Format, Callable[[_Document], str]] = {
    Format.C: _render_c,
    Format.ARDUINO: _render_arduino,
    Format.PYTHON_LIST: _render_python_list,
    Format.PYTHON_BYTES: _render_python_bytes,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def emit(
    packed: PackedGlyph,
    array_name: str,
    options: SourceCodeOptions,
    fmt: Format | str = Format.C,
) -> str:
    """Render one packed glyph as source code.

    Parameters
    ----------
    packed : PackedGlyph
        Output of ``pack`` for the glyph; must have been packed with the
        numbering and inversion named in *options*.
    array_name : str
        Identifier of the emitted array.
    options : SourceCodeOptions
        Indentation, line spacing, and the numbering shown in the header.
    fmt : Format | str
        Target format; unknown keys fall back to ``Format.C``.

    Returns
    -------
    str
        Complete source text ending with a newline.

    Raises
    ------
    InvalidArrayName
        If *array_name* is not an identifier in the target language.
    InvalidOptions
        If *options* is malformed or disagrees with *packed*.
    """
    fmt = Format.from_key(fmt)
    _check_options(options)
    validate_array_name(array_name, fmt)
    _check_consistent(packed, options)

    doc = _Document(
        name=array_name,
        options=options,
        title="Glyph bitmap",
        width=packed.width,
        height=packed.height,
        byte_count=packed.byte_count,
        blocks=(_block(packed),),
    )
    return _RENDERERS[fmt](doc)


def emit_face(
    packed_glyphs: Sequence[PackedGlyph],
    array_name: str,
    options: SourceCodeOptions,
    fmt: Format | str = Format.C,
    first_codepoint: int = 32,
) -> str:
    """Render every glyph of a face into one array.

    Each glyph becomes a block introduced by a comment naming its index and
    code point.  With ``include_line_spacing`` a blank line also separates
    consecutive glyph blocks.  Glyph bytes are concatenated in order, so
    glyph ``i`` starts at byte ``i * height * bytes_per_row``.

    Raises
    ------
    InvalidArrayName
        If *array_name* is not an identifier in the target language.
    InvalidOptions
        If *options* is malformed, disagrees with the packing, or the glyphs
        differ in size.
    """
    fmt = Format.from_key(fmt)
    _check_options(options)
    validate_array_name(array_name, fmt)

    glyphs = tuple(packed_glyphs)
    width, height = (glyphs[0].width, glyphs[0].height) if glyphs else (0, 0)
    for i, packed in enumerate(glyphs):
        _check_consistent(packed, options)
        if (packed.width, packed.height) != (width, height):
            raise InvalidOptions(
                f"Glyph {i} is {packed.width}x{packed.height}, "
                f"expected {width}x{height}"
            )

    doc = _Document(
        name=array_name,
        options=options,
        title=f"Font face: {len(glyphs)} glyphs from U+{first_codepoint:04X}",
        width=width,
        height=height,
        byte_count=sum(p.byte_count for p in glyphs),
        blocks=tuple(
            _block(packed, _codepoint_label(i, first_codepoint + i))
            for i, packed in enumerate(glyphs)
        ),
    )
    return _RENDERERS[fmt](doc)
