"""
Source code generation module.

Renders packed glyph bytes as C/C++, Arduino or Python source under
configurable indentation and line spacing.
"""

from fontcode.sourcecode.emitter import emit, emit_face
from fontcode.sourcecode.errors import CodegenError, InvalidArrayName, InvalidOptions
from fontcode.sourcecode.formats import Format, validate_array_name
from fontcode.sourcecode.generator import (
    DEFAULT_ARRAY_NAME,
    GlyphSource,
    generate_source,
)
from fontcode.sourcecode.options import (
    IndentationStyle,
    SourceCodeOptions,
    Space,
    Tab,
    indentation_from_dict,
    indentation_styles,
)

__all__ = [
    "CodegenError",
    "DEFAULT_ARRAY_NAME",
    "Format",
    "GlyphSource",
    "IndentationStyle",
    "InvalidArrayName",
    "InvalidOptions",
    "SourceCodeOptions",
    "Space",
    "Tab",
    "emit",
    "emit_face",
    "generate_source",
    "indentation_from_dict",
    "indentation_styles",
    "validate_array_name",
]
