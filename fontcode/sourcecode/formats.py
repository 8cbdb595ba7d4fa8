"""Output formats and array-name validation.

``Format`` is a closed set.  Each member carries a stable identifier (used
in preferences and on the command line) and a human label.  Unknown keys
never fail: they fall back to the first registered format, ``Format.C``.
"""

from __future__ import annotations

import keyword
import logging
import re
from enum import Enum

from fontcode.sourcecode.errors import InvalidArrayName

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

C_KEYWORDS = frozenset(
    {
        "alignas", "alignof", "and", "and_eq", "asm", "auto", "bitand", "bitor",
        "bool", "break", "case", "catch", "char", "char16_t", "char32_t",
        "char8_t", "class", "compl", "concept", "const", "const_cast",
        "consteval", "constexpr", "constinit", "continue", "co_await",
        "co_return", "co_yield", "decltype", "default", "delete", "do",
        "double", "dynamic_cast", "else", "enum", "explicit", "export",
        "extern", "false", "float", "for", "friend", "goto", "if", "inline",
        "int", "long", "mutable", "namespace", "new", "noexcept", "not",
        "not_eq", "nullptr", "operator", "or", "or_eq", "private",
        "protected", "public", "register", "reinterpret_cast", "requires",
        "restrict", "return", "short", "signed", "sizeof", "static",
        "static_assert", "static_cast", "struct", "switch", "template",
        "this", "thread_local", "throw", "true", "try", "typedef", "typeid",
        "typename", "union", "unsigned", "using", "virtual", "void",
        "volatile", "wchar_t", "while", "xor", "xor_eq",
    }
)


class Format(Enum):
    """Target source code format.

    Member values are the stable string identifiers.
    """

    C = "c"
    ARDUINO = "arduino"
    PYTHON_LIST = "python_list"
    PYTHON_BYTES = "python_bytes"

    @property
    def identifier(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def is_python(self) -> bool:
        return self in (Format.PYTHON_LIST, Format.PYTHON_BYTES)

    @classmethod
    def default(cls) -> Format:
        """First registered format."""
        return next(iter(cls))

    @classmethod
    def from_key(cls, key: Format | str | None) -> Format:
        """Resolve an identifier or label, falling back to the default.

        Parameters
        ----------
        key : Format | str | None
            A member, its identifier (``"arduino"``) or its label
            (``"Arduino"``).  Matching is case-insensitive.
        """
        if isinstance(key, Format):
            return key
        if key is not None:
            wanted = str(key).strip().lower()
            for fmt in cls:
                if wanted in (fmt.identifier, fmt.label.lower()):
                    return fmt
        fallback = cls.default()
        logger.warning(
            "Unsupported output format %r, falling back to %s",
            key, fallback.identifier,
        )
        return fallback


_LABELS = {
    Format.C: "C/C++",
    Format.ARDUINO: "Arduino",
    Format.PYTHON_LIST: "Python List",
    Format.PYTHON_BYTES: "Python Bytes",
}


def validate_array_name(name: str, fmt: Format) -> str:
    """Check *name* is usable as an identifier in *fmt*.

    Returns
    -------
    str
        The validated name, unchanged.

    Raises
    ------
    InvalidArrayName
        If *name* is empty, has characters outside ``[A-Za-z0-9_]``, starts
        with a digit, or is a reserved word of the target language.
    """
    if not isinstance(name, str) or not name:
        raise InvalidArrayName(str(name), "name must be a non-empty string")
    if name[0].isdigit():
        raise InvalidArrayName(name, "name must not start with a digit")
    if not _IDENTIFIER_RE.fullmatch(name):
        raise InvalidArrayName(
            name, "only ASCII letters, digits and underscores are allowed"
        )
    if fmt.is_python:
        if keyword.iskeyword(name):
            raise InvalidArrayName(name, "name is a Python keyword")
    elif name in C_KEYWORDS:
        raise InvalidArrayName(name, "name is a C/C++ keyword")
    return name
