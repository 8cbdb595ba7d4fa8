"""Source code options -- how packed bytes are laid out as text.

``SourceCodeOptions`` is an immutable snapshot copied into every generation
request.  Indentation is a tagged variant: ``Tab()`` or ``Space(count)``
with ``count`` in ``1..8``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Union

from fontcode.packing.packer import BitNumbering
from fontcode.sourcecode.errors import InvalidOptions

MAX_INDENT_SPACES = 8


# ---------------------------------------------------------------------------
# Indentation
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Tab:
    """Indent with one tab character per level."""

    @property
    def prefix(self) -> str:
        return "\t"

    @property
    def label(self) -> str:
        return "Tab"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "tab"}


@dataclass(frozen=True, slots=True)
class Space:
    """Indent with ``count`` spaces per level.

    Parameters
    ----------
    count : int
        Spaces per level, ``1..8``.
    """

    count: int

    def __post_init__(self) -> None:
        if isinstance(self.count, bool) or not isinstance(self.count, int):
            raise InvalidOptions(
                f"Space count must be an integer, got {self.count!r}"
            )
        if not 1 <= self.count <= MAX_INDENT_SPACES:
            raise InvalidOptions(
                f"Space count must be in [1, {MAX_INDENT_SPACES}], got {self.count}"
            )

    @property
    def prefix(self) -> str:
        return " " * self.count

    @property
    def label(self) -> str:
        return "1 Space" if self.count == 1 else f"{self.count} Spaces"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "space", "count": self.count}


IndentationStyle = Union[Tab, Space]
"""Either ``Tab()`` or ``Space(count)``."""


def indentation_from_dict(data: dict[str, Any]) -> IndentationStyle:
    """Inverse of ``to_dict`` on either indentation variant.

    Raises
    ------
    InvalidOptions
        On an unknown ``kind`` or a bad space count.
    """
    kind = str(data.get("kind", "")).lower()
    if kind == "tab":
        return Tab()
    if kind == "space":
        if "count" not in data:
            raise InvalidOptions("Space indentation requires a 'count'")
        try:
            count = int(data["count"])
        except (TypeError, ValueError) as exc:
            raise InvalidOptions(
                f"Space count must be an integer, got {data['count']!r}"
            ) from exc
        return Space(count)
    raise InvalidOptions(f"Unknown indentation kind {data.get('kind')!r}")


def indentation_styles() -> list[IndentationStyle]:
    """Every selectable style: Tab, then 1 to 8 spaces."""
    return [Tab(), *(Space(n) for n in range(1, MAX_INDENT_SPACES + 1))]


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SourceCodeOptions:
    """Output options for one generation.

    Parameters
    ----------
    bit_numbering : BitNumbering
        First pixel in the most or least significant bit.
    invert_bits : bool
        Flip pixel bits before packing.
    include_line_spacing : bool
        Blank line between the bytes of consecutive bitmap rows.
    indentation : IndentationStyle
        Prefix for array body lines.
    """

    bit_numbering: BitNumbering = BitNumbering.LSB
    invert_bits: bool = False
    include_line_spacing: bool = False
    indentation: IndentationStyle = field(default_factory=Tab)

    def __post_init__(self) -> None:
        if not isinstance(self.bit_numbering, BitNumbering):
            raise InvalidOptions(
                f"bit_numbering must be a BitNumbering, got {self.bit_numbering!r}"
            )
        if not isinstance(self.indentation, (Tab, Space)):
            raise InvalidOptions(
                f"indentation must be Tab() or Space(n), got {self.indentation!r}"
            )

    def replace(self, **changes: Any) -> SourceCodeOptions:
        """Return a copy with *changes* applied."""
        return replace(self, **changes)
