"""Preferences schema (preferences.v1.yaml) validated with pydantic.

Example file::

    schema: preferences.v1
    source_code_options:
      bit_numbering: lsb
      invert_bits: false
      include_line_spacing: false
      indentation:
        kind: space
        count: 4
    format: arduino
    array_name: font

The format key is kept as a free string: unknown keys are not a validation
error, they fall back to the first registered format when resolved.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from fontcode.packing.packer import BitNumbering
from fontcode.sourcecode.formats import Format
from fontcode.sourcecode.generator import DEFAULT_ARRAY_NAME
from fontcode.sourcecode.options import (
    MAX_INDENT_SPACES,
    IndentationStyle,
    SourceCodeOptions,
    Space,
    Tab,
)

SCHEMA_VERSION = "preferences.v1"


class IndentationV1(BaseModel):
    """Indentation variant: tag plus optional space count."""
    kind: Literal["tab", "space"] = Field("tab", description="Indentation variant")
    count: Optional[int] = Field(
        None, ge=1, le=MAX_INDENT_SPACES, description="Spaces per level (space only)"
    )

    @field_validator('kind', mode='before')
    @classmethod
    def normalize_kind(cls, v):
        return v.lower() if isinstance(v, str) else v

    @model_validator(mode='after')
    def validate_count(self) -> 'IndentationV1':
        if self.kind == "space" and self.count is None:
            raise ValueError("indentation.count is required when kind is 'space'")
        if self.kind == "tab" and self.count is not None:
            raise ValueError("indentation.count is only valid when kind is 'space'")
        return self

    def to_style(self) -> IndentationStyle:
        if self.kind == "space":
            return Space(self.count)
        return Tab()

    @classmethod
    def from_style(cls, style: IndentationStyle) -> 'IndentationV1':
        return cls(**style.to_dict())


class SourceCodeOptionsV1(BaseModel):
    """Persisted form of SourceCodeOptions."""
    bit_numbering: Literal["msb", "lsb"] = Field("lsb", description="First pixel bit")
    invert_bits: bool = False
    include_line_spacing: bool = False
    indentation: IndentationV1 = Field(default_factory=IndentationV1)

    @field_validator('bit_numbering', mode='before')
    @classmethod
    def normalize_numbering(cls, v):
        return v.lower() if isinstance(v, str) else v

    def to_options(self) -> SourceCodeOptions:
        return SourceCodeOptions(
            bit_numbering=BitNumbering(self.bit_numbering),
            invert_bits=self.invert_bits,
            include_line_spacing=self.include_line_spacing,
            indentation=self.indentation.to_style(),
        )

    @classmethod
    def from_options(cls, options: SourceCodeOptions) -> 'SourceCodeOptionsV1':
        return cls(
            bit_numbering=options.bit_numbering.value,
            invert_bits=options.invert_bits,
            include_line_spacing=options.include_line_spacing,
            indentation=IndentationV1.from_style(options.indentation),
        )


class PreferencesV1(BaseModel):
    """Complete preferences file (preferences.v1 schema)."""
    model_config = ConfigDict(populate_by_name=True)

    schema_version: str = Field(SCHEMA_VERSION, alias="schema", description="Schema version")
    source_code_options: SourceCodeOptionsV1 = Field(default_factory=SourceCodeOptionsV1)
    format: str = Field(Format.default().identifier, description="Output format key")
    array_name: str = Field(DEFAULT_ARRAY_NAME, description="Emitted array identifier")

    @field_validator('schema_version')
    @classmethod
    def validate_schema(cls, v: str) -> str:
        if v != SCHEMA_VERSION:
            raise ValueError(f"Expected schema '{SCHEMA_VERSION}', got '{v}'")
        return v

    @field_validator('array_name')
    @classmethod
    def validate_array_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("array_name must be non-empty")
        return v

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, mode='json')
