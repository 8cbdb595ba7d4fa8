"""Tests for the format registry and array-name validation."""

from __future__ import annotations

import logging

import pytest

from fontcode.sourcecode.errors import InvalidArrayName
from fontcode.sourcecode.formats import Format, validate_array_name


class TestFormatRegistry:
    def test_identifiers_and_labels(self) -> None:
        assert [(f.identifier, f.label) for f in Format] == [
            ("c", "C/C++"),
            ("arduino", "Arduino"),
            ("python_list", "Python List"),
            ("python_bytes", "Python Bytes"),
        ]

    def test_default_is_first(self) -> None:
        assert Format.default() is Format.C

    @pytest.mark.parametrize(
        "key, expected",
        [
            ("c", Format.C),
            ("ARDUINO", Format.ARDUINO),
            ("Python List", Format.PYTHON_LIST),
            (" python_bytes ", Format.PYTHON_BYTES),
            ("c/c++", Format.C),
            (Format.ARDUINO, Format.ARDUINO),
        ],
    )
    def test_from_key(self, key, expected: Format) -> None:
        assert Format.from_key(key) is expected

    @pytest.mark.parametrize("key", ["rust", "", None])
    def test_unknown_falls_back(self, key, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="fontcode.sourcecode.formats"):
            assert Format.from_key(key) is Format.C
        assert "Unsupported output format" in caplog.text

    def test_is_python(self) -> None:
        assert [f for f in Format if f.is_python] == [
            Format.PYTHON_LIST, Format.PYTHON_BYTES,
        ]


class TestValidateArrayName:
    @pytest.mark.parametrize("name", ["font", "_glyph", "Font_8x8", "g2", "match", "_"])
    @pytest.mark.parametrize("fmt", list(Format))
    def test_accepts_identifiers(self, name: str, fmt: Format) -> None:
        assert validate_array_name(name, fmt) == name

    def test_leading_digit_reason(self) -> None:
        with pytest.raises(InvalidArrayName) as excinfo:
            validate_array_name("8x8", Format.C)
        assert excinfo.value.name == "8x8"
        assert "must not start with a digit" in excinfo.value.reason

    @pytest.mark.parametrize("name", ["const", "unsigned", "class", "while"])
    def test_c_keywords(self, name: str) -> None:
        with pytest.raises(InvalidArrayName):
            validate_array_name(name, Format.C)

    @pytest.mark.parametrize("name", ["def", "None", "lambda", "class"])
    def test_python_keywords(self, name: str) -> None:
        with pytest.raises(InvalidArrayName):
            validate_array_name(name, Format.PYTHON_BYTES)

    def test_message(self) -> None:
        with pytest.raises(InvalidArrayName, match="Invalid array name 'a b'"):
            validate_array_name("a b", Format.C)
