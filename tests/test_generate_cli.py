"""Tests for the fontcode-generate command-line entry point."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from PIL import Image

from fontcode.scripts.generate import EXIT_INVALID, build_parser, main
from fontcode.sourcecode.options import Space, Tab


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def restore_root_logger():
    """main() reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture()
def glyph_t(tmp_path: Path) -> Path:
    path = tmp_path / "t.txt"
    path.write_text("#####\n..#..\n..#..\n..#..\n", encoding="utf-8")
    return path


@pytest.fixture()
def glyph_dot(tmp_path: Path) -> Path:
    path = tmp_path / "dot.txt"
    path.write_text(".....\n.....\n..#..\n.....\n", encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class TestParser:
    def test_defaults_left_unset(self, glyph_t: Path) -> None:
        args = build_parser().parse_args([str(glyph_t)])
        assert args.format is None
        assert args.bit_numbering is None
        assert args.invert is None
        assert args.indent is None
        assert args.first_codepoint == 32

    def test_indent_values(self, glyph_t: Path) -> None:
        parser = build_parser()
        assert parser.parse_args([str(glyph_t), "--indent", "tab"]).indent == Tab()
        assert parser.parse_args([str(glyph_t), "--indent", "3"]).indent == Space(3)

    @pytest.mark.parametrize("value", ["0", "9", "wide"])
    def test_bad_indent(self, glyph_t: Path, value: str) -> None:
        with pytest.raises(SystemExit) as excinfo:
            build_parser().parse_args([str(glyph_t), "--indent", value])
        assert excinfo.value.code == 2

    def test_msb_lsb_exclusive(self, glyph_t: Path) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([str(glyph_t), "--msb", "--lsb"])

    def test_hex_codepoint(self, glyph_t: Path) -> None:
        args = build_parser().parse_args([str(glyph_t), "--first-codepoint", "0x41"])
        assert args.first_codepoint == 65


# ---------------------------------------------------------------------------
# main()
# ---------------------------------------------------------------------------


class TestMain:
    def test_single_glyph_to_stdout(
        self, glyph_t: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert main([str(glyph_t)]) == 0
        out = capsys.readouterr().out
        assert "// Bit numbering: LSB first, inverted: no\n" in out
        assert "const unsigned char font[4] = {\n\t0x1F, // #####\n" in out

    def test_python_bytes_output_runs(
        self, glyph_t: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        argv = [str(glyph_t), "--format", "python_bytes", "--msb", "--name", "glyph"]
        assert main(argv) == 0
        namespace: dict = {}
        exec(capsys.readouterr().out, namespace)
        assert namespace["glyph"] == b"\xf8\x20\x20\x20"

    def test_options(self, glyph_t: Path, capsys: pytest.CaptureFixture[str]) -> None:
        argv = [str(glyph_t), "--invert", "--line-spacing", "--indent", "2"]
        assert main(argv) == 0
        out = capsys.readouterr().out
        assert "inverted: yes" in out
        assert "  0x00, // #####\n\n  0x1B, // ..#..\n" in out

    def test_face_from_several_files(
        self, glyph_t: Path, glyph_dot: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        argv = [str(glyph_t), str(glyph_dot), "--first-codepoint", "0x41"]
        assert main(argv) == 0
        out = capsys.readouterr().out
        assert "// Font face: 2 glyphs from U+0041\n" in out
        assert "\t// Glyph 1 (U+0042 'B')\n" in out
        assert "font[8]" in out

    def test_image_input(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        img = Image.new("L", (8, 1), color=255)
        for x in (0, 2, 4, 6):
            img.putpixel((x, 0), 0)
        path = tmp_path / "glyph.png"
        img.save(path)
        assert main([str(path), "--msb"]) == 0
        assert "\t0xAA, // #.#.#.#.\n" in capsys.readouterr().out

    def test_output_file(
        self, glyph_t: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        target = tmp_path / "out" / "glyph.h"
        assert main([str(glyph_t), "--format", "arduino", "-o", str(target)]) == 0
        assert capsys.readouterr().out == ""
        text = target.read_text(encoding="utf-8")
        assert text.startswith("#include <Arduino.h>\n")
        assert not target.with_suffix(".h.tmp").exists()

    def test_unwritable_output(
        self, glyph_t: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        target = tmp_path / "taken"
        target.mkdir()
        (target / "x").write_text("x", encoding="utf-8")
        assert main([str(glyph_t), "-o", str(target)]) == EXIT_INVALID
        assert capsys.readouterr().out == ""
        assert not (tmp_path / "taken.tmp").exists()

    def test_preferences_supply_defaults(
        self, glyph_t: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str],
    ) -> None:
        prefs = tmp_path / "preferences.yaml"
        prefs.write_text(
            "schema: preferences.v1\n"
            "source_code_options:\n"
            "  bit_numbering: msb\n"
            "format: python_list\n"
            "array_name: glyphs\n",
            encoding="utf-8",
        )
        assert main([str(glyph_t), "-p", str(prefs), "--lsb"]) == 0
        out = capsys.readouterr().out
        assert "glyphs = [\n" in out
        assert "LSB first" in out

    def test_invalid_array_name(self, glyph_t: Path) -> None:
        assert main([str(glyph_t), "--name", "int"]) == EXIT_INVALID

    def test_missing_glyph_file(self, tmp_path: Path) -> None:
        assert main([str(tmp_path / "missing.txt")]) == EXIT_INVALID

    def test_bad_glyph_text(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.txt"
        path.write_text("#?#\n", encoding="utf-8")
        assert main([str(path)]) == EXIT_INVALID

    def test_mismatched_face(self, glyph_t: Path, tmp_path: Path) -> None:
        small = tmp_path / "small.txt"
        small.write_text("#\n", encoding="utf-8")
        assert main([str(glyph_t), str(small)]) == EXIT_INVALID

    def test_bad_preferences(self, glyph_t: Path, tmp_path: Path) -> None:
        prefs = tmp_path / "preferences.yaml"
        prefs.write_text("schema: preferences.v9\n", encoding="utf-8")
        assert main([str(glyph_t), "-p", str(prefs)]) == EXIT_INVALID
