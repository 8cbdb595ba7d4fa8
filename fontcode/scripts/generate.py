#!/usr/bin/env python3
"""
Generate Source Script.

Convert glyph bitmaps (text grids or images) into C/C++, Arduino or Python
source.

Usage:
    python -m fontcode.scripts.generate glyph_A.txt --format arduino --msb
    python -m fontcode.scripts.generate a.png b.png --first-codepoint 65 -o font.h
    python -m fontcode.scripts.generate glyph.txt --preferences ~/.fontcode/preferences.yaml

One glyph file emits a single-glyph array; several files are exported as
one face, in the order given.  Options not passed on the command line come
from the preferences file when ``--preferences`` is given, else from the
built-in defaults (LSB, no inversion, no spacing, tab indent, C/C++).

Exit codes:
    0   success
    2   invalid glyph file, option, array name or preferences, or an
        output file that cannot be written
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from fontcode.configs.loader import ConfigError, PreferencesStore, load_preferences
from fontcode.glyph.bitmap import Face
from fontcode.glyph.loaders import load_bitmap
from fontcode.packing.packer import BitNumbering
from fontcode.sourcecode.errors import CodegenError
from fontcode.sourcecode.formats import Format
from fontcode.sourcecode.generator import generate_source
from fontcode.sourcecode.options import Space, Tab
from fontcode.utils import fs
from fontcode.utils.logging_config import push_context, setup_logging

logger = logging.getLogger(__name__)

EXIT_INVALID = 2


def _indent_arg(value: str):
    if value.lower() == "tab":
        return Tab()
    try:
        return Space(int(value))
    except (ValueError, CodegenError) as exc:
        raise argparse.ArgumentTypeError(
            f"expected 'tab' or a space count 1-8, got {value!r}"
        ) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fontcode-generate",
        description="Convert glyph bitmaps into source code arrays",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Formats: " + ", ".join(
            f"{fmt.identifier} ({fmt.label})" for fmt in Format
        ),
    )
    parser.add_argument(
        "glyphs",
        nargs="+",
        type=Path,
        help="Glyph files: text grids or images",
    )
    parser.add_argument(
        "--format",
        "-f",
        type=str,
        help="Output format identifier (default: c)",
    )
    numbering = parser.add_mutually_exclusive_group()
    numbering.add_argument(
        "--msb",
        dest="bit_numbering",
        action="store_const",
        const=BitNumbering.MSB,
        help="First pixel in the most significant bit",
    )
    numbering.add_argument(
        "--lsb",
        dest="bit_numbering",
        action="store_const",
        const=BitNumbering.LSB,
        help="First pixel in the least significant bit",
    )
    parser.add_argument(
        "--invert",
        action="store_true",
        default=None,
        help="Invert pixel bits (padding stays 0)",
    )
    parser.add_argument(
        "--line-spacing",
        action="store_true",
        default=None,
        help="Blank line between bitmap rows",
    )
    parser.add_argument(
        "--indent",
        type=_indent_arg,
        help="'tab' or number of spaces (1-8)",
    )
    parser.add_argument(
        "--name",
        "-n",
        type=str,
        help="Array name (default: font)",
    )
    parser.add_argument(
        "--first-codepoint",
        type=lambda s: int(s, 0),
        default=32,
        help="Code point of the first glyph when exporting a face (default: 32)",
    )
    parser.add_argument(
        "--threshold",
        type=int,
        default=128,
        help="Gray level below which image pixels are set (default: 128)",
    )
    parser.add_argument(
        "--light-on-dark",
        action="store_true",
        help="Treat light image pixels as set",
    )
    parser.add_argument(
        "--preferences",
        "-p",
        type=Path,
        help="Preferences YAML providing defaults",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Write to this file instead of stdout",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(log_level=args.log_level, context={"app": "generate"})

    try:
        if args.preferences is not None:
            store = PreferencesStore(args.preferences)
            prefs_options, prefs_format, prefs_name = (
                store.options, store.format, store.array_name,
            )
        else:
            defaults = load_preferences()
            prefs_options = defaults.source_code_options.to_options()
            prefs_format = Format.from_key(defaults.format)
            prefs_name = defaults.array_name

        changes = {}
        if args.bit_numbering is not None:
            changes["bit_numbering"] = args.bit_numbering
        if args.invert is not None:
            changes["invert_bits"] = args.invert
        if args.line_spacing is not None:
            changes["include_line_spacing"] = args.line_spacing
        if args.indent is not None:
            changes["indentation"] = args.indent
        options = prefs_options.replace(**changes)
        fmt = Format.from_key(args.format) if args.format else prefs_format
        name = args.name or prefs_name
        push_context(format=fmt.identifier)

        bitmaps = [
            load_bitmap(path, args.threshold, args.light_on_dark)
            for path in args.glyphs
        ]
        if len(bitmaps) == 1:
            source = bitmaps[0]
        else:
            source = Face(glyphs=tuple(bitmaps), first_codepoint=args.first_codepoint)

        text = generate_source(source, options, fmt, name)

        if args.output is not None:
            # atomic writes report failures as RuntimeError
            fs.atomic_write_text(args.output, text)
            logger.info("Wrote %s", args.output)
        else:
            sys.stdout.write(text)
    except (CodegenError, ConfigError, ValueError, OSError, RuntimeError) as exc:
        logger.error("%s", exc)
        return EXIT_INVALID
    return 0


if __name__ == "__main__":
    sys.exit(main())
