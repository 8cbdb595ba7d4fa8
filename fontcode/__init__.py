"""
fontcode: glyph bitmaps to source code.

Packs font glyph bitmaps into bytes and renders them as C/C++, Arduino or
Python source, regenerating asynchronously whenever the glyph or the output
options change.

Subpackages:
    glyph: Bitmap and Face value types, bitmap loaders
    packing: bit numbering, inversion and byte packing
    sourcecode: output options, formats and the source emitter
    scheduler: supersede-on-change background generation
    configs: persisted preferences (YAML, pydantic schema)
    session: view-model wiring preferences, scheduler and UI action state
    utils: logging and atomic filesystem helpers
"""

__version__ = "0.1.0"

__all__ = ["glyph", "packing", "sourcecode", "scheduler", "configs", "session", "utils"]
