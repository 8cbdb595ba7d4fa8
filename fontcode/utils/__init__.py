"""Cross-cutting utilities (lowest dependency layer).

    - Atomic I/O and YAML helpers (fs)
    - Unified logging (logging_config)

No module in utils/ may import from upper layers (glyph, packing,
sourcecode, scheduler, configs, session).

Convenience imports:
    from fontcode.utils import fs
    from fontcode.utils.logging_config import setup_logging, get_logger
"""

from . import fs
from . import logging_config

from .logging_config import get_logger, push_context, setup_logging

__all__ = [
    'fs',
    'logging_config',
    'setup_logging',
    'get_logger',
    'push_context',
]
