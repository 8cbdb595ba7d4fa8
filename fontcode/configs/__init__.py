"""Preferences loading, validation and persistence."""

from fontcode.configs.loader import (
    DEFAULT_PREFERENCES_PATH,
    ConfigError,
    PreferencesStore,
    load_preferences,
    save_preferences,
)
from fontcode.configs.schema import IndentationV1, PreferencesV1, SourceCodeOptionsV1

__all__ = [
    "ConfigError",
    "DEFAULT_PREFERENCES_PATH",
    "IndentationV1",
    "PreferencesStore",
    "PreferencesV1",
    "SourceCodeOptionsV1",
    "load_preferences",
    "save_preferences",
]
