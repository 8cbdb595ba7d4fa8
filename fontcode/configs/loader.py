"""Preferences loader and store.

Loads and validates ``preferences.yaml`` into a ``PreferencesV1`` model.
The generation core never touches the file: a ``PreferencesStore`` loads
once at construction and writes back on every change (atomic replace), and
the core only sees the value snapshots it hands out.

Defaults (no file yet): LSB numbering, no inversion, no line spacing, tab
indentation, C/C++ format, array name ``font``.

Usage::

    from fontcode.configs.loader import PreferencesStore
    store = PreferencesStore()                          # ~/.fontcode/preferences.yaml
    store = PreferencesStore("/tmp/prefs.yaml")         # explicit path
    store.update(options=store.options.replace(invert_bits=True))
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from fontcode.configs.schema import PreferencesV1, SourceCodeOptionsV1
from fontcode.sourcecode.formats import Format
from fontcode.sourcecode.options import SourceCodeOptions
from fontcode.utils import fs

logger = logging.getLogger(__name__)

DEFAULT_PREFERENCES_PATH = Path.home() / ".fontcode" / "preferences.yaml"
SHIPPED_DEFAULTS_PATH = Path(__file__).parent / "preferences.yaml"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when preferences fail to load or validate."""

    pass


# ---------------------------------------------------------------------------
# Load / save
# ---------------------------------------------------------------------------


def load_preferences(path: str | Path | None = None) -> PreferencesV1:
    """Load and validate preferences from YAML.

    Parameters
    ----------
    path : str | Path | None
        Preferences file.  ``None`` loads the defaults shipped alongside
        this module.

    Returns
    -------
    PreferencesV1
        Validated preferences.

    Raises
    ------
    ConfigError
        If the file is not valid YAML or fails schema validation.
    FileNotFoundError
        If *path* does not exist.
    """
    path = SHIPPED_DEFAULTS_PATH if path is None else Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Preferences file not found: {path}")

    logger.info("Loading preferences from %s", path)
    try:
        data: dict[str, Any] | None = fs.load_yaml(path)
    except yaml.YAMLError as exc:
        raise ConfigError(str(exc)) from exc

    if data is None:
        raise ConfigError(f"Empty preferences file: {path}")
    if not isinstance(data, dict):
        raise ConfigError(
            f"Preferences file {path} must hold a mapping, got {type(data).__name__}"
        )

    try:
        return PreferencesV1(**data)
    except ValidationError as exc:
        raise ConfigError(
            f"Preferences validation failed at {path}: {exc}"
        ) from exc


def save_preferences(prefs: PreferencesV1, path: str | Path) -> None:
    """Write *prefs* to *path* atomically.

    Raises
    ------
    ConfigError
        If the file cannot be written.
    """
    try:
        fs.atomic_yaml_dump(prefs.to_dict(), path)
    except RuntimeError as exc:
        raise ConfigError(f"Cannot save preferences: {exc}") from exc
    logger.debug("Saved preferences to %s", path)


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class PreferencesStore:
    """Load-at-construction, save-on-change preferences collaborator.

    Parameters
    ----------
    path : str | Path | None
        Preferences file.  ``None`` uses ``~/.fontcode/preferences.yaml``.
        A missing file starts from the shipped defaults; it is created on
        the first change.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else DEFAULT_PREFERENCES_PATH
        if self.path.exists():
            self._prefs = load_preferences(self.path)
        else:
            logger.info("No preferences at %s, using defaults", self.path)
            self._prefs = load_preferences(SHIPPED_DEFAULTS_PATH)

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    @property
    def preferences(self) -> PreferencesV1:
        return self._prefs.model_copy(deep=True)

    @property
    def options(self) -> SourceCodeOptions:
        return self._prefs.source_code_options.to_options()

    @property
    def format(self) -> Format:
        """Stored format; unknown keys resolve to the first format."""
        return Format.from_key(self._prefs.format)

    @property
    def array_name(self) -> str:
        return self._prefs.array_name

    # ------------------------------------------------------------------
    # Changes
    # ------------------------------------------------------------------

    def update(
        self,
        *,
        options: SourceCodeOptions | None = None,
        format: Format | str | None = None,
        array_name: str | None = None,
    ) -> bool:
        """Apply changes and save immediately when anything changed.

        Returns
        -------
        bool
            ``True`` if the file was written.

        Raises
        ------
        ConfigError
            If the change is invalid or cannot be saved; the store keeps
            its previous values.
        """
        changes: dict[str, Any] = {}
        if options is not None:
            changes["source_code_options"] = SourceCodeOptionsV1.from_options(options)
        if format is not None:
            changes["format"] = Format.from_key(format).identifier
        if array_name is not None:
            changes["array_name"] = array_name

        updated = self._prefs.model_copy(update=changes)
        if updated == self._prefs:
            return False

        try:
            validated = PreferencesV1(**updated.to_dict())
        except ValidationError as exc:
            raise ConfigError(f"Invalid preference change: {exc}") from exc

        save_preferences(validated, self.path)
        self._prefs = validated
        return True
