"""Tests for the source code session view-model.

Validates that:
    - Option setters persist to the preferences file and regenerate
    - Loading, selecting and closing drive the UI action gate
    - Only the newest generation reaches ``on_source_code_changed``
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, List

import pytest

from fontcode.configs.loader import ConfigError, PreferencesStore
from fontcode.glyph.bitmap import Bitmap, Face
from fontcode.packing.packer import BitNumbering
from fontcode.scheduler.generation import GenerationResult
from fontcode.session.model import SourceCodeSession
from fontcode.session.ui_state import InterfaceAction, Tab, UIState, UserAction
from fontcode.sourcecode.errors import InvalidArrayName
from fontcode.sourcecode.formats import Format
from fontcode.sourcecode.options import Space, Tab as TabIndent

if TYPE_CHECKING:
    from conftest import InlineExecutor, ManualExecutor


class Recorder:
    """Collects every session notification."""

    def __init__(self) -> None:
        self.updating = 0
        self.results: List[GenerationResult] = []
        self.states: List[UIState] = []
        self.glyphs: List[Bitmap] = []

    def attach(self, session: SourceCodeSession) -> None:
        session.on_source_code_updating = self._updating
        session.on_source_code_changed = self.results.append
        session.on_ui_state_changed = self.states.append
        session.on_active_glyph_changed = self.glyphs.append

    def _updating(self) -> None:
        self.updating += 1


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def prefs_path(tmp_path: Path) -> Path:
    return tmp_path / "preferences.yaml"


@pytest.fixture()
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture()
def session(
    prefs_path: Path, executor: ManualExecutor, delivery: InlineExecutor, recorder: Recorder,
) -> SourceCodeSession:
    session = SourceCodeSession(
        PreferencesStore(prefs_path), executor=executor, delivery_executor=delivery,
    )
    recorder.attach(session)
    return session


@pytest.fixture()
def face(letter_t: Bitmap) -> Face:
    return Face(glyphs=(letter_t, Bitmap.empty(5, 4)), first_codepoint=65)


# ---------------------------------------------------------------------------
# Document lifecycle
# ---------------------------------------------------------------------------


class TestDocument:
    def test_nothing_loaded(self, session: SourceCodeSession, executor: ManualExecutor) -> None:
        assert session.face is None
        assert session.reload_source_code() is None
        assert executor.pending == []

    def test_load_face_generates(
        self, session: SourceCodeSession, executor: ManualExecutor,
        recorder: Recorder, face: Face,
    ) -> None:
        session.load_face(face)
        assert recorder.updating == 1
        executor.run_all()
        assert len(recorder.results) == 1
        result = recorder.results[0]
        assert result.ok
        assert "Font face: 2 glyphs from U+0041" in result.text
        assert session.last_result is result

    def test_load_face_ui_state(
        self, session: SourceCodeSession, recorder: Recorder, face: Face,
    ) -> None:
        session.load_face(face)
        state = session.ui_state
        assert state.last_user_action is UserAction.LOADED_FACE
        assert state.is_enabled(InterfaceAction.EXPORT)
        assert not state.is_enabled(InterfaceAction.COPY)
        assert recorder.states[-1] == state

    def test_select_glyph(
        self, session: SourceCodeSession, recorder: Recorder,
        executor: ManualExecutor, face: Face,
    ) -> None:
        session.load_face(face)
        session.set_active_glyph_index(1)
        assert session.active_glyph_index == 1
        assert session.active_glyph == face.glyphs[1]
        assert recorder.glyphs == [face.glyphs[1]]
        assert session.ui_state.is_enabled(InterfaceAction.COPY)
        # Selection alone does not regenerate.
        assert len(executor.pending) == 1

    def test_reselecting_same_glyph_is_silent(
        self, session: SourceCodeSession, recorder: Recorder, face: Face,
    ) -> None:
        session.load_face(face)
        session.set_active_glyph_index(0)
        session.set_active_glyph_index(0)
        assert len(recorder.glyphs) == 1

    @pytest.mark.parametrize("index", [-1, 2])
    def test_select_out_of_range(
        self, session: SourceCodeSession, face: Face, index: int,
    ) -> None:
        session.load_face(face)
        session.set_active_glyph_index(index)
        assert session.active_glyph_index is None

    def test_select_without_face(self, session: SourceCodeSession) -> None:
        session.set_active_glyph_index(0)
        assert session.active_glyph is None

    def test_load_glyph(
        self, session: SourceCodeSession, executor: ManualExecutor,
        recorder: Recorder, letter_t: Bitmap,
    ) -> None:
        session.load_glyph(letter_t, codepoint=84)
        assert session.active_glyph == letter_t
        assert session.ui_state.last_user_action is UserAction.LOADED_GLYPH
        executor.run_all()
        assert "\t// Glyph 0 (U+0054 'T')\n" in recorder.results[-1].text

    def test_edit_active_glyph(
        self, session: SourceCodeSession, executor: ManualExecutor,
        recorder: Recorder, face: Face, letter_t: Bitmap,
    ) -> None:
        session.load_face(face)
        session.set_active_glyph_index(1)
        session.edit_active_glyph(letter_t)
        executor.run_all()
        assert session.face.glyphs[1] == letter_t
        assert recorder.results[-1].text.count("0x1F,") == 2

    def test_edit_requires_selection(
        self, session: SourceCodeSession, face: Face, letter_t: Bitmap,
    ) -> None:
        session.load_face(face)
        with pytest.raises(RuntimeError):
            session.edit_active_glyph(letter_t)

    def test_edit_rejects_size_change(
        self, session: SourceCodeSession, letter_t: Bitmap, checker: Bitmap,
    ) -> None:
        session.load_glyph(letter_t)
        with pytest.raises(ValueError):
            session.edit_active_glyph(checker)

    def test_close(
        self, session: SourceCodeSession, executor: ManualExecutor, face: Face,
    ) -> None:
        session.load_face(face)
        session.close()
        assert session.face is None
        assert session.ui_state.actions == {InterfaceAction.TAB_EDIT}
        assert session.reload_source_code() is None
        assert len(executor.pending) == 1


# ---------------------------------------------------------------------------
# Option setters
# ---------------------------------------------------------------------------


class TestOptionSetters:
    def test_invert_persists_and_regenerates(
        self, session: SourceCodeSession, executor: ManualExecutor,
        recorder: Recorder, prefs_path: Path, face: Face,
    ) -> None:
        session.load_face(face)
        session.set_invert_bits(True)
        assert session.options.invert_bits is True
        assert PreferencesStore(prefs_path).options.invert_bits is True
        executor.run_all()
        # Request 1 finished first and was delivered, then request 2.
        assert [r.sequence for r in recorder.results] == [1, 2]
        assert "inverted: yes" in recorder.results[-1].text

    def test_msb(self, session: SourceCodeSession, prefs_path: Path) -> None:
        session.set_msb_enabled(True)
        assert session.options.bit_numbering is BitNumbering.MSB
        session.set_msb_enabled(False)
        assert PreferencesStore(prefs_path).options.bit_numbering is BitNumbering.LSB

    def test_line_spacing(self, session: SourceCodeSession, prefs_path: Path) -> None:
        session.set_include_line_spacing(True)
        assert PreferencesStore(prefs_path).options.include_line_spacing is True

    def test_failed_save_keeps_options(
        self, session: SourceCodeSession, executor: ManualExecutor,
        prefs_path: Path, face: Face,
    ) -> None:
        session.load_face(face)
        executor.run_all()
        prefs_path.mkdir()
        (prefs_path / "occupied").write_text("x")
        with pytest.raises(ConfigError):
            session.set_invert_bits(True)
        with pytest.raises(ConfigError):
            session.set_output_format(Format.ARDUINO)
        with pytest.raises(ConfigError):
            session.set_array_name("glyphs")
        assert session.options.invert_bits is False
        assert session.output_format is Format.C
        assert session.array_name == "font"
        assert executor.pending == []

    def test_setters_without_face_do_not_generate(
        self, session: SourceCodeSession, executor: ManualExecutor,
    ) -> None:
        session.set_invert_bits(True)
        session.set_output_format("arduino")
        assert executor.pending == []

    def test_only_latest_delivered(
        self, session: SourceCodeSession, executor: ManualExecutor,
        recorder: Recorder, face: Face,
    ) -> None:
        session.load_face(face)
        session.set_msb_enabled(True)
        session.set_invert_bits(True)
        session.set_output_format(Format.PYTHON_BYTES)
        executor.run(3)
        executor.run_all()
        assert [r.sequence for r in recorder.results] == [4]
        assert recorder.updating == 4
        assert recorder.results[0].text.startswith("#\n# Font face")


class TestIndentation:
    def test_styles(self, session: SourceCodeSession) -> None:
        labels = [label for _, label in session.indentation_styles()]
        assert labels == ["Tab"] + ["1 Space"] + [f"{n} Spaces" for n in range(2, 9)]

    def test_set_by_label(self, session: SourceCodeSession, prefs_path: Path) -> None:
        session.set_indentation("4 Spaces")
        assert session.options.indentation == Space(4)
        assert session.indentation_caption() == "4 Spaces"
        assert PreferencesStore(prefs_path).options.indentation == Space(4)

    def test_unknown_label_ignored(self, session: SourceCodeSession, prefs_path: Path) -> None:
        session.set_indentation("Two Tabs")
        assert session.options.indentation == TabIndent()
        assert session.indentation_caption() == "Tab"
        assert not prefs_path.exists()


class TestFormatAndName:
    def test_formats_listing(self) -> None:
        assert SourceCodeSession.formats() == {
            "c": "C/C++",
            "arduino": "Arduino",
            "python_list": "Python List",
            "python_bytes": "Python Bytes",
        }

    def test_set_format_by_label(self, session: SourceCodeSession, prefs_path: Path) -> None:
        session.set_output_format("Arduino")
        assert session.output_format is Format.ARDUINO
        assert PreferencesStore(prefs_path).format is Format.ARDUINO

    def test_unknown_format_falls_back(self, session: SourceCodeSession) -> None:
        session.set_output_format("Arduino")
        session.set_output_format("Rust")
        assert session.output_format is Format.C

    def test_array_name_persisted(
        self, session: SourceCodeSession, executor: ManualExecutor,
        recorder: Recorder, prefs_path: Path, face: Face,
    ) -> None:
        session.load_face(face)
        session.set_array_name("glyphs")
        executor.run_all()
        assert PreferencesStore(prefs_path).array_name == "glyphs"
        assert "const unsigned char glyphs[8]" in recorder.results[-1].text

    def test_invalid_name_delivers_error(
        self, session: SourceCodeSession, executor: ManualExecutor,
        recorder: Recorder, face: Face,
    ) -> None:
        session.load_face(face)
        session.set_array_name("8x8")
        executor.run_all()
        result = recorder.results[-1]
        assert not result.ok
        assert isinstance(result.error, InvalidArrayName)

    def test_blank_name_not_persisted(
        self, session: SourceCodeSession, prefs_path: Path,
    ) -> None:
        session.set_array_name("  ")
        assert session.array_name == "  "
        assert not prefs_path.exists()

    def test_preferences_restored(
        self, prefs_path: Path, executor: ManualExecutor, delivery: InlineExecutor,
    ) -> None:
        first = SourceCodeSession(
            PreferencesStore(prefs_path), executor=executor, delivery_executor=delivery,
        )
        first.set_output_format("python_list")
        first.set_indentation("2 Spaces")
        first.set_array_name("glyphs")

        second = SourceCodeSession(
            PreferencesStore(prefs_path), executor=executor, delivery_executor=delivery,
        )
        assert second.output_format is Format.PYTHON_LIST
        assert second.options.indentation == Space(2)
        assert second.array_name == "glyphs"


class TestTabs:
    def test_switch_tabs(self, session: SourceCodeSession, recorder: Recorder) -> None:
        session.show_code_tab()
        assert session.ui_state.selected_tab is Tab.CODE
        session.show_edit_tab()
        assert session.ui_state.selected_tab is Tab.EDIT
        assert len(recorder.states) == 2

    def test_unchanged_state_not_notified(
        self, session: SourceCodeSession, recorder: Recorder,
    ) -> None:
        session.show_edit_tab()
        assert recorder.states == []
