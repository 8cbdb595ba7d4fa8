"""Source code session -- the view-model behind a glyph-to-code front end.

Owns the current face, the persisted output preferences, the generation
scheduler and the UI action state.  Every option setter persists the change
(save-on-change) and regenerates; loading or editing glyphs regenerates
too.  Generation runs in the background and results arrive through
``on_source_code_changed`` on the scheduler's delivery thread; superseded
results never arrive.

Callbacks:
    on_source_code_updating()            a generation was submitted
    on_source_code_changed(result)       newest result (text or error)
    on_ui_state_changed(state)           enabled actions / tab changed
    on_active_glyph_changed(bitmap)      a different glyph was selected
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor
from typing import Callable

from fontcode.configs.loader import PreferencesStore
from fontcode.glyph.bitmap import Bitmap, Face
from fontcode.packing.packer import BitNumbering
from fontcode.scheduler.generation import (
    GenerationRequest,
    GenerationResult,
    GenerationScheduler,
)
from fontcode.session.ui_state import (
    InputEvent,
    InterfaceAction,
    UIState,
    UserAction,
    register_input_event,
)
from fontcode.sourcecode.formats import Format
from fontcode.sourcecode.generator import GlyphSource
from fontcode.sourcecode.options import (
    IndentationStyle,
    SourceCodeOptions,
    indentation_styles,
)

logger = logging.getLogger(__name__)


class SourceCodeSession:
    """Glyph document state plus background source generation.

    Parameters
    ----------
    store : PreferencesStore
        Persisted options, format and array name.
    executor : Executor, optional
        Worker pool for the scheduler; a private thread pool by default.
    delivery_executor : Executor, optional
        Runs result deliveries one at a time; a private single-thread pool
        by default.
    on_source_code_updating, on_source_code_changed, on_ui_state_changed,
    on_active_glyph_changed : callable, optional
        Notification hooks, see module docstring.
    """

    def __init__(
        self,
        store: PreferencesStore,
        executor: Executor | None = None,
        delivery_executor: Executor | None = None,
        on_source_code_updating: Callable[[], None] | None = None,
        on_source_code_changed: Callable[[GenerationResult], None] | None = None,
        on_ui_state_changed: Callable[[UIState], None] | None = None,
        on_active_glyph_changed: Callable[[Bitmap], None] | None = None,
    ) -> None:
        self._store = store
        self._options = store.options
        self._format = store.format
        self._array_name = store.array_name

        self._face: Face | None = None
        self._active_index: int | None = None
        self._ui_state = UIState()
        self._last_result: GenerationResult | None = None

        self.on_source_code_updating = on_source_code_updating
        self.on_source_code_changed = on_source_code_changed
        self.on_ui_state_changed = on_ui_state_changed
        self.on_active_glyph_changed = on_active_glyph_changed

        self._scheduler = GenerationScheduler(
            on_result=self._deliver,
            on_started=self._started,
            executor=executor,
            delivery_executor=delivery_executor,
        )
        logger.debug("Output format: %s", self._format.identifier)

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def options(self) -> SourceCodeOptions:
        return self._options

    @property
    def output_format(self) -> Format:
        return self._format

    @property
    def array_name(self) -> str:
        return self._array_name

    @property
    def face(self) -> Face | None:
        return self._face

    @property
    def active_glyph_index(self) -> int | None:
        return self._active_index

    @property
    def active_glyph(self) -> Bitmap | None:
        if self._face is None or self._active_index is None:
            return None
        return self._face.glyphs[self._active_index]

    @property
    def ui_state(self) -> UIState:
        return self._ui_state

    @property
    def last_result(self) -> GenerationResult | None:
        """Most recent delivered result, if any."""
        return self._last_result

    @property
    def scheduler(self) -> GenerationScheduler:
        return self._scheduler

    @staticmethod
    def formats() -> dict[str, str]:
        """Format identifiers mapped to labels, in registration order."""
        return {fmt.identifier: fmt.label for fmt in Format}

    @staticmethod
    def indentation_styles() -> list[tuple[IndentationStyle, str]]:
        """Selectable indentation styles with their labels."""
        return [(style, style.label) for style in indentation_styles()]

    def indentation_caption(self) -> str:
        """Label of the current indentation style."""
        return self._options.indentation.label

    # ------------------------------------------------------------------
    # UI state
    # ------------------------------------------------------------------

    def register_input_event(self, event: InputEvent) -> None:
        state = register_input_event(self._ui_state, event)
        if state != self._ui_state:
            self._ui_state = state
            if self.on_ui_state_changed is not None:
                self.on_ui_state_changed(state)

    # ------------------------------------------------------------------
    # Document
    # ------------------------------------------------------------------

    def load_face(self, face: Face) -> None:
        """Make *face* the exported document and regenerate."""
        self._face = face
        self._active_index = None
        logger.info(
            "Face loaded: %d glyphs of %dx%d px",
            len(face), *face.glyph_size,
        )
        self.register_input_event(UserAction.LOADED_FACE)
        self.reload_source_code()

    def load_glyph(self, bitmap: Bitmap, codepoint: int = 32) -> None:
        """Load a lone glyph as a one-glyph face and select it."""
        self.load_face(Face(glyphs=(bitmap,), first_codepoint=codepoint))
        self.set_active_glyph_index(0)

    def set_active_glyph_index(self, index: int) -> None:
        """Select glyph *index* of the loaded face (selection only)."""
        if self._face is None:
            logger.error("Cannot select glyph %d: no face loaded", index)
            return
        if self._active_index == index:
            return
        if not 0 <= index < len(self._face):
            logger.error(
                "Glyph index %d out of range [0, %d)", index, len(self._face)
            )
            return
        self._active_index = index
        self.register_input_event(UserAction.LOADED_GLYPH)
        if self.on_active_glyph_changed is not None:
            self.on_active_glyph_changed(self._face.glyphs[index])

    def edit_active_glyph(self, bitmap: Bitmap) -> None:
        """Replace the selected glyph's pixels and regenerate.

        Raises
        ------
        RuntimeError
            If no glyph is selected.
        ValueError
            If *bitmap* does not match the face's glyph size.
        """
        if self._face is None or self._active_index is None:
            raise RuntimeError("No active glyph to edit")
        glyphs = list(self._face.glyphs)
        glyphs[self._active_index] = bitmap
        self._face = Face(glyphs=tuple(glyphs), first_codepoint=self._face.first_codepoint)
        self.reload_source_code()

    def close(self) -> None:
        """Drop the document; pending results still arrive but nothing new is queued."""
        self._face = None
        self._active_index = None
        self.register_input_event(UserAction.IDLE)

    def shutdown(self) -> None:
        self._scheduler.shutdown(wait=True)

    # ------------------------------------------------------------------
    # Option setters (persist, then regenerate)
    # ------------------------------------------------------------------

    def set_invert_bits(self, enabled: bool) -> None:
        self._apply_options(self._options.replace(invert_bits=enabled))

    def set_msb_enabled(self, enabled: bool) -> None:
        numbering = BitNumbering.MSB if enabled else BitNumbering.LSB
        self._apply_options(self._options.replace(bit_numbering=numbering))

    def set_include_line_spacing(self, enabled: bool) -> None:
        self._apply_options(self._options.replace(include_line_spacing=enabled))

    def set_indentation(self, label: str) -> None:
        """Select an indentation style by its label; unknown labels are ignored."""
        for style, style_label in self.indentation_styles():
            if style_label == label:
                self._apply_options(self._options.replace(indentation=style))
                return
        logger.debug("Ignoring unknown indentation label %r", label)

    def set_output_format(self, key_or_label: Format | str) -> None:
        """Select a format by member, identifier or label.

        Unknown values fall back to the first registered format.
        """
        fmt = Format.from_key(key_or_label)
        self._store.update(format=fmt)
        self._format = fmt
        self.reload_source_code()

    def set_array_name(self, name: str) -> None:
        """Rename the emitted array.

        Invalid identifiers are not rejected here; the next generation
        delivers an ``InvalidArrayName`` error instead.
        """
        if name.strip():
            self._store.update(array_name=name)
        self._array_name = name
        self.reload_source_code()

    def _apply_options(self, options: SourceCodeOptions) -> None:
        self._store.update(options=options)
        self._options = options
        self.reload_source_code()

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    @property
    def source(self) -> GlyphSource | None:
        """What the next generation exports: the whole loaded face."""
        return self._face

    def reload_source_code(self) -> int | None:
        """Submit a generation for the current state.

        Returns
        -------
        int | None
            Sequence number, or ``None`` when there is nothing to export.
        """
        source = self.source
        if source is None:
            logger.debug("No face loaded, skipping source generation")
            return None
        return self._scheduler.submit(
            source, self._options, self._format, self._array_name,
        )

    def _started(self, request: GenerationRequest) -> None:
        if self.on_source_code_updating is not None:
            self.on_source_code_updating()

    def _deliver(self, result: GenerationResult) -> None:
        self._last_result = result
        if not result.ok:
            logger.warning("Source generation failed: %s", result.error)
        if self.on_source_code_changed is not None:
            self.on_source_code_changed(result)

    # ------------------------------------------------------------------
    # Tab switching
    # ------------------------------------------------------------------

    def show_edit_tab(self) -> None:
        self.register_input_event(InterfaceAction.TAB_EDIT)

    def show_code_tab(self) -> None:
        self.register_input_event(InterfaceAction.TAB_CODE)
