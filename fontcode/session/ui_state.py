"""UI action gate -- which controls are enabled, which tab is selected.

A pure reducer over high-level input events.  Interface actions switch
tabs; user actions reset or extend the enabled-action set::

    idle          -> {}                                    (+ tab edit)
    loaded face   -> {add glyph, save, close, print,
                      export, tab code}                    (+ tab edit)
    loaded glyph  -> previous actions + {copy}             (+ tab edit)

Generation never depends on this state; it only decides what a front end
shows as enabled.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Union


class InterfaceAction(Enum):
    """Controls a front end can enable or disable."""

    ADD_GLYPH = auto()
    SAVE = auto()
    CLOSE = auto()
    PRINT = auto()
    EXPORT = auto()
    COPY = auto()
    TAB_EDIT = auto()
    TAB_CODE = auto()


class UserAction(Enum):
    """What the user last did to the document."""

    IDLE = auto()
    LOADED_FACE = auto()
    LOADED_GLYPH = auto()


class Tab(Enum):
    EDIT = auto()
    CODE = auto()


InputEvent = Union[InterfaceAction, UserAction]

_FACE_ACTIONS = frozenset(
    {
        InterfaceAction.ADD_GLYPH,
        InterfaceAction.SAVE,
        InterfaceAction.CLOSE,
        InterfaceAction.PRINT,
        InterfaceAction.EXPORT,
        InterfaceAction.TAB_CODE,
    }
)


@dataclass(frozen=True)
class UIState:
    """Enabled actions, last user action and selected tab."""

    actions: frozenset[InterfaceAction] = frozenset()
    last_user_action: UserAction = UserAction.IDLE
    selected_tab: Tab = Tab.EDIT

    def is_enabled(self, action: InterfaceAction) -> bool:
        return action in self.actions


def register_input_event(state: UIState, event: InputEvent) -> UIState:
    """Return the state after *event*; *state* itself is not modified."""
    if isinstance(event, InterfaceAction):
        if event is InterfaceAction.TAB_EDIT:
            return replace(state, selected_tab=Tab.EDIT)
        if event is InterfaceAction.TAB_CODE:
            return replace(state, selected_tab=Tab.CODE)
        return state

    if isinstance(event, UserAction):
        if event is UserAction.IDLE:
            actions: frozenset[InterfaceAction] = frozenset()
        elif event is UserAction.LOADED_FACE:
            actions = _FACE_ACTIONS
        else:
            actions = state.actions | {InterfaceAction.COPY}
        return replace(
            state,
            actions=actions | {InterfaceAction.TAB_EDIT},
            last_user_action=event,
        )

    raise TypeError(f"Unsupported input event: {event!r}")
