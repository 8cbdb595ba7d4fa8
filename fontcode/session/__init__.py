"""
Session module.

View-model for an interactive front end: persisted preferences, background
generation and the enabled-action gate.
"""

from fontcode.session.model import SourceCodeSession
from fontcode.session.ui_state import (
    InterfaceAction,
    Tab,
    UIState,
    UserAction,
    register_input_event,
)

__all__ = [
    "InterfaceAction",
    "SourceCodeSession",
    "Tab",
    "UIState",
    "UserAction",
    "register_input_event",
]
