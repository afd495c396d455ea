"""Translate Textual key events into engine key events."""

from __future__ import annotations

from textual.events import Key

from ..engine.events import BACKSPACE, ENTER, ESCAPE, KeyEvent

CTRL_PREFIX = "ctrl+"


def to_key_event(event: Key) -> KeyEvent:
    """Convert a Textual Key event to an engine KeyEvent."""
    key = event.key

    # Handle special keys
    if key in ("escape", "ctrl+left_square_bracket"):
        return KeyEvent(ESCAPE)
    if key in ("enter", "return"):
        return KeyEvent(ENTER)
    if key in ("backspace", "ctrl+h"):
        return KeyEvent(BACKSPACE)

    if key.startswith(CTRL_PREFIX):
        rest = key[len(CTRL_PREFIX):]
        shift = rest.startswith("shift+")
        if shift:
            rest = rest[len("shift+"):]
        if len(rest) == 1:
            return KeyEvent(rest, shift=shift, ctrl=True)
        return KeyEvent(key, ctrl=True)

    # Handle character keys
    if event.character and len(event.character) == 1 and event.is_printable:
        return KeyEvent.char(event.character)

    return KeyEvent(key)
