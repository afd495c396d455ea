"""Events delivered to the engine.

Key presses come from the host toolkit; the remaining events are page
notifications reported by the browsing surface. All of them enter the
engine through ModalEngine.handle_event.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

ESCAPE = "escape"
ENTER = "enter"
BACKSPACE = "backspace"


@dataclass(frozen=True)
class KeyEvent:
    """A key press.

    key is either a single character ("g", "G", "/", "é") or a named key
    ("escape", "enter", "backspace", "tab", "up", ...). Letters may arrive in
    either case; the shift flag decides which case the engine uses.
    """

    key: str
    shift: bool = False
    ctrl: bool = False

    @property
    def is_char(self) -> bool:
        return len(self.key) == 1 and self.key.isprintable()

    @classmethod
    def char(cls, char: str, ctrl: bool = False) -> KeyEvent:
        """Build the event for typing a character, inferring shift from its case."""
        return cls(key=char, shift=char.isupper(), ctrl=ctrl)


@dataclass(frozen=True)
class TitleChanged:
    title: str


@dataclass(frozen=True)
class UrlChanged:
    url: str


@dataclass(frozen=True)
class LoadStarted:
    pass


@dataclass(frozen=True)
class LoadProgress:
    percent: int


@dataclass(frozen=True)
class LoadFinished:
    ok: bool = True


@dataclass(frozen=True)
class LinkHovered:
    """Mouse moved over a link; an empty url means it left the link."""

    url: str


SurfaceEvent = Union[TitleChanged, UrlChanged, LoadStarted, LoadProgress, LoadFinished, LinkHovered]
Event = Union[KeyEvent, SurfaceEvent]
