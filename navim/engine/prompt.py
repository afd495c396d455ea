"""Command-line prompt handler.

Holds the text typed in command mode for the open, window-open and search
prompts, and reports what should happen when the prompt is submitted.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable


class PromptKind(Enum):
    """Prompts that put the engine in command mode."""

    OPEN = "open"
    WINDOW_OPEN = "windowopen"
    SEARCH_FORWARD = "Find forward"
    SEARCH_BACKWARD = "Find backward"

    @property
    def label(self) -> str:
        return f"{self.value}:"

    @property
    def is_search(self) -> bool:
        return self in (PromptKind.SEARCH_FORWARD, PromptKind.SEARCH_BACKWARD)


@dataclass
class PromptResult:
    """Result of submitting a prompt."""

    kind: PromptKind
    text: str


class PromptHandler:
    """Edits the command-line text while the engine is in command mode."""

    def __init__(self) -> None:
        self._kind: PromptKind | None = None
        self._text: str = ""
        self._on_edit: Callable[[PromptKind, str], None] | None = None

    @property
    def kind(self) -> PromptKind | None:
        """The open prompt, or None when hidden."""
        return self._kind

    @property
    def text(self) -> str:
        return self._text

    @property
    def active(self) -> bool:
        return self._kind is not None

    def set_edit_callback(self, callback: Callable[[PromptKind, str], None]) -> None:
        """Set callback fired after every text edit (used for incremental search)."""
        self._on_edit = callback

    def start(self, kind: PromptKind, text: str = "") -> None:
        """Show a prompt, optionally pre-filled."""
        self._kind = kind
        self._text = text

    def add_char(self, char: str) -> None:
        if len(char) == 1:
            self._text += char
            self._edited()

    def backspace(self) -> bool:
        """Remove last character. Returns False if there was nothing to remove."""
        if self._text:
            self._text = self._text[:-1]
            self._edited()
            return True
        return False

    def set_text(self, text: str) -> None:
        """Replace the whole text (hosts with their own input widget)."""
        if text != self._text:
            self._text = text
            self._edited()

    def cancel(self) -> None:
        self._kind = None
        self._text = ""

    def submit(self) -> PromptResult | None:
        """Close the prompt and return what was typed."""
        if self._kind is None:
            return None
        result = PromptResult(kind=self._kind, text=self._text)
        self.cancel()
        return result

    def _edited(self) -> None:
        if self._on_edit and self._kind is not None:
            self._on_edit(self._kind, self._text)
