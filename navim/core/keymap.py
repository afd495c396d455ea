"""Keybinding configuration for navim.

Defines every browsing-mode key binding as data:
- Sequence bindings (multi-char commands like gg, go, ZZ) resolved by exact match
- Control bindings (single chars pressed with Ctrl) executed immediately

A BindingTable is an immutable value. It is built once at startup (defaults,
optionally overlaid with a custom keymap file) and handed to the engine.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


class Action(Enum):
    """Parameterless operations a binding can trigger."""

    # Scrolling
    SCROLL_LEFT = "scroll_left"
    SCROLL_RIGHT = "scroll_right"
    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"
    SCROLL_TO_TOP = "scroll_to_top"
    SCROLL_TO_BOTTOM = "scroll_to_bottom"
    SCROLL_PAGE_UP = "scroll_page_up"
    SCROLL_PAGE_DOWN = "scroll_page_down"
    SCROLL_HALF_PAGE_UP = "scroll_half_page_up"
    SCROLL_HALF_PAGE_DOWN = "scroll_half_page_down"

    # History
    HISTORY_BACK = "history_back"
    HISTORY_FORWARD = "history_forward"
    RELOAD = "reload"

    # Prompts
    OPEN = "open"
    OPEN_WITH_CURRENT_URL = "open_with_current_url"
    WINDOW_OPEN = "window_open"
    SEARCH_FORWARD = "search_forward"
    SEARCH_BACKWARD = "search_backward"
    FIND_NEXT = "find_next"
    FIND_PREVIOUS = "find_previous"

    # Modes
    INSERT_MODE = "insert_mode"
    FOLLOW = "follow"
    FOLLOW_NEW_WINDOW = "follow_new_window"
    FOLLOW_SAME_WINDOW = "follow_same_window"
    FOCUS_NEXT_FIELD = "focus_next_field"

    QUIT = "quit"

    @classmethod
    def from_name(cls, name: str) -> Action:
        """Look up an action by its string value (e.g. "scroll_down")."""
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unknown action: {name}") from None


@dataclass(frozen=True)
class Binding:
    """A key sequence bound to an action."""

    keys: str
    action: Action
    description: str = ""


DEFAULT_BINDINGS: tuple[Binding, ...] = (
    # History
    Binding("b", Action.HISTORY_BACK, "Back"),
    Binding("é", Action.HISTORY_FORWARD, "Forward"),
    Binding("e", Action.RELOAD, "Reload"),
    # Scrolling (bépo layout: c/t/s/r in place of h/j/k/l)
    Binding("c", Action.SCROLL_LEFT, "Scroll left"),
    Binding("r", Action.SCROLL_RIGHT, "Scroll right"),
    Binding("s", Action.SCROLL_UP, "Scroll up"),
    Binding("t", Action.SCROLL_DOWN, "Scroll down"),
    Binding("G", Action.SCROLL_TO_BOTTOM, "Bottom of page"),
    Binding("gg", Action.SCROLL_TO_TOP, "Top of page"),
    # Prompts
    Binding("o", Action.OPEN, "Open URL"),
    Binding("O", Action.WINDOW_OPEN, "Open URL in new window"),
    Binding("go", Action.OPEN_WITH_CURRENT_URL, "Edit current URL"),
    Binding("/", Action.SEARCH_FORWARD, "Find forward"),
    Binding("?", Action.SEARCH_BACKWARD, "Find backward"),
    Binding("n", Action.FIND_NEXT, "Next match"),
    Binding("N", Action.FIND_PREVIOUS, "Previous match"),
    # Modes
    Binding("i", Action.INSERT_MODE, "Insert mode"),
    Binding("f", Action.FOLLOW, "Follow link"),
    Binding("F", Action.FOLLOW_NEW_WINDOW, "Follow link in new window"),
    Binding("a", Action.FOLLOW_SAME_WINDOW, "Follow link in same window"),
    Binding("gi", Action.FOCUS_NEXT_FIELD, "Focus next text field"),
    Binding("ZZ", Action.QUIT, "Quit"),
)

DEFAULT_CONTROL_BINDINGS: tuple[Binding, ...] = (
    Binding("b", Action.SCROLL_PAGE_UP, "Page up"),
    Binding("d", Action.SCROLL_HALF_PAGE_DOWN, "Half page down"),
    Binding("f", Action.SCROLL_PAGE_DOWN, "Page down"),
    Binding("u", Action.SCROLL_HALF_PAGE_UP, "Half page up"),
)


def _freeze(bindings: Iterable[Binding]) -> Mapping[str, Binding]:
    return MappingProxyType({binding.keys: binding for binding in bindings})


@dataclass(frozen=True)
class BindingTable:
    """Immutable lookup table for sequence and control bindings."""

    bindings: Mapping[str, Binding] = field(default_factory=lambda: _freeze(DEFAULT_BINDINGS))
    control_bindings: Mapping[str, Binding] = field(
        default_factory=lambda: _freeze(DEFAULT_CONTROL_BINDINGS)
    )

    def __post_init__(self) -> None:
        for keys in self.bindings:
            if not keys:
                raise ValueError("Binding key sequence must not be empty")
        for key in self.control_bindings:
            if len(key) != 1:
                raise ValueError(f"Control binding must be a single character: {key!r}")

    @classmethod
    def from_bindings(
        cls,
        bindings: Iterable[Binding],
        control_bindings: Iterable[Binding],
    ) -> BindingTable:
        """Build a table from binding sequences (later entries win)."""
        return cls(bindings=_freeze(bindings), control_bindings=_freeze(control_bindings))

    def lookup(self, sequence: str) -> Action | None:
        """Action bound to exactly this key sequence."""
        binding = self.bindings.get(sequence)
        return binding.action if binding else None

    def lookup_control(self, char: str) -> Action | None:
        """Action bound to Ctrl+char."""
        binding = self.control_bindings.get(char)
        return binding.action if binding else None

    def keys_for(self, action: Action) -> list[str]:
        """All key sequences (control ones as ctrl+x) bound to an action."""
        keys = [b.keys for b in self.bindings.values() if b.action == action]
        keys.extend(f"ctrl+{b.keys}" for b in self.control_bindings.values() if b.action == action)
        return keys

    def overlay(
        self,
        bindings: Iterable[Binding] = (),
        control_bindings: Iterable[Binding] = (),
    ) -> BindingTable:
        """Return a new table with the given bindings added or replaced."""
        return BindingTable.from_bindings(
            [*self.bindings.values(), *bindings],
            [*self.control_bindings.values(), *control_bindings],
        )


def default_binding_table() -> BindingTable:
    """The built-in browsing keymap."""
    return BindingTable()
