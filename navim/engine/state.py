"""Engine state management.

Tracks the current mode, the pending command buffer, the live follow session
and the last search.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

from .surface import FindFlags

if TYPE_CHECKING:
    from .surface import ElementHandle


class Mode(Enum):
    """Browsing modes."""

    NORMAL = "NORMAL"
    INSERT = "INSERT"
    COMMAND = "COMMAND"
    FOLLOW = "FOLLOW"


class FollowVariant(Enum):
    """What happens to the element picked in follow mode."""

    DEFAULT = auto()     # Click it
    NEW_WINDOW = auto()  # Links open in a new window
    SAME_WINDOW = auto()  # Links load in this window


FOLLOW_LABELS = {
    FollowVariant.DEFAULT: "follow",
    FollowVariant.NEW_WINDOW: "windowfollow",
    FollowVariant.SAME_WINDOW: "samefollow",
}


@dataclass
class SearchState:
    """Last search string and the flags it runs with."""

    text: str = ""
    flags: FindFlags = field(default_factory=FindFlags)

    def set_direction(self, backward: bool) -> None:
        self.flags = FindFlags(
            backward=backward,
            wrap_around=self.flags.wrap_around,
            highlight_all=self.flags.highlight_all,
        )


@dataclass
class FollowSession:
    """Labels drawn for one trip through follow mode."""

    variant: FollowVariant = FollowVariant.DEFAULT
    new_window: bool = False
    mapping: dict[str, ElementHandle] = field(default_factory=dict)

    def opens_new_window(self) -> bool:
        return self.variant == FollowVariant.NEW_WINDOW or self.new_window

    def matching(self, prefix: str) -> list[str]:
        return [label for label in self.mapping if label.startswith(prefix)]


@dataclass
class PageStatus:
    """What the surface last reported about the page."""

    title: str = ""
    url: str = ""
    hovered_link: str = ""
    progress: int = 0
    loading: bool = False

    @property
    def display_url(self) -> str:
        return self.hovered_link or self.url


@dataclass
class EngineState:
    """All mutable engine state for one window."""

    mode: Mode = Mode.NORMAL

    # Keys typed since the last reset (normal and follow mode)
    command_buffer: str = ""

    follow: FollowSession | None = None
    search: SearchState = field(default_factory=SearchState)
    page: PageStatus = field(default_factory=PageStatus)

    # Position of the next field for focus-next-field
    field_index: int = 0

    @property
    def follow_variant(self) -> FollowVariant | None:
        return self.follow.variant if self.follow else None

    def enter_mode(self, mode: Mode) -> None:
        """Switch mode; every mode but insert starts with an empty buffer."""
        self.mode = mode
        if mode != Mode.INSERT:
            self.command_buffer = ""
        if mode != Mode.FOLLOW:
            self.follow = None
        if mode == Mode.NORMAL:
            self.field_index = 0

    def append_key(self, char: str) -> None:
        self.command_buffer += char

    def backspace(self) -> None:
        self.command_buffer = self.command_buffer[:-1]

    def clear_buffer(self) -> None:
        self.command_buffer = ""

    def is_follow(self) -> bool:
        return self.mode == Mode.FOLLOW
