"""Contract between the engine and the page rendering surface.

The engine never renders anything itself. Everything it does to a page goes
through a BrowsingSurface, and the interactive elements it labels are opaque
ElementHandle objects owned by that surface.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .events import KeyEvent


class Axis(Enum):
    """Scroll axis."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass(frozen=True)
class Point:
    x: int
    y: int


@dataclass(frozen=True)
class Rect:
    """Element geometry in document coordinates."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def has_area(self) -> bool:
        return self.width > 0 and self.height > 0

    def center(self) -> Point:
        return Point(self.x + self.width // 2, self.y + self.height // 2)

    def intersects(self, other: Rect) -> bool:
        """Check if two rectangles overlap (touching edges do not count)."""
        return (
            self.x < other.right
            and other.x < self.right
            and self.y < other.bottom
            and other.y < self.bottom
        )


@dataclass(frozen=True)
class FindFlags:
    """Options for a text search on the page."""

    backward: bool = False
    wrap_around: bool = True
    highlight_all: bool = True

    def without_highlight(self) -> FindFlags:
        return replace(self, highlight_all=False)

    def reversed(self) -> FindFlags:
        return replace(self, backward=not self.backward)


@runtime_checkable
class ElementHandle(Protocol):
    """An interactive element (link or form field) on the current page."""

    def geometry(self) -> Rect: ...

    def tag_kind(self) -> str:
        """Upper-case tag name, e.g. "A", "INPUT", "TEXTAREA"."""
        ...

    def attribute(self, name: str) -> str:
        """Attribute value, or an empty string if the attribute is missing."""
        ...

    def text_content(self) -> str: ...


@runtime_checkable
class BrowsingSurface(Protocol):
    """Everything the engine needs from the page renderer."""

    # Navigation
    def load(self, url: str) -> None: ...

    def reload(self) -> None: ...

    def history_back(self) -> None: ...

    def history_forward(self) -> None: ...

    def current_url(self) -> str: ...

    # Viewport
    def viewport_size(self) -> tuple[int, int]: ...

    def scroll_offset(self) -> tuple[int, int]: ...

    def scroll(self, dx: int, dy: int) -> None: ...

    def set_scroll_offset(self, axis: Axis, value: int) -> None: ...

    def scroll_extent(self, axis: Axis) -> int:
        """Maximum scroll offset along an axis."""
        ...

    # Search
    def find_text(self, text: str, flags: FindFlags) -> None: ...

    # Document introspection
    def enumerate_elements(self, selector: str) -> list[ElementHandle]: ...

    def insert_marker(self, handle: ElementHandle, label: str) -> None: ...

    def remove_all_markers(self) -> None: ...

    def set_marker_visible(self, handle: ElementHandle, visible: bool) -> None: ...

    def click_at(self, point: Point) -> None: ...

    def forward_key(self, event: KeyEvent) -> None:
        """Hand a key to the page's own text editing (insert mode)."""
        ...

    # Windows
    def open_new_window(self, url: str) -> None: ...


def viewport_rect(surface: BrowsingSurface) -> Rect:
    """The visible part of the document in document coordinates."""
    x, y = surface.scroll_offset()
    width, height = surface.viewport_size()
    return Rect(x, y, width, height)


def is_visible(element: ElementHandle, viewport: Rect) -> bool:
    """Check if an element is rendered and at least partly inside the viewport."""
    rect = element.geometry()
    return rect.has_area and rect.intersects(viewport)


def is_link(element: ElementHandle) -> bool:
    return element.tag_kind() == "A"


def is_text_field(element: ElementHandle) -> bool:
    """Single-line text inputs and text areas switch the engine to insert mode."""
    tag = element.tag_kind()
    if tag == "TEXTAREA":
        return True
    return tag == "INPUT" and element.attribute("type").lower() in ("", "text")
