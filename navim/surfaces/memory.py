"""In-memory browsing surface.

Models pages as a flat list of positioned elements. It keeps real history,
scroll offsets, markers, focus and text search bookkeeping, which is enough
to drive the engine without a rendering engine: the test suite and the
--mock profiles of the CLI run on it.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable

from ..core.urls import resolve_href
from ..engine.events import (
    BACKSPACE,
    KeyEvent,
    LoadFinished,
    LoadProgress,
    LoadStarted,
    SurfaceEvent,
    TitleChanged,
    UrlChanged,
)
from ..engine.surface import Axis, ElementHandle, FindFlags, Point, Rect, is_link, is_text_field

logger = logging.getLogger(__name__)

DEFAULT_VIEWPORT = (800, 600)

_SELECTOR_PART = re.compile(r'^(?P<tag>[a-zA-Z][\w-]*)(?:\[(?P<attr>[\w-]+)(?:="(?P<value>[^"]*)")?\])?$')


@dataclass(eq=False)
class MemoryElement:
    """A link or form field on a MemoryPage."""

    tag: str
    rect: Rect
    text: str = ""
    attributes: dict[str, str] = field(default_factory=dict)
    value: str = ""

    def geometry(self) -> Rect:
        return self.rect

    def tag_kind(self) -> str:
        return self.tag.upper()

    def attribute(self, name: str) -> str:
        return self.attributes.get(name, "")

    def text_content(self) -> str:
        return self.text


@dataclass
class MemoryPage:
    """A document: title, body text and interactive elements in document order."""

    url: str
    title: str = ""
    body: str = ""
    elements: list[MemoryElement] = field(default_factory=list)
    width: int = DEFAULT_VIEWPORT[0]
    height: int = DEFAULT_VIEWPORT[1]


@dataclass
class Marker:
    label: str
    visible: bool = True


def matches_selector(element: ElementHandle, selector: str) -> bool:
    """Match the small CSS subset navim uses: "tag", "tag[attr]", "tag[attr="v"]"."""
    for part in selector.split(","):
        match = _SELECTOR_PART.match(part.strip())
        if not match:
            continue
        if element.tag_kind() != match.group("tag").upper():
            continue
        attr = match.group("attr")
        if attr is None:
            return True
        value = match.group("value")
        if value is None and element.attribute(attr):
            return True
        if value is not None and element.attribute(attr) == value:
            return True
    return False


class MemorySurface:
    """BrowsingSurface backed by MemoryPage objects."""

    def __init__(
        self,
        pages: dict[str, MemoryPage] | None = None,
        viewport: tuple[int, int] = DEFAULT_VIEWPORT,
        on_new_window: Callable[[str], None] | None = None,
    ) -> None:
        self.pages: dict[str, MemoryPage] = dict(pages or {})
        self._viewport = viewport
        self._on_new_window = on_new_window
        self._listener: Callable[[SurfaceEvent], None] | None = None

        self.page = MemoryPage(url="about:blank")
        self._history: list[str] = []
        self._history_index = -1
        self._scroll_x = 0
        self._scroll_y = 0
        self._markers: dict[ElementHandle, Marker] = {}

        self.focused: MemoryElement | None = None
        self.search_text = ""
        self.search_flags = FindFlags()
        self.find_calls: list[tuple[str, FindFlags]] = []
        self.clicks: list[Point] = []
        self.opened_windows: list[str] = []
        self.forwarded_keys: list[KeyEvent] = []

    def set_event_listener(self, listener: Callable[[SurfaceEvent], None] | None) -> None:
        """Send page events (load started, title changed, ...) to listener."""
        self._listener = listener

    def set_new_window_handler(self, handler: Callable[[str], None] | None) -> None:
        """Called with the URL whenever a new window is requested."""
        self._on_new_window = handler

    def _emit(self, event: SurfaceEvent) -> None:
        if self._listener:
            self._listener(event)

    # ─────────────────────────────────────────────────────────────────
    # Navigation
    # ─────────────────────────────────────────────────────────────────

    def load(self, url: str) -> None:
        del self._history[self._history_index + 1:]
        self._history.append(url)
        self._history_index = len(self._history) - 1
        self._show(url)

    def reload(self) -> None:
        self._show(self.page.url)

    def history_back(self) -> None:
        if self._history_index > 0:
            self._history_index -= 1
            self._show(self._history[self._history_index])

    def history_forward(self) -> None:
        if self._history_index < len(self._history) - 1:
            self._history_index += 1
            self._show(self._history[self._history_index])

    def current_url(self) -> str:
        return self.page.url

    @property
    def history(self) -> list[str]:
        return list(self._history)

    def _show(self, url: str) -> None:
        found = url in self.pages
        logger.debug("Loading %s (%s)", url, "found" if found else "not found")
        self._emit(LoadStarted())
        self.page = self.pages.get(url) or MemoryPage(url=url, title=url)
        self._scroll_x = 0
        self._scroll_y = 0
        self._markers.clear()
        self.focused = None
        self._emit(LoadProgress(100))
        self._emit(UrlChanged(self.page.url))
        self._emit(TitleChanged(self.page.title))
        self._emit(LoadFinished(ok=found))

    # ─────────────────────────────────────────────────────────────────
    # Viewport
    # ─────────────────────────────────────────────────────────────────

    def viewport_size(self) -> tuple[int, int]:
        return self._viewport

    def set_viewport_size(self, width: int, height: int) -> None:
        self._viewport = (width, height)
        self._scroll_x = min(self._scroll_x, self.scroll_extent(Axis.HORIZONTAL))
        self._scroll_y = min(self._scroll_y, self.scroll_extent(Axis.VERTICAL))

    def scroll_offset(self) -> tuple[int, int]:
        return (self._scroll_x, self._scroll_y)

    def scroll(self, dx: int, dy: int) -> None:
        self.set_scroll_offset(Axis.HORIZONTAL, self._scroll_x + dx)
        self.set_scroll_offset(Axis.VERTICAL, self._scroll_y + dy)

    def set_scroll_offset(self, axis: Axis, value: int) -> None:
        value = max(0, min(value, self.scroll_extent(axis)))
        if axis == Axis.HORIZONTAL:
            self._scroll_x = value
        else:
            self._scroll_y = value

    def scroll_extent(self, axis: Axis) -> int:
        width, height = self._viewport
        if axis == Axis.HORIZONTAL:
            return max(0, self.page.width - width)
        return max(0, self.page.height - height)

    # ─────────────────────────────────────────────────────────────────
    # Search
    # ─────────────────────────────────────────────────────────────────

    def find_text(self, text: str, flags: FindFlags) -> None:
        self.find_calls.append((text, flags))
        if flags.highlight_all:
            self.search_text = text
            self.search_flags = flags

    def count_matches(self, text: str | None = None) -> int:
        """Occurrences of text (default: the highlighted search) in the page."""
        needle = (self.search_text if text is None else text).lower()
        if not needle:
            return 0
        haystack = "\n".join([self.page.body, *(e.text for e in self.page.elements)]).lower()
        return haystack.count(needle)

    # ─────────────────────────────────────────────────────────────────
    # Document introspection
    # ─────────────────────────────────────────────────────────────────

    def enumerate_elements(self, selector: str) -> list[ElementHandle]:
        return [e for e in self.page.elements if matches_selector(e, selector)]

    def insert_marker(self, handle: ElementHandle, label: str) -> None:
        self._markers[handle] = Marker(label)

    def remove_all_markers(self) -> None:
        self._markers.clear()

    def set_marker_visible(self, handle: ElementHandle, visible: bool) -> None:
        marker = self._markers.get(handle)
        if marker is not None:
            marker.visible = visible

    def marker_for(self, handle: ElementHandle) -> Marker | None:
        return self._markers.get(handle)

    def visible_labels(self) -> list[str]:
        return sorted(m.label for m in self._markers.values() if m.visible)

    @property
    def marker_count(self) -> int:
        return len(self._markers)

    def element_at(self, point: Point) -> MemoryElement | None:
        """Topmost element under a document point."""
        for element in reversed(self.page.elements):
            rect = element.rect
            if rect.x <= point.x < rect.right and rect.y <= point.y < rect.bottom:
                return element
        return None

    def click_at(self, point: Point) -> None:
        """Click a viewport point: follow links, focus text fields."""
        self.clicks.append(point)
        element = self.element_at(Point(point.x + self._scroll_x, point.y + self._scroll_y))
        if element is None:
            self.focused = None
            return
        if is_text_field(element):
            self.focused = element
        elif is_link(element) and element.attribute("href"):
            self.load(resolve_href(element.attribute("href"), self.page.url))

    def forward_key(self, event: KeyEvent) -> None:
        """Type into the focused text field."""
        self.forwarded_keys.append(event)
        if self.focused is None:
            return
        if event.key == BACKSPACE:
            self.focused.value = self.focused.value[:-1]
        elif event.is_char and not event.ctrl:
            char = event.key.upper() if event.shift else event.key
            self.focused.value += char

    # ─────────────────────────────────────────────────────────────────
    # Windows
    # ─────────────────────────────────────────────────────────────────

    def open_new_window(self, url: str) -> None:
        self.opened_windows.append(url)
        if self._on_new_window:
            self._on_new_window(url)
