"""Page builders shared by the navim tests."""

from __future__ import annotations

from navim.engine import KeyEvent, ModalEngine
from navim.engine.surface import Rect
from navim.surfaces.memory import MemoryElement, MemoryPage

HOME_URL = "http://site.test/"


def make_link(index: int, href: str | None = None, y: int | None = None) -> MemoryElement:
    """A 100x20 link laid out one per row."""
    return MemoryElement(
        "a",
        Rect(10, y if y is not None else 30 * index, 100, 20),
        text=f"link {index}",
        attributes={"href": href if href is not None else f"/page/{index}"},
    )


def make_text_input(index: int, y: int) -> MemoryElement:
    return MemoryElement(
        "input",
        Rect(10, y, 200, 20),
        text=f"field {index}",
        attributes={"type": "text", "name": f"field{index}"},
    )


def make_page(elements: list[MemoryElement], url: str = HOME_URL, **kwargs) -> MemoryPage:
    return MemoryPage(url=url, title=kwargs.pop("title", "Home"), elements=elements, **kwargs)


def press(engine: ModalEngine, keys: str) -> None:
    """Type a string of characters."""
    for char in keys:
        engine.handle_event(KeyEvent.char(char))


def ctrl(engine: ModalEngine, char: str) -> None:
    engine.handle_event(KeyEvent(char, ctrl=True))
