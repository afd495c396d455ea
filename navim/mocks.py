"""Mock page profiles for running navim without a rendering engine.

Usage:
    navim --mock demo
    navim --mock many-links
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .engine.surface import Rect
from .surfaces.memory import MemoryElement, MemoryPage

ROW_HEIGHT = 30
LEFT_MARGIN = 20


@dataclass
class MockProfile:
    """A named set of pages and the URL to start on."""

    name: str
    description: str
    start_url: str
    pages: dict[str, MemoryPage] = field(default_factory=dict)


def _link(row: int, text: str, href: str) -> MemoryElement:
    return MemoryElement(
        "a",
        Rect(LEFT_MARGIN, row * ROW_HEIGHT, 8 * len(text), 20),
        text=text,
        attributes={"href": href},
    )


def _text_input(row: int, name: str, value: str = "") -> MemoryElement:
    return MemoryElement(
        "input",
        Rect(LEFT_MARGIN, row * ROW_HEIGHT, 240, 24),
        text=name,
        attributes={"type": "text", "name": name},
        value=value,
    )


def _demo_profile() -> MockProfile:
    home = MemoryPage(
        url="http://navim.test/",
        title="navim demo",
        body="Welcome to navim. Press f to follow a link, / to search, gi to focus a field.",
        elements=[
            _link(1, "Documentation", "/docs"),
            _link(2, "Long article", "/article"),
            _link(3, "Search form", "/search"),
            _link(4, "External site", "http://example.org/"),
        ],
    )
    docs = MemoryPage(
        url="http://navim.test/docs",
        title="Documentation",
        body=(
            "Normal mode: t/s scroll down/up, c/r scroll left/right, gg top, G bottom.\n"
            "Ctrl+f/Ctrl+b page down/up, Ctrl+d/Ctrl+u half page.\n"
            "o open, O open in new window, go edit the current URL.\n"
            "f follow, F follow in new window, a follow in same window.\n"
            "i insert mode, Escape back to normal mode, ZZ quit."
        ),
        elements=[_link(8, "Home", "/")],
    )
    article = MemoryPage(
        url="http://navim.test/article",
        title="A long article",
        body="\n".join(f"Paragraph {n}: modal browsing keeps hands on the keyboard." for n in range(1, 120)),
        elements=[_link(row, f"Section {row // 10}", f"#section-{row // 10}") for row in range(10, 120, 10)],
        height=120 * ROW_HEIGHT,
    )
    search = MemoryPage(
        url="http://navim.test/search",
        title="Search",
        body="Fill in the fields. gi cycles through them.",
        elements=[
            _text_input(2, "query"),
            _text_input(3, "author"),
            MemoryElement("textarea", Rect(LEFT_MARGIN, 4 * ROW_HEIGHT, 400, 80), text="notes"),
            _link(8, "Home", "/"),
        ],
    )
    pages = {page.url: page for page in (home, docs, article, search)}
    return MockProfile("demo", "Small site with links, a long page and a form", home.url, pages)


def _many_links_profile() -> MockProfile:
    # Three columns of twenty, all inside the default viewport
    elements = [
        MemoryElement(
            "a",
            Rect(LEFT_MARGIN + (n % 3) * 250, (n // 3) * ROW_HEIGHT, 120, 20),
            text=f"Link {n}",
            attributes={"href": f"/links/{n}"},
        )
        for n in range(60)
    ]
    page = MemoryPage(
        url="http://navim.test/links",
        title="Many links",
        body="Sixty links: follow labels use two letters.",
        elements=elements,
    )
    return MockProfile("many-links", "One page with sixty links", page.url, {page.url: page})


def _empty_profile() -> MockProfile:
    page = MemoryPage(url="about:blank", title="")
    return MockProfile("empty", "A blank page", page.url, {page.url: page})


MOCK_PROFILES = {
    "demo": _demo_profile,
    "many-links": _many_links_profile,
    "empty": _empty_profile,
}


def get_mock_profile(name: str) -> MockProfile | None:
    """Build a mock profile by name."""
    factory = MOCK_PROFILES.get(name)
    return factory() if factory else None


def list_mock_profiles() -> list[str]:
    return list(MOCK_PROFILES)
