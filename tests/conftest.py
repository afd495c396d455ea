"""Pytest fixtures for navim tests."""

from __future__ import annotations

import pytest

from navim.engine import ModalEngine
from navim.surfaces.memory import MemoryPage, MemorySurface
from tests.helpers import HOME_URL, make_link, make_page


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path, monkeypatch):
    """Never read the real ~/.navim."""
    config_dir = tmp_path / "navim-config"
    monkeypatch.setenv("NAVIM_CONFIG_DIR", str(config_dir))
    return config_dir


@pytest.fixture
def surface() -> MemorySurface:
    """An 800x600 viewport on a tall page with five links."""
    page = make_page([make_link(i) for i in range(5)], height=3000, width=1600)
    other_pages = {
        f"http://site.test/page/{i}": MemoryPage(url=f"http://site.test/page/{i}", title=f"Page {i}")
        for i in range(5)
    }
    surface = MemorySurface({HOME_URL: page, **other_pages})
    surface.load(HOME_URL)
    return surface


@pytest.fixture
def engine(surface: MemorySurface) -> ModalEngine:
    """An engine listening to the surface's page events."""
    engine = ModalEngine(surface)
    surface.set_event_listener(engine.handle_event)
    return engine
