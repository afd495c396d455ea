"""Tests for the Textual host application."""

from __future__ import annotations

import asyncio

from navim.config import NavimConfig
from navim.engine import Mode
from navim.engine.surface import Axis
from navim.mocks import get_mock_profile
from navim.surfaces.memory import MemorySurface
from navim.ui import NavimApp
from navim.ui.status import format_scroll_position
from navim.ui.widgets import CELL_HEIGHT, CommandLine, PageView, StatusBar


def _demo_app(**kwargs) -> NavimApp:
    profile = get_mock_profile("demo")
    return NavimApp(MemorySurface(profile.pages), profile.start_url, **kwargs)


class TestNavimApp:
    """Drive the app with real key presses."""

    def test_start_page_is_loaded(self):
        async def run() -> None:
            app = _demo_app()
            async with app.run_test(size=(100, 30)) as pilot:
                await pilot.pause()
                assert app.surface.current_url() == "http://navim.test/"
                assert app.title == "navim demo"
                assert app.sub_title == "http://navim.test/"
                assert "Documentation" in app.page_view.render_page(app.surface).plain
                assert app.status_bar.page_url == "http://navim.test/"

        asyncio.run(run())

    def test_follow_link(self):
        async def run() -> None:
            app = _demo_app()
            async with app.run_test(size=(100, 30)) as pilot:
                await pilot.press("f")
                assert app.engine.mode == Mode.FOLLOW
                assert app.status_bar.mode_label == "follow:"
                rendered = app.page_view.render_page(app.surface).plain
                assert "aDocumentation" in rendered

                await pilot.press("a")
                assert app.surface.current_url() == "http://navim.test/docs"
                assert app.engine.mode == Mode.NORMAL
                assert app.status_bar.mode_label == ""

        asyncio.run(run())

    def test_open_prompt(self):
        async def run() -> None:
            app = _demo_app()
            async with app.run_test(size=(100, 30)) as pilot:
                await pilot.press("o")
                command_line = app.query_one("#command-line", CommandLine)
                assert command_line.has_class("visible")

                await pilot.press(*"navim.test/search")
                assert command_line.prompt_text == "navim.test/search"

                await pilot.press("enter")
                assert app.surface.current_url() == "http://navim.test/search"
                assert not command_line.has_class("visible")

        asyncio.run(run())

    def test_insert_mode_and_escape(self):
        async def run() -> None:
            app = _demo_app()
            async with app.run_test(size=(100, 30)) as pilot:
                app.surface.load("http://navim.test/search")
                await pilot.press("g", "i")
                await pilot.press("i")
                assert app.engine.mode == Mode.INSERT
                assert app.query_one("#status-bar", StatusBar).mode_label == "-- INSERT MODE --"

                await pilot.press("h", "i")
                assert app.surface.focused.value == "hi"

                await pilot.press("escape")
                assert app.engine.mode == Mode.NORMAL

        asyncio.run(run())

    def test_pending_command_shown(self):
        async def run() -> None:
            app = _demo_app()
            async with app.run_test(size=(100, 30)) as pilot:
                await pilot.press("g")
                assert app.status_bar.command_text == "g"
                await pilot.press("g")
                assert app.status_bar.command_text == ""

        asyncio.run(run())

    def test_scroll_position(self):
        async def run() -> None:
            app = _demo_app()
            async with app.run_test(size=(100, 30)) as pilot:
                app.surface.load("http://navim.test/article")
                await pilot.pause()
                await pilot.press("G")
                assert app.status_bar.scroll_label == "[bot]"
                await pilot.press("g", "g")
                assert app.status_bar.scroll_label == "[top]"

        asyncio.run(run())

    def test_resize_updates_viewport(self):
        async def run() -> None:
            app = _demo_app()
            async with app.run_test(size=(100, 30)) as pilot:
                app.surface.load("http://navim.test/article")
                await pilot.pause()
                small_height = app.surface.viewport_size()[1]

                await pilot.resize_terminal(100, 60)
                await pilot.pause()
                await pilot.pause()
                _, height = app.surface.viewport_size()
                assert height > small_height
                assert height == app.page_view.size.height * CELL_HEIGHT

                await pilot.press("f")
                # Section links sit every ten rows from row 10
                visible_links = len(range(10, height // CELL_HEIGHT, 10))
                assert len(app.engine.label_mapping) == visible_links
                assert visible_links > 2

        asyncio.run(run())

    def test_resize_refreshes_scroll_label(self):
        async def run() -> None:
            app = _demo_app()
            async with app.run_test(size=(100, 30)) as pilot:
                app.surface.load("http://navim.test/article")
                await pilot.pause()
                app.surface.set_scroll_offset(Axis.VERTICAL, 1200)
                app.engine.notify_status()
                before = app.status_bar.scroll_label

                await pilot.resize_terminal(100, 60)
                await pilot.pause()
                await pilot.pause()
                maximum = app.surface.scroll_extent(Axis.VERTICAL)
                expected = format_scroll_position(1200, maximum)
                assert app.status_bar.scroll_label == expected
                assert expected != before

        asyncio.run(run())

    def test_quit(self):
        async def run() -> None:
            app = _demo_app()
            async with app.run_test(size=(100, 30)) as pilot:
                await pilot.press("Z", "Z")
            assert app.return_code == 0

        asyncio.run(run())

    def test_new_window_without_command(self):
        async def run() -> None:
            app = _demo_app()
            async with app.run_test(size=(100, 30)) as pilot:
                await pilot.press("F", "a")
                assert app.surface.opened_windows == ["http://navim.test/docs"]
                assert app.spawned_windows == []
                assert app.surface.current_url() == "http://navim.test/"

        asyncio.run(run())

    def test_new_window_argv(self):
        app = _demo_app(config=NavimConfig(new_window_command="xterm -e"), window_args=["--mock", "demo"])
        argv = app.new_window_argv("http://navim.test/docs")
        assert argv[:2] == ["xterm", "-e"]
        assert argv[-3:] == ["--mock", "demo", "http://navim.test/docs"]


class TestPageView:
    """Rendering without a running app."""

    def test_markers_and_search_highlight(self):
        profile = get_mock_profile("demo")
        surface = MemorySurface(profile.pages)
        surface.load(profile.start_url)
        element = surface.page.elements[0]
        surface.insert_marker(element, "a")
        view = PageView()

        text = view.render_page(surface)
        assert "aDocumentation" in text.plain
        assert "Welcome to navim" in text.plain

        surface.set_marker_visible(element, False)
        assert "aDocumentation" not in view.render_page(surface).plain

    def test_scrolled_rows(self):
        profile = get_mock_profile("demo")
        surface = MemorySurface(profile.pages)
        surface.load("http://navim.test/article")
        view = PageView()
        assert "Paragraph 1:" in view.render_page(surface).plain

        surface.scroll(0, 30 * 50)
        plain = view.render_page(surface).plain
        assert "Paragraph 51:" in plain
        assert "Paragraph 1:" not in plain
