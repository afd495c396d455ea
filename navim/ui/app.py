"""Main Textual application for navim."""

from __future__ import annotations

import logging
import shlex
import subprocess
import sys
from collections.abc import Sequence

from textual.app import App, ComposeResult
from textual.events import Key

from ..config import NavimConfig
from ..core.keymap import BindingTable
from ..engine import KeyResult, ModalEngine, Mode, PageStatus, PromptKind, SurfaceEvent
from ..engine.surface import Axis
from ..surfaces.memory import MemorySurface
from .keys import to_key_event
from .status import format_scroll_position, format_title
from .widgets import CELL_HEIGHT, CELL_WIDTH, CommandLine, PageView, StatusBar

logger = logging.getLogger(__name__)


class NavimApp(App):
    """One navim browser window."""

    TITLE = "navim"
    ENABLE_COMMAND_PALETTE = False

    CSS = """
    Screen {
        background: $surface;
        layout: vertical;
    }

    #page-view {
        height: 1fr;
    }
    """

    def __init__(
        self,
        surface: MemorySurface,
        start_url: str,
        bindings: BindingTable | None = None,
        config: NavimConfig | None = None,
        window_args: Sequence[str] = (),
    ):
        super().__init__()
        self.surface = surface
        self.start_url = start_url
        self.engine = ModalEngine(surface, bindings=bindings, config=config)
        # Extra CLI arguments passed on to new windows (e.g. --mock demo)
        self._window_args = list(window_args)
        self.spawned_windows: list[list[str]] = []

    @property
    def page_view(self) -> PageView:
        return self.query_one("#page-view", PageView)

    @property
    def command_line(self) -> CommandLine:
        return self.query_one("#command-line", CommandLine)

    @property
    def status_bar(self) -> StatusBar:
        return self.query_one("#status-bar", StatusBar)

    def compose(self) -> ComposeResult:
        yield PageView(id="page-view")
        yield CommandLine(id="command-line")
        yield StatusBar(id="status-bar")

    def on_mount(self) -> None:
        """Wire the engine to the widgets and load the start page."""
        engine = self.engine
        engine.set_mode_callback(self._on_mode_change)
        engine.set_command_callback(self._on_command_update)
        engine.set_prompt_callback(self._on_prompt_change)
        engine.set_status_callback(self._on_status_change)

        self.surface.set_event_listener(self._on_surface_event)
        self.surface.set_new_window_handler(self.open_window)
        self._sync_viewport()

        logger.debug("Starting at %s", self.start_url)
        self.surface.load(self.start_url)
        self._refresh_page()
        self.call_after_refresh(self._on_layout)

    def on_page_view_resized(self, message: PageView.Resized) -> None:
        logger.debug("Page view resized to %s", message.size)
        self._on_layout()

    def _on_layout(self) -> None:
        self._sync_viewport()
        self.engine.notify_status()
        self._refresh_page()

    def _sync_viewport(self) -> None:
        size = self.page_view.size
        if size.width and size.height:
            self.surface.set_viewport_size(size.width * CELL_WIDTH, size.height * CELL_HEIGHT)

    # ─────────────────────────────────────────────────────────────────
    # Key handling
    # ─────────────────────────────────────────────────────────────────

    def on_key(self, event: Key) -> None:
        """Route every key press through the modal engine."""
        result = self.engine.handle_event(to_key_event(event))
        if result.consumed:
            event.prevent_default()
            event.stop()
        self._after_key(result)

    def _after_key(self, result: KeyResult) -> None:
        self._refresh_page()
        if result.message:
            self.notify(result.message)
        if result.quit:
            self.exit()

    # ─────────────────────────────────────────────────────────────────
    # Engine callbacks
    # ─────────────────────────────────────────────────────────────────

    def _on_surface_event(self, event: SurfaceEvent) -> None:
        self.engine.handle_event(event)

    def _on_mode_change(self, mode: Mode, label: str) -> None:
        self.status_bar.set_mode(mode, label)

    def _on_command_update(self, command: str) -> None:
        self.status_bar.set_command(command)

    def _on_prompt_change(self, kind: PromptKind | None, text: str) -> None:
        command_line = self.command_line
        if kind is None:
            command_line.hide()
            return
        command_line.set_prompt(kind.label, text)
        command_line.show()

    def _on_status_change(self, status: PageStatus) -> None:
        value = self.surface.scroll_offset()[1]
        maximum = self.surface.scroll_extent(Axis.VERTICAL)
        self.status_bar.set_page(status, format_scroll_position(value, maximum))
        self.title = format_title(status.title or self.TITLE, status.progress, status.loading)
        self.sub_title = status.url

    def _refresh_page(self) -> None:
        self.page_view.show_page(self.surface)

    # ─────────────────────────────────────────────────────────────────
    # Windows
    # ─────────────────────────────────────────────────────────────────

    def new_window_argv(self, url: str) -> list[str] | None:
        """Command line that starts a new window on url, if one is configured."""
        command = self.engine.config.new_window_command
        if not command:
            return None
        return [*shlex.split(command), sys.executable, "-m", "navim", *self._window_args, url]

    def open_window(self, url: str) -> None:
        """Start another navim instance on url."""
        argv = self.new_window_argv(url)
        if argv is None:
            self.notify(f"No new_window_command configured; not opening {url}", severity="warning")
            return

        logger.debug("Spawning new window: %s", argv)
        try:
            subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            logger.warning("Failed to open new window: %s", exc)
            self.notify(f"Failed to open new window: {exc}", severity="error")
            return
        self.spawned_windows.append(argv)
