"""Widgets for the navim terminal window."""

from __future__ import annotations

from collections import defaultdict

from rich.text import Text
from textual.events import Resize
from textual.geometry import Size
from textual.message import Message
from textual.widgets import Static

from ..engine.state import Mode, PageStatus
from ..surfaces.memory import MemoryElement, MemorySurface

# Surface pixels per terminal cell
CELL_WIDTH = 8
CELL_HEIGHT = 30

MARKER_STYLE = "bold black on yellow"
SEARCH_STYLE = "black on bright_yellow"
LINK_STYLE = "underline bright_blue"
FIELD_STYLE = "reverse"
FIELD_TAGS = ("INPUT", "TEXTAREA", "SELECT")
FOCUSED_FIELD_STYLE = "bold reverse green"


class PageView(Static):
    """Text rendering of the page shown by a MemorySurface.

    Body lines and elements are placed on rows by their vertical position;
    follow markers are drawn in front of the element they label.
    """

    DEFAULT_CSS = """
    PageView {
        height: 1fr;
        padding: 0 1;
    }
    """

    class Resized(Message):
        """Posted when the page area changes size."""

        def __init__(self, size: Size) -> None:
            super().__init__()
            self.size = size

    def on_resize(self, event: Resize) -> None:
        self.post_message(self.Resized(event.size))

    def show_page(self, surface: MemorySurface) -> None:
        self.update(self.render_page(surface))

    def render_page(self, surface: MemorySurface) -> Text:
        page = surface.page
        scroll_x, scroll_y = surface.scroll_offset()
        _, height = surface.viewport_size()
        first_row = scroll_y // CELL_HEIGHT
        row_count = max(1, height // CELL_HEIGHT)

        rows: dict[int, list[MemoryElement]] = defaultdict(list)
        for element in page.elements:
            rows[element.rect.y // CELL_HEIGHT].append(element)

        body_lines = page.body.splitlines()
        text = Text(no_wrap=True, overflow="crop")
        for row in range(first_row, first_row + row_count):
            line = Text(body_lines[row] if row < len(body_lines) else "")
            for element in sorted(rows.get(row, []), key=lambda e: e.rect.x):
                line.append("  ")
                line.append_text(self._render_element(surface, element))
            if row > first_row:
                text.append("\n")
            text.append_text(line[scroll_x // CELL_WIDTH:])

        if surface.search_text:
            text.highlight_words([surface.search_text], style=SEARCH_STYLE, case_sensitive=False)
        return text

    def _render_element(self, surface: MemorySurface, element: MemoryElement) -> Text:
        text = Text()
        marker = surface.marker_for(element)
        if marker is not None and marker.visible:
            text.append(marker.label, style=MARKER_STYLE)
        if element.tag_kind() in FIELD_TAGS:
            style = FOCUSED_FIELD_STYLE if element is surface.focused else FIELD_STYLE
            text.append(f"[{element.value or element.text_content()}]", style=style)
        else:
            text.append(element.text_content(), style=LINK_STYLE)
        return text


class CommandLine(Static):
    """Prompt line shown while the engine is in command mode."""

    DEFAULT_CSS = """
    CommandLine {
        height: 1;
        display: none;
        background: $surface;
        padding: 0 1;
    }

    CommandLine.visible {
        display: block;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._label = ""
        self._text = ""

    @property
    def prompt_text(self) -> str:
        return self._text

    def set_prompt(self, label: str, text: str) -> None:
        self._label = label
        self._text = text
        self.update(Text.assemble((label, "bold"), " ", text, ("_", "blink")))

    def show(self) -> None:
        self.add_class("visible")

    def hide(self) -> None:
        self.remove_class("visible")
        self._label = ""
        self._text = ""
        self.update("")


class StatusBar(Static):
    """Mode label, pending command, URL, scroll position and load progress."""

    DEFAULT_CSS = """
    StatusBar {
        height: 1;
        background: $surface-darken-1;
        padding: 0 1;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.current_mode: Mode = Mode.NORMAL
        self.mode_label = ""
        self.command_text = ""
        self.page_url = ""
        self.scroll_label = "[all]"
        self.progress_label = ""

    def set_mode(self, mode: Mode, label: str) -> None:
        self.current_mode = mode
        self.mode_label = label
        self.refresh_status()

    def set_command(self, command: str) -> None:
        self.command_text = command
        self.refresh_status()

    def set_page(self, status: PageStatus, position: str) -> None:
        self.page_url = status.display_url
        self.scroll_label = position
        self.progress_label = f"{status.progress}%" if status.loading else ""
        self.refresh_status()

    def render_status(self) -> Text:
        text = Text(no_wrap=True, overflow="ellipsis")
        if self.mode_label:
            style = "bold green" if self.current_mode == Mode.INSERT else "bold"
            text.append(self.mode_label, style=style)
            text.append(" ")
        if self.command_text:
            text.append(self.command_text, style="bold yellow")
            text.append(" ")
        text.append(self.page_url, style="dim")
        text.append(" ")
        text.append(self.scroll_label)
        if self.progress_label:
            text.append(f" {self.progress_label}", style="cyan")
        return text

    def refresh_status(self) -> None:
        self.update(self.render_status())

