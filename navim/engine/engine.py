"""Modal command engine.

The ModalEngine is the main controller that:
- Receives every key press and page event through handle_event
- Manages engine state (mode, pending command, follow labels, search)
- Resolves typed sequences against the binding table or the follow labels
- Runs the resulting actions against the browsing surface
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from ..config import NavimConfig
from ..core.keymap import BindingTable, default_binding_table
from ..core.urls import from_user_input, resolve_href
from .actions import execute_action, find_next
from .events import (
    BACKSPACE,
    ENTER,
    ESCAPE,
    Event,
    KeyEvent,
    LinkHovered,
    LoadFinished,
    LoadProgress,
    LoadStarted,
    TitleChanged,
    UrlChanged,
)
from .labels import build_label_mapping
from .prompt import PromptHandler, PromptKind
from .state import FOLLOW_LABELS, EngineState, FollowSession, FollowVariant, Mode, PageStatus
from .surface import (
    BrowsingSurface,
    ElementHandle,
    Point,
    is_link,
    is_text_field,
    is_visible,
    viewport_rect,
)

logger = logging.getLogger(__name__)

INSERT_MODE_LABEL = "-- INSERT MODE --"


@dataclass
class KeyResult:
    """Result of processing an event."""

    consumed: bool = True  # Was the key handled?
    quit: bool = False     # Should the window close?
    message: str = ""      # Message to display to user


class ModalEngine:
    """Keyboard controller for one browser window.

    This class sits between the host's key events and the browsing surface,
    translating typed commands into surface operations.
    """

    def __init__(
        self,
        surface: BrowsingSurface,
        bindings: BindingTable | None = None,
        config: NavimConfig | None = None,
    ) -> None:
        self._surface = surface
        self._bindings = bindings or default_binding_table()
        self._config = config or NavimConfig()
        self._state = EngineState()

        self._prompt = PromptHandler()
        self._prompt.set_edit_callback(self._on_prompt_edit)

        self._quit_requested = False

        # Callbacks for the host UI
        self._on_mode_change: Callable[[Mode, str], None] | None = None
        self._on_command_update: Callable[[str], None] | None = None
        self._on_prompt_change: Callable[[PromptKind | None, str], None] | None = None
        self._on_status_change: Callable[[PageStatus], None] | None = None

    # ─────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────

    @property
    def mode(self) -> Mode:
        """Current mode."""
        return self._state.mode

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def surface(self) -> BrowsingSurface:
        return self._surface

    @property
    def bindings(self) -> BindingTable:
        return self._bindings

    @property
    def config(self) -> NavimConfig:
        return self._config

    @property
    def prompt(self) -> PromptHandler:
        return self._prompt

    @property
    def command_buffer(self) -> str:
        """Keys typed since the last completed command."""
        return self._state.command_buffer

    @property
    def label_mapping(self) -> dict[str, ElementHandle]:
        """Live follow labels (empty outside follow mode)."""
        if self._state.follow is None:
            return {}
        return dict(self._state.follow.mapping)

    @property
    def mode_label(self) -> str:
        """Text shown in the status bar for the current mode."""
        mode = self._state.mode
        if mode == Mode.INSERT:
            return INSERT_MODE_LABEL
        if mode == Mode.FOLLOW and self._state.follow is not None:
            return f"{FOLLOW_LABELS[self._state.follow.variant]}:"
        if mode == Mode.COMMAND and self._prompt.kind is not None:
            return self._prompt.kind.label
        return ""

    # ─────────────────────────────────────────────────────────────────
    # Callbacks
    # ─────────────────────────────────────────────────────────────────

    def set_mode_callback(self, callback: Callable[[Mode, str], None]) -> None:
        """Set callback for mode changes (mode, status label)."""
        self._on_mode_change = callback

    def set_command_callback(self, callback: Callable[[str], None]) -> None:
        """Set callback for command buffer updates."""
        self._on_command_update = callback

    def set_prompt_callback(self, callback: Callable[[PromptKind | None, str], None]) -> None:
        """Set callback for prompt changes (None when the prompt is hidden)."""
        self._on_prompt_change = callback

    def set_status_callback(self, callback: Callable[[PageStatus], None]) -> None:
        """Set callback for page status changes (title, URL, progress, scroll)."""
        self._on_status_change = callback

    def _notify_mode_change(self) -> None:
        if self._on_mode_change:
            self._on_mode_change(self._state.mode, self.mode_label)

    def _notify_command_update(self) -> None:
        if self._on_command_update:
            self._on_command_update(self._state.command_buffer)

    def _notify_prompt_change(self) -> None:
        if self._on_prompt_change:
            self._on_prompt_change(self._prompt.kind, self._prompt.text)

    def notify_status(self) -> None:
        if self._on_status_change:
            self._on_status_change(self._state.page)

    # ─────────────────────────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────────────────────────

    def handle_event(self, event: Event) -> KeyResult:
        """Process a key press or a page event.

        Args:
            event: A KeyEvent from the host or a surface notification

        Returns:
            KeyResult indicating how the event was handled
        """
        if isinstance(event, KeyEvent):
            return self.handle_key(event)
        self._handle_surface_event(event)
        return KeyResult(consumed=True)

    def handle_key(self, event: KeyEvent) -> KeyResult:
        """Process a key press."""
        self._quit_requested = False
        logger.debug("Key %r (shift=%s ctrl=%s) in %s", event.key, event.shift, event.ctrl, self.mode.value)

        if event.key == ESCAPE:
            self.escape()
            return KeyResult(consumed=True)

        mode = self._state.mode
        if mode == Mode.INSERT:
            return self._handle_insert_mode(event)
        elif mode == Mode.COMMAND:
            return self._handle_command_mode(event)
        return self._handle_browse_mode(event)

    def escape(self) -> None:
        """Leave whatever is going on and return to normal mode."""
        self._clear_search()
        self.normal_mode()

    def normal_mode(self) -> None:
        """Enter normal mode: clear pending input, labels and the prompt."""
        self._prompt.cancel()
        self._state.enter_mode(Mode.NORMAL)
        self._surface.remove_all_markers()
        self._notify_mode_change()
        self._notify_command_update()
        self._notify_prompt_change()

    def enter_insert_mode(self) -> None:
        self._state.enter_mode(Mode.INSERT)
        self._notify_mode_change()

    def enter_follow_mode(self, variant: FollowVariant = FollowVariant.DEFAULT, new_window: bool = False) -> None:
        """Label every visible link and form field.

        Args:
            variant: What to do with the picked element
            new_window: Open picked links in a new window whatever the variant
        """
        surface = self._surface
        surface.remove_all_markers()
        self._state.enter_mode(Mode.FOLLOW)

        viewport = viewport_rect(surface)
        candidates = [
            element
            for element in surface.enumerate_elements(self._config.follow_selector)
            if is_visible(element, viewport)
        ]
        mapping = build_label_mapping(surface, candidates)
        self._state.follow = FollowSession(variant=variant, new_window=new_window, mapping=mapping)
        logger.debug("Follow mode (%s): %d labels", variant.name, len(mapping))
        self._notify_mode_change()

    def show_prompt(self, kind: PromptKind, text: str = "") -> None:
        """Enter command mode with a prompt."""
        self._state.enter_mode(Mode.COMMAND)
        self._prompt.start(kind, text)
        self._notify_mode_change()
        self._notify_prompt_change()

    def set_prompt_text(self, text: str) -> None:
        """Replace the prompt text (hosts with their own input widget)."""
        if self._state.mode == Mode.COMMAND:
            self._prompt.set_text(text)
            self._notify_prompt_change()

    def click(self, element: ElementHandle) -> None:
        """Click the center of an element as seen in the viewport."""
        center = element.geometry().center()
        scroll_x, scroll_y = self._surface.scroll_offset()
        self._surface.click_at(Point(center.x - scroll_x, center.y - scroll_y))

    def scroll_by(self, dx: int, dy: int) -> None:
        self._surface.scroll(dx, dy)
        self.notify_status()

    def request_quit(self) -> None:
        self._quit_requested = True

    # ─────────────────────────────────────────────────────────────────
    # Insert Mode
    # ─────────────────────────────────────────────────────────────────

    def _handle_insert_mode(self, event: KeyEvent) -> KeyResult:
        """Let the page edit text; escape was already handled."""
        self._surface.forward_key(event)
        return KeyResult(consumed=True)

    # ─────────────────────────────────────────────────────────────────
    # Command Mode
    # ─────────────────────────────────────────────────────────────────

    def _handle_command_mode(self, event: KeyEvent) -> KeyResult:
        """Edit the prompt text."""
        if event.key == ENTER:
            self._submit_prompt()
            return KeyResult(consumed=True)

        if event.key == BACKSPACE:
            self._prompt.backspace()
        else:
            char = self._effective_char(event)
            if char is None or event.ctrl:
                return KeyResult(consumed=False)
            self._prompt.add_char(char)

        self._notify_prompt_change()
        return KeyResult(consumed=True)

    def _submit_prompt(self) -> None:
        result = self._prompt.submit()
        self.normal_mode()
        if result is None:
            return

        if result.kind.is_search:
            self._state.search.text = result.text
            find_next(self)
            return

        url = from_user_input(result.text)
        if not url:
            return
        if result.kind == PromptKind.OPEN:
            self._surface.load(url)
        else:
            self._surface.open_new_window(url)

    def _on_prompt_edit(self, kind: PromptKind, text: str) -> None:
        """Incremental search while typing in a search prompt."""
        if kind.is_search:
            self._clear_search()
            self._surface.find_text(text, self._state.search.flags)

    def _clear_search(self) -> None:
        flags = self._state.search.flags
        self._surface.find_text("", flags.without_highlight())
        self._surface.find_text("", flags)

    # ─────────────────────────────────────────────────────────────────
    # Normal / Follow Mode
    # ─────────────────────────────────────────────────────────────────

    def _handle_browse_mode(self, event: KeyEvent) -> KeyResult:
        """Accumulate keys and resolve them as commands or labels."""
        char = self._effective_char(event)

        if event.ctrl:
            action = self._bindings.lookup_control(char) if char else None
            if action is None:
                return KeyResult(consumed=False)
            execute_action(action, self)
            self._notify_command_update()
            return self._result()

        if event.key == BACKSPACE:
            self._state.backspace()
        elif char is not None:
            self._state.append_key(char)
        else:
            return KeyResult(consumed=False)

        self._resolve()
        self._notify_command_update()
        return self._result()

    def _effective_char(self, event: KeyEvent) -> str | None:
        """Character for a key; letters follow the shift flag, not their case."""
        if not event.is_char:
            return None
        key = event.key
        if key.isalpha():
            folded = key.upper() if event.shift else key.lower()
            if len(folded) == 1:
                return folded
        return key

    def _resolve(self) -> None:
        """Resolve the command buffer against labels or bindings."""
        if self._state.is_follow():
            self._resolve_follow()
            return

        action = self._bindings.lookup(self._state.command_buffer)
        if action is None:
            # Keep the buffer: it may be the start of a longer sequence
            return
        logger.debug("Binding %r -> %s", self._state.command_buffer, action.value)
        execute_action(action, self)
        self._state.clear_buffer()

    def _resolve_follow(self) -> None:
        session = self._state.follow
        if session is None:
            return
        typed = self._state.command_buffer
        element = session.mapping.get(typed)
        if element is None:
            self._filter_labels(session, typed)
            return
        self._activate(element, session)

    def _filter_labels(self, session: FollowSession, prefix: str) -> None:
        shown = set(session.matching(prefix))
        logger.debug("Follow: %d of %d labels match %r", len(shown), len(session.mapping), prefix)
        for label, element in session.mapping.items():
            self._surface.set_marker_visible(element, label in shown)

    def _activate(self, element: ElementHandle, session: FollowSession) -> None:
        """Act on the element picked in follow mode."""
        if is_link(element) and (session.opens_new_window() or session.variant == FollowVariant.SAME_WINDOW):
            url = resolve_href(element.attribute("href"), self._surface.current_url())
            self.normal_mode()
            if session.opens_new_window():
                logger.debug("Follow: opening %s in a new window", url)
                self._surface.open_new_window(url)
            else:
                logger.debug("Follow: loading %s", url)
                self._surface.load(url)
            return

        self.normal_mode()
        self.click(element)
        if is_text_field(element):
            self.enter_insert_mode()

    def _result(self) -> KeyResult:
        return KeyResult(consumed=True, quit=self._quit_requested)

    # ─────────────────────────────────────────────────────────────────
    # Surface Events
    # ─────────────────────────────────────────────────────────────────

    def _handle_surface_event(self, event: Event) -> None:
        page = self._state.page
        logger.debug("Surface event %r", event)

        if isinstance(event, TitleChanged):
            page.title = event.title
        elif isinstance(event, UrlChanged):
            page.url = event.url
        elif isinstance(event, LoadStarted):
            # A new document invalidates labels and pending input
            self.normal_mode()
            page.loading = True
            page.progress = 0
        elif isinstance(event, LoadProgress):
            page.progress = max(0, min(100, event.percent))
        elif isinstance(event, LoadFinished):
            page.loading = False
            page.progress = 0
        elif isinstance(event, LinkHovered):
            page.hovered_link = event.url

        self.notify_status()
