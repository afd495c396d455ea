"""Action handlers.

Each Action from the keymap maps to one handler taking the engine. Handlers
are looked up by execute_action; none of them is stored as a closure over a
particular engine instance.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from ..core.keymap import Action
from .prompt import PromptKind
from .state import FollowVariant
from .surface import Axis, Point, is_visible, viewport_rect

if TYPE_CHECKING:
    from .engine import ModalEngine

logger = logging.getLogger(__name__)

ActionFunc = Callable[["ModalEngine"], None]

TEXT_FIELD_SELECTOR = 'input[type="text"]'


# ─────────────────────────────────────────────────────────────────
# Scrolling
# ─────────────────────────────────────────────────────────────────


def _page_step(engine: ModalEngine) -> int:
    _, height = engine.surface.viewport_size()
    return height - engine.config.scroll_delta


def scroll_left(engine: ModalEngine) -> None:
    engine.scroll_by(-engine.config.scroll_delta, 0)


def scroll_right(engine: ModalEngine) -> None:
    engine.scroll_by(engine.config.scroll_delta, 0)


def scroll_up(engine: ModalEngine) -> None:
    engine.scroll_by(0, -engine.config.scroll_delta)


def scroll_down(engine: ModalEngine) -> None:
    engine.scroll_by(0, engine.config.scroll_delta)


def scroll_page_up(engine: ModalEngine) -> None:
    engine.scroll_by(0, -_page_step(engine))


def scroll_page_down(engine: ModalEngine) -> None:
    """One viewport height minus the scroll delta, so some context stays visible."""
    engine.scroll_by(0, _page_step(engine))


def scroll_half_page_up(engine: ModalEngine) -> None:
    engine.scroll_by(0, -(_page_step(engine) // 2))


def scroll_half_page_down(engine: ModalEngine) -> None:
    engine.scroll_by(0, _page_step(engine) // 2)


def scroll_to_top(engine: ModalEngine) -> None:
    engine.surface.set_scroll_offset(Axis.VERTICAL, 0)
    engine.notify_status()


def scroll_to_bottom(engine: ModalEngine) -> None:
    surface = engine.surface
    surface.set_scroll_offset(Axis.VERTICAL, surface.scroll_extent(Axis.VERTICAL))
    engine.notify_status()


# ─────────────────────────────────────────────────────────────────
# History
# ─────────────────────────────────────────────────────────────────


def history_back(engine: ModalEngine) -> None:
    engine.surface.history_back()


def history_forward(engine: ModalEngine) -> None:
    engine.surface.history_forward()


def reload(engine: ModalEngine) -> None:
    engine.surface.reload()


# ─────────────────────────────────────────────────────────────────
# Prompts and search
# ─────────────────────────────────────────────────────────────────


def open_prompt(engine: ModalEngine) -> None:
    engine.show_prompt(PromptKind.OPEN)


def open_with_current_url(engine: ModalEngine) -> None:
    engine.show_prompt(PromptKind.OPEN, engine.surface.current_url())


def window_open_prompt(engine: ModalEngine) -> None:
    engine.show_prompt(PromptKind.WINDOW_OPEN)


def search_forward(engine: ModalEngine) -> None:
    engine.state.search.set_direction(backward=False)
    engine.show_prompt(PromptKind.SEARCH_FORWARD)


def search_backward(engine: ModalEngine) -> None:
    engine.state.search.set_direction(backward=True)
    engine.show_prompt(PromptKind.SEARCH_BACKWARD)


def find_next(engine: ModalEngine) -> None:
    """Move to the next match, then highlight every match."""
    search = engine.state.search
    engine.surface.find_text(search.text, search.flags.without_highlight())
    engine.surface.find_text(search.text, search.flags)


def find_previous(engine: ModalEngine) -> None:
    search = engine.state.search
    flags = search.flags.reversed()
    engine.surface.find_text(search.text, flags.without_highlight())
    engine.surface.find_text(search.text, flags)


# ─────────────────────────────────────────────────────────────────
# Modes
# ─────────────────────────────────────────────────────────────────


def insert_mode(engine: ModalEngine) -> None:
    engine.enter_insert_mode()


def follow(engine: ModalEngine) -> None:
    engine.enter_follow_mode(FollowVariant.DEFAULT)


def follow_new_window(engine: ModalEngine) -> None:
    engine.enter_follow_mode(FollowVariant.NEW_WINDOW)


def follow_same_window(engine: ModalEngine) -> None:
    engine.enter_follow_mode(FollowVariant.SAME_WINDOW)


def focus_next_field(engine: ModalEngine) -> None:
    """Click the next rendered text input, cycling through the page."""
    surface = engine.surface
    fields = [
        element
        for element in surface.enumerate_elements(TEXT_FIELD_SELECTOR)
        if element.geometry().has_area
    ]
    if not fields:
        logger.debug("focus_next_field: no text fields on page")
        return

    index = engine.state.field_index % len(fields)
    target = fields[index]
    rect = target.geometry()
    if not is_visible(target, viewport_rect(surface)):
        surface.set_scroll_offset(Axis.HORIZONTAL, rect.x)
        surface.set_scroll_offset(Axis.VERTICAL, rect.y)
        engine.notify_status()
    engine.click(target)
    engine.state.field_index = (index + 1) % len(fields)


def quit_browser(engine: ModalEngine) -> None:
    engine.request_quit()


# ─────────────────────────────────────────────────────────────────
# Action Registry - maps keymap actions to handlers
# ─────────────────────────────────────────────────────────────────

ACTION_HANDLERS: dict[Action, ActionFunc] = {
    Action.SCROLL_LEFT: scroll_left,
    Action.SCROLL_RIGHT: scroll_right,
    Action.SCROLL_UP: scroll_up,
    Action.SCROLL_DOWN: scroll_down,
    Action.SCROLL_TO_TOP: scroll_to_top,
    Action.SCROLL_TO_BOTTOM: scroll_to_bottom,
    Action.SCROLL_PAGE_UP: scroll_page_up,
    Action.SCROLL_PAGE_DOWN: scroll_page_down,
    Action.SCROLL_HALF_PAGE_UP: scroll_half_page_up,
    Action.SCROLL_HALF_PAGE_DOWN: scroll_half_page_down,
    Action.HISTORY_BACK: history_back,
    Action.HISTORY_FORWARD: history_forward,
    Action.RELOAD: reload,
    Action.OPEN: open_prompt,
    Action.OPEN_WITH_CURRENT_URL: open_with_current_url,
    Action.WINDOW_OPEN: window_open_prompt,
    Action.SEARCH_FORWARD: search_forward,
    Action.SEARCH_BACKWARD: search_backward,
    Action.FIND_NEXT: find_next,
    Action.FIND_PREVIOUS: find_previous,
    Action.INSERT_MODE: insert_mode,
    Action.FOLLOW: follow,
    Action.FOLLOW_NEW_WINDOW: follow_new_window,
    Action.FOLLOW_SAME_WINDOW: follow_same_window,
    Action.FOCUS_NEXT_FIELD: focus_next_field,
    Action.QUIT: quit_browser,
}


def get_action_handler(action: Action) -> ActionFunc | None:
    """Get the handler for an action."""
    return ACTION_HANDLERS.get(action)


def execute_action(action: Action, engine: ModalEngine) -> None:
    """Run an action against the engine and its surface."""
    handler = get_action_handler(action)
    if handler is None:
        logger.warning("No handler for action %s", action.value)
        return
    logger.debug("Executing action %s", action.value)
    handler(engine)
