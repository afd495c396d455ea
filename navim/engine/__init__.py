"""Modal command engine for navim.

Architecture:
    ModalEngine - Main controller that handles key presses and page events
    EngineState - Tracks mode, pending command, follow labels, search
    PromptHandler - Command-line text for the open and search prompts
    BrowsingSurface - What the engine needs from the page renderer

Usage:
    from navim.engine import ModalEngine, KeyEvent

    engine = ModalEngine(surface)
    engine.set_mode_callback(on_mode_change)

    # In key handler:
    result = engine.handle_event(KeyEvent.char("f"))
    if result.quit:
        app.exit()
"""

from .engine import KeyResult, ModalEngine
from .events import (
    Event,
    KeyEvent,
    LinkHovered,
    LoadFinished,
    LoadProgress,
    LoadStarted,
    SurfaceEvent,
    TitleChanged,
    UrlChanged,
)
from .labels import generate_labels, label_length
from .prompt import PromptHandler, PromptKind, PromptResult
from .state import EngineState, FollowSession, FollowVariant, Mode, PageStatus, SearchState
from .surface import Axis, BrowsingSurface, ElementHandle, FindFlags, Point, Rect

__all__ = [
    # Core
    "ModalEngine",
    "KeyResult",
    "EngineState",
    "Mode",
    "FollowVariant",
    "FollowSession",
    "SearchState",
    "PageStatus",
    # Events
    "Event",
    "KeyEvent",
    "SurfaceEvent",
    "TitleChanged",
    "UrlChanged",
    "LoadStarted",
    "LoadProgress",
    "LoadFinished",
    "LinkHovered",
    # Labels
    "generate_labels",
    "label_length",
    # Prompt
    "PromptHandler",
    "PromptKind",
    "PromptResult",
    # Surface contract
    "Axis",
    "BrowsingSurface",
    "ElementHandle",
    "FindFlags",
    "Point",
    "Rect",
]
