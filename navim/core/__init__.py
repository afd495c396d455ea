"""Core, UI-agnostic models and helpers for navim."""

from .keymap import (
    Action,
    Binding,
    BindingTable,
    default_binding_table,
)
from .keymap_manager import KeymapManager
from .urls import from_user_input, resolve_href

__all__ = [
    "Action",
    "Binding",
    "BindingTable",
    "KeymapManager",
    "default_binding_table",
    "from_user_input",
    "resolve_href",
]
