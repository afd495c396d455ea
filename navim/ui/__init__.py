"""Textual host for navim."""

from .app import NavimApp
from .keys import to_key_event
from .status import format_scroll_position, format_title

__all__ = ["NavimApp", "format_scroll_position", "format_title", "to_key_event"]
