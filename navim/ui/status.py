"""Status bar text helpers."""

from __future__ import annotations


def format_scroll_position(value: int, maximum: int) -> str:
    """Vim-style position of the viewport in the page: [all], [top], [bot] or [N%]."""
    if maximum <= 0:
        return "[all]" if value <= 0 else "[bot]"
    percentage = int(value / maximum * 100)
    if percentage <= 0:
        return "[top]"
    if percentage >= 100:
        return "[bot]"
    return f"[{percentage}%]"


def format_title(title: str, progress: int, loading: bool) -> str:
    """Window title, prefixed with the load progress while a page loads."""
    if loading:
        return f"[{progress}%] {title}"
    return title
