"""Browsing surface implementations."""

from .memory import MemoryElement, MemoryPage, MemorySurface, matches_selector

__all__ = ["MemoryElement", "MemoryPage", "MemorySurface", "matches_selector"]
