"""Follow-mode label generation.

Every candidate element gets a label over the lowercase alphabet. All labels
of one follow session have the same length, so no label is a prefix of
another and typing a prefix narrows the visible set unambiguously.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from string import ascii_lowercase
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .surface import BrowsingSurface, ElementHandle

ALPHABET = ascii_lowercase
BASE = len(ALPHABET)


def label_length(count: int) -> int:
    """Smallest L with 26**L >= count (at least 1 for a non-empty page).

    Computed with integers so exact powers of 26 do not round up.
    """
    if count <= 0:
        return 0
    length = 1
    capacity = BASE
    while capacity < count:
        length += 1
        capacity *= BASE
    return length


def next_label(chars: list[str]) -> None:
    """Advance a fixed-width label in place (bijective base-26 increment).

    The last character is incremented; past "z" it wraps to "a" and the carry
    moves one position to the left.
    """
    index = len(chars) - 1
    while index >= 0:
        if chars[index] != ALPHABET[-1]:
            chars[index] = ALPHABET[ALPHABET.index(chars[index]) + 1]
            return
        chars[index] = ALPHABET[0]
        index -= 1


def iter_labels(count: int) -> Iterator[str]:
    """Yield count labels in order, starting at "a" * L."""
    length = label_length(count)
    chars = [ALPHABET[0]] * length
    for _ in range(count):
        yield "".join(chars)
        next_label(chars)


def generate_labels(count: int) -> list[str]:
    return list(iter_labels(count))


def build_label_mapping(
    surface: BrowsingSurface,
    elements: Sequence[ElementHandle],
) -> dict[str, ElementHandle]:
    """Label elements in document order and draw a marker on each one."""
    mapping: dict[str, ElementHandle] = {}
    for label, element in zip(iter_labels(len(elements)), elements):
        surface.insert_marker(element, label)
        mapping[label] = element
    return mapping
