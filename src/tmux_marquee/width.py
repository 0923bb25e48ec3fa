"""Display width lookup for single characters."""

from __future__ import annotations

from rich.cells import get_character_cell_size


def char_width(char: str) -> int:
    """Return the terminal column width (0, 1 or 2) of one character."""
    if not char:
        return 0
    return min(2, max(0, get_character_cell_size(char)))
