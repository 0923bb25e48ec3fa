"""Column-accurate windowing over a token stream."""

from __future__ import annotations

from typing import Sequence

from tmux_marquee.tokens import Token

MAX_LAPS = 3


def column_positions(tokens: Sequence[Token]) -> list[int]:
    """Return the display column at which each token starts."""
    positions: list[int] = []
    column = 0
    for token in tokens:
        positions.append(column)
        if not token.is_style:
            column += token.width
    return positions


def slice_columns(
    tokens: Sequence[Token], total_width: int, offset: int, width: int
) -> str:
    """Render ``width`` columns of ``tokens`` starting at column ``offset``.

    Styles in effect at the cut point are replayed first, the stream wraps
    around when it runs out (at most ``MAX_LAPS`` passes), and a wide glyph
    that would straddle the right edge is replaced by one space.
    """
    if total_width <= 0:
        return ""
    offset %= total_width
    positions = column_positions(tokens)

    out: list[str] = []
    for token, column in zip(tokens, positions):
        if token.is_style:
            if column <= offset:
                out.append(token.text)
        elif column >= offset:
            break

    start = 0
    for index, (token, column) in enumerate(zip(tokens, positions)):
        if not token.is_style and column >= offset:
            start = index
            break

    filled = 0
    count = len(tokens)
    index = start
    laps = 0
    while filled < width and laps < MAX_LAPS:
        while index < count and filled < width:
            token = tokens[index]
            if token.is_style:
                out.append(token.text)
                index += 1
                continue
            if filled + token.width > width:
                out.append(" ")
                filled = width
                break
            out.append(token.text)
            filled += token.width
            index += 1
        index = 0
        laps += 1
    return "".join(out)
