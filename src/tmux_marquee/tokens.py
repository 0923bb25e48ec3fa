"""Split annotated text into style directives and display glyphs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal
import zlib

from tmux_marquee.width import char_width

TokenKind = Literal["style", "glyph"]

STYLE_OPEN = "#["
STYLE_CLOSE = "]"


@dataclass(frozen=True)
class Token:
    """One style directive or one display character."""

    kind: TokenKind
    text: str
    width: int = 0

    @property
    def is_style(self) -> bool:
        return self.kind == "style"


def style_token(text: str) -> Token:
    return Token("style", text, 0)


def glyph_token(char: str) -> Token:
    return Token("glyph", char, char_width(char))


def tokenize(text: str) -> list[Token]:
    """Return style and glyph tokens for ``text`` in their original order.

    ``#[`` without a closing ``]`` is kept as two literal glyphs.
    """
    tokens: list[Token] = []
    i = 0
    n = len(text)
    while i < n:
        if text.startswith(STYLE_OPEN, i):
            end = text.find(STYLE_CLOSE, i + 2)
            if end >= 0:
                tokens.append(style_token(text[i : end + 1]))
                i = end + 1
                continue
        tokens.append(glyph_token(text[i]))
        i += 1
    return tokens


def text_width(tokens: Iterable[Token]) -> int:
    """Return the display width of the glyph tokens."""
    return sum(token.width for token in tokens if not token.is_style)


def glyph_text(tokens: Iterable[Token]) -> str:
    return "".join(token.text for token in tokens if not token.is_style)


def content_hash(tokens: Iterable[Token]) -> str:
    """Return a CRC32 of the visible text, ignoring style directives."""
    checksum = zlib.crc32(glyph_text(tokens).encode("utf-8", "surrogatepass"))
    return str(checksum & 0xFFFFFFFF)


def truncate_codepoints(text: str, limit: int) -> str:
    """Cut ``text`` to ``limit`` codepoints; 0 keeps everything."""
    if limit <= 0 or len(text) <= limit:
        return text
    return text[:limit]
