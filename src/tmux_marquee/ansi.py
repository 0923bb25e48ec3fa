"""Translate ANSI SGR escape sequences into tmux style directives."""

from __future__ import annotations

ESC = "\x1b"
CSI = ESC + "["

ANSI_COLORS = (
    "black",
    "red",
    "green",
    "yellow",
    "blue",
    "magenta",
    "cyan",
    "white",
)

_SIMPLE_ATTRIBUTES: dict[int, tuple[str, ...]] = {
    0: ("default",),
    1: ("bold",),
    2: ("dim",),
    3: ("italics",),
    4: ("underscore",),
    7: ("reverse",),
    9: ("strikethrough",),
    22: ("nobold", "nodim"),
    23: ("noitalics",),
    24: ("nounderscore",),
    27: ("noreverse",),
    29: ("nostrikethrough",),
    39: ("fg=default",),
    49: ("bg=default",),
}

_PARAM_CHARS = frozenset("0123456789;")


def _to_int(value: str) -> int | None:
    try:
        return int(value)
    except ValueError:
        return None


def ansi_to_style(text: str) -> str:
    """Return text with SGR sequences rewritten as ``#[...]`` directives.

    Other CSI sequences are removed. An unterminated CSI sequence drops the
    rest of the input from its ESC onward.
    """
    if ESC not in text:
        return text
    out: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        if text.startswith(CSI, i):
            j = i + 2
            while j < n and text[j] in _PARAM_CHARS:
                j += 1
            if j >= n:
                break
            if text[j] == "m":
                attributes = sgr_to_attributes(text[i + 2 : j])
                if attributes:
                    out.append("#[" + ",".join(attributes) + "]")
            i = j + 1
            continue
        out.append(text[i])
        i += 1
    return "".join(out)


def sgr_to_attributes(params: str) -> list[str]:
    """Map one SGR parameter string (``"1;31"``) to directive attributes."""
    if params == "" or params == "0":
        return ["default"]
    codes = params.split(";")
    attributes: list[str] = []
    index = 0
    while index < len(codes):
        code = _to_int(codes[index])
        index += 1
        if code is None:
            continue
        if code in _SIMPLE_ATTRIBUTES:
            attributes.extend(_SIMPLE_ATTRIBUTES[code])
        elif 30 <= code <= 37:
            attributes.append(f"fg={ANSI_COLORS[code - 30]}")
        elif 40 <= code <= 47:
            attributes.append(f"bg={ANSI_COLORS[code - 40]}")
        elif 90 <= code <= 97:
            attributes.append(f"fg=bright{ANSI_COLORS[code - 90]}")
        elif 100 <= code <= 107:
            attributes.append(f"bg=bright{ANSI_COLORS[code - 100]}")
        elif code in (38, 48):
            layer = "fg" if code == 38 else "bg"
            attribute, index = parse_extended_color(layer, codes, index)
            if attribute:
                attributes.append(attribute)
    return attributes


def parse_extended_color(
    layer: str, codes: list[str], index: int
) -> tuple[str | None, int]:
    """Parse a ``5;N`` or ``2;R;G;B`` color starting at ``codes[index]``.

    Returns the attribute (or None) and the index of the first parameter
    that was not consumed.
    """
    if index >= len(codes):
        return None, index
    mode = _to_int(codes[index])
    remaining = len(codes) - index
    if mode == 5:
        if remaining < 2:
            return None, len(codes)
        color = _to_int(codes[index + 1])
        if color is None:
            return None, index + 2
        return f"{layer}=colour{color}", index + 2
    if mode == 2:
        if remaining < 4:
            return None, len(codes)
        channels = [_to_int(value) or 0 for value in codes[index + 1 : index + 4]]
        red, green, blue = (min(255, max(0, value)) for value in channels)
        return f"{layer}=#{red:02x}{green:02x}{blue:02x}", index + 4
    return None, index + 1
