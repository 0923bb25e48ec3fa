"""Live Textual preview of a marquee, rendered with Rich styles."""

from __future__ import annotations

from dataclasses import replace
import logging
from typing import Optional

from rich.color import Color, ColorParseError
from rich.style import Style
from rich.text import Text

from tmux_marquee.logging_setup import set_console_level
from tmux_marquee.marquee import Marquee, MarqueeOptions
from tmux_marquee.state_store import MemoryStateStore
from tmux_marquee.tokens import tokenize

try:
    from textual import events
    from textual.app import App, ComposeResult
    from textual.timer import Timer
    from textual.widgets import Static
except Exception as exc:  # pragma: no cover - depends on environment
    raise RuntimeError(
        "Textual is required for --preview. Install the 'textual' dependency."
    ) from exc

logger = logging.getLogger(__name__)

_TOGGLES = {
    "bold": "bold",
    "dim": "dim",
    "italics": "italic",
    "underscore": "underline",
    "reverse": "reverse",
    "strikethrough": "strike",
}


def _rich_color(value: str) -> Optional[str]:
    if value.startswith("colour"):
        value = f"color({value[len('colour'):]})"
    elif value.startswith("bright") and not value.startswith("bright_"):
        value = f"bright_{value[len('bright'):]}"
    try:
        Color.parse(value)
    except ColorParseError:
        return None
    return value


def directive_style(directive: str, current: Style) -> Style:
    """Apply one ``#[...]`` directive on top of ``current``."""
    body = directive[2:-1]
    style = current
    for attribute in body.split(","):
        name, _, value = attribute.strip().partition("=")
        if name == "default" and not value:
            style = Style()
        elif name in _TOGGLES:
            style += Style.parse(_TOGGLES[name])
        elif name.startswith("no") and name[2:] in _TOGGLES:
            style += Style.parse(f"not {_TOGGLES[name[2:]]}")
        elif name in ("fg", "bg") and value:
            color = _rich_color(value)
            if color is None:
                continue
            if name == "fg":
                style += Style(color=color)
            else:
                style += Style(bgcolor=color)
    return style


def style_line(rendered: str) -> Text:
    """Convert a directive-annotated line into styled Rich text."""
    text = Text(no_wrap=True, overflow="crop")
    current = Style()
    for token in tokenize(rendered):
        if token.is_style:
            current = directive_style(token.text, current)
        else:
            text.append(token.text, style=current)
    return text


class MarqueePreview(Static):
    """Animates one marquee in process using an in-memory state store."""

    def __init__(
        self,
        text: str = "",
        *,
        options: MarqueeOptions | None = None,
        step_interval: float = 0.25,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
        disabled: bool = False,
    ) -> None:
        super().__init__("", name=name, id=id, classes=classes, disabled=disabled)
        self._full_text = text
        self._options = options or MarqueeOptions()
        self._store = MemoryStateStore()
        self._step_interval = step_interval
        self._width_override: Optional[int] = None
        self._timer: Optional[Timer] = None
        self._current_line = ""

    def on_mount(self) -> None:
        self._timer = self.set_interval(self._step_interval, self._tick)
        self._tick()

    def on_unmount(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer = None

    def on_resize(self, event: events.Resize) -> None:
        self.update(style_line(self._current_line))

    @property
    def current_line(self) -> str:
        return self._current_line

    @property
    def store(self) -> MemoryStateStore:
        return self._store

    def set_text(self, text: str) -> None:
        self._full_text = text
        self._store.clear(self._options.instance_id)

    def set_width_override(self, width: Optional[int]) -> None:
        self._width_override = width

    def _available_width(self) -> int:
        if self._width_override is not None:
            return max(0, self._width_override)
        size = getattr(self, "content_size", None) or getattr(self, "size", None)
        return max(0, getattr(size, "width", 0))

    def _tick(self) -> None:
        options = replace(self._options, width=self._available_width())
        self._current_line = Marquee(options, self._store).step(self._full_text)
        self.update(style_line(self._current_line))


class PreviewApp(App):
    """Single-widget app showing the marquee until q or escape is pressed."""

    TITLE = "tmux-marquee preview"
    BINDINGS = [("q", "quit", "Quit"), ("escape", "quit", "Quit")]

    def __init__(
        self, text: str, options: MarqueeOptions, *, step_interval: float = 0.25
    ) -> None:
        super().__init__()
        self._text = text
        self._options = options
        self._step_interval = step_interval

    def compose(self) -> ComposeResult:
        preview = MarqueePreview(
            self._text,
            options=self._options,
            step_interval=self._step_interval,
            id="preview",
        )
        preview.set_width_override(self._options.width)
        yield preview


def run_preview(text: str, options: MarqueeOptions) -> int:
    """Run the preview app and return an exit code."""
    logger.info("Preview start width=%d", options.width)
    set_console_level(logging.ERROR)
    PreviewApp(text, options).run()
    return 0
