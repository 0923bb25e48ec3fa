"""One rendering step of a scrolling marquee."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Literal, cast

from tmux_marquee.ansi import ansi_to_style
from tmux_marquee.state_store import ScrollState, StateBackend
from tmux_marquee.tokens import (
    content_hash,
    text_width,
    tokenize,
    truncate_codepoints,
)
from tmux_marquee.window import slice_columns

logger = logging.getLogger(__name__)

Direction = Literal["left", "right", "bounce"]
DIRECTIONS: tuple[Direction, ...] = ("left", "right", "bounce")


@dataclass(frozen=True)
class MarqueeOptions:
    """Rendering options for one marquee instance."""

    width: int = 30
    instance_id: str = "default"
    speed: int = 1
    separator: str = " - "
    direction: Direction = "left"
    pad: bool = True
    scroll_delay: int = 0
    max_length: int = 0


def normalize_direction(value: object) -> Direction:
    """Return a known direction; anything unrecognized scrolls left."""
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in DIRECTIONS:
            return cast(Direction, lowered)
    return "left"


def bounce_offset(position: int, text_cols: int, width: int) -> int:
    """Fold ``position`` into a triangle wave over the overflow range."""
    span = max(1, text_cols - width)
    cycle = span * 2
    offset = position % cycle
    if offset > span:
        offset = cycle - offset
    return offset


def mirror_offset(position: int, total_cols: int) -> int:
    if total_cols <= 0:
        return 0
    return (total_cols - position % total_cols) % total_cols


def render_step(text: str, options: MarqueeOptions, store: StateBackend) -> str:
    """Render one frame of ``text`` and persist the next scroll position."""
    instance_id = options.instance_id
    width = max(0, options.width)
    text = truncate_codepoints(ansi_to_style(text), options.max_length)
    if not text:
        store.clear(instance_id)
        return ""

    tokens = tokenize(text)
    text_cols = text_width(tokens)
    if text_cols <= width:
        store.clear(instance_id)
        if options.pad:
            return text + " " * (width - text_cols)
        return text

    digest = content_hash(tokens)
    state = store.load(instance_id) or ScrollState()
    if state.content_hash != digest:
        logger.debug("Content changed for %s, restarting scroll", instance_id)
        state = ScrollState(content_hash=digest)

    if options.scroll_delay > 0 and state.delay_counter < options.scroll_delay:
        store.save(
            instance_id,
            ScrollState(
                content_hash=digest,
                position=0,
                delay_counter=state.delay_counter + 1,
            ),
        )
        return slice_columns(tokens, text_cols, 0, width)

    direction = normalize_direction(options.direction)
    if direction == "bounce":
        cycle = max(1, text_cols - width) * 2
        position = state.position % cycle
        visible = slice_columns(
            tokens, text_cols, bounce_offset(position, text_cols, width), width
        )
    else:
        scroll_tokens = tokens + tokenize(options.separator)
        scroll_cols = text_width(scroll_tokens)
        position = state.position % scroll_cols
        offset = position
        if direction == "right":
            offset = mirror_offset(position, scroll_cols)
        visible = slice_columns(scroll_tokens, scroll_cols, offset, width)

    store.save(
        instance_id,
        ScrollState(
            content_hash=digest,
            position=position + max(0, options.speed),
            delay_counter=state.delay_counter,
        ),
    )
    return visible


class Marquee:
    """Marquee bound to one instance id and state backend."""

    def __init__(self, options: MarqueeOptions, store: StateBackend) -> None:
        self.options = options
        self.store = store

    def step(self, text: str) -> str:
        rendered = render_step(text, self.options, self.store)
        logger.debug(
            "Rendered id=%s direction=%s width=%d",
            self.options.instance_id,
            self.options.direction,
            self.options.width,
        )
        return rendered

    def reset(self) -> None:
        logger.debug("Reset state for %s", self.options.instance_id)
        self.store.clear(self.options.instance_id)
