"""Default marquee options persisted in the user's config directory."""

from __future__ import annotations

from dataclasses import replace
import json
import logging
import os
from pathlib import Path
from typing import Any

from tmux_marquee.marquee import MarqueeOptions, normalize_direction

logger = logging.getLogger(__name__)

APP_NAME = "tmux-marquee"


def get_config_dir(app_name: str = APP_NAME) -> Path:
    """Return the per-user config directory for the current platform."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        root = Path(base) if base else Path.home() / "AppData" / "Roaming"
        return root / app_name
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / app_name


def get_config_path() -> Path:
    """Return the full config file path."""
    return get_config_dir() / "config.json"


def load_config() -> MarqueeOptions:
    """Load default options from disk, falling back to built-ins on error."""
    path = get_config_path()
    if not path.is_file():
        return MarqueeOptions()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        logger.exception("Failed to load config from %s", path)
        return MarqueeOptions()
    if not isinstance(raw, dict):
        logger.warning("Ignoring config %s: expected a JSON object", path)
        return MarqueeOptions()
    return _options_from_mapping(raw)


def save_config(options: MarqueeOptions) -> None:
    """Persist default options to disk atomically."""
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_suffix(".tmp")
    data = {
        "width": options.width,
        "speed": options.speed,
        "separator": options.separator,
        "direction": options.direction,
        "pad": options.pad,
        "scroll_delay": options.scroll_delay,
        "max_length": options.max_length,
    }
    temp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    os.replace(temp_path, path)


def _get_bool(raw: dict[str, Any], key: str, default: bool) -> bool:
    value = raw.get(key, default)
    return value if isinstance(value, bool) else default


def _get_int(
    raw: dict[str, Any],
    key: str,
    default: int,
    *,
    min_value: int = 0,
) -> int:
    """Fetch an integer value, clamped to ``min_value``."""
    value = raw.get(key, default)
    if not isinstance(value, int) or isinstance(value, bool):
        value = default
    return max(min_value, value)


def _get_str(raw: dict[str, Any], key: str, default: str) -> str:
    value = raw.get(key, default)
    return value if isinstance(value, str) else default


def _options_from_mapping(raw: dict[str, Any]) -> MarqueeOptions:
    """Normalize raw JSON data into MarqueeOptions."""
    defaults = MarqueeOptions()
    return replace(
        defaults,
        width=_get_int(raw, "width", defaults.width),
        speed=_get_int(raw, "speed", defaults.speed, min_value=1),
        separator=_get_str(raw, "separator", defaults.separator),
        direction=normalize_direction(raw.get("direction", defaults.direction)),
        pad=_get_bool(raw, "pad", defaults.pad),
        scroll_delay=_get_int(raw, "scroll_delay", defaults.scroll_delay),
        max_length=_get_int(raw, "max_length", defaults.max_length),
    )
