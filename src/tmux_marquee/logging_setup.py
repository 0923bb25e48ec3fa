"""Logging setup for tmux-marquee."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import os
from pathlib import Path

LOG_LEVEL_ENV = "TMUX_MARQUEE_LOG_LEVEL"


def _default_log_dir() -> Path:
    local_appdata = os.getenv("LOCALAPPDATA")
    if local_appdata:
        return Path(local_appdata) / "TmuxMarquee" / "logs"
    state_home = os.getenv("XDG_STATE_HOME")
    if state_home:
        return Path(state_home) / "tmux-marquee" / "logs"
    return Path.home() / ".local" / "state" / "tmux-marquee" / "logs"


def init_logging(app_name: str = "tmux_marquee") -> Path:
    """Initialize logging and return the log file path.

    The status line is refreshed every few seconds, so the default level
    is WARNING and only problems reach the log.
    """
    log_dir = _default_log_dir()
    log_path = log_dir / "marquee.log"
    level_name = os.getenv(LOG_LEVEL_ENV, "WARNING").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING

    logger = logging.getLogger()
    logger.setLevel(level)
    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s [%(process)d] %(name)s: %(message)s"
    )

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=2_000_000,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)

        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(level)
        stream_handler.setFormatter(formatter)

        if not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
            logger.addHandler(file_handler)
        if not any(
            isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
            for h in logger.handlers
        ):
            logger.addHandler(stream_handler)
    except OSError:
        logging.basicConfig(level=level, format=str(formatter._fmt))

    logging.getLogger(app_name).debug("Logging initialized at %s", log_path)
    return log_path


def set_console_level(level: int) -> None:
    """Adjust console (stderr) handler level."""
    root = logging.getLogger()
    for handler in root.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(
            handler, logging.FileHandler
        ):
            handler.setLevel(level)
