"""Tests for logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

from tmux_marquee import logging_setup


def test_default_log_dir_uses_local_appdata(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LOCALAPPDATA", str(tmp_path))
    log_dir = logging_setup._default_log_dir()
    assert log_dir == tmp_path / "TmuxMarquee" / "logs"


def test_default_log_dir_uses_xdg_state(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path))
    log_dir = logging_setup._default_log_dir()
    assert log_dir == tmp_path / "tmux-marquee" / "logs"


def test_default_log_dir_falls_back_to_home(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.delenv("XDG_STATE_HOME", raising=False)
    monkeypatch.setattr(logging_setup.Path, "home", lambda: tmp_path)
    log_dir = logging_setup._default_log_dir()
    assert log_dir == tmp_path / ".local" / "state" / "tmux-marquee" / "logs"


def test_init_logging_creates_handlers(monkeypatch, tmp_path: Path) -> None:
    log_dir = tmp_path / "logs"
    monkeypatch.setattr(logging_setup, "_default_log_dir", lambda: log_dir)
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    root.handlers.clear()
    try:
        log_path = logging_setup.init_logging()
        assert log_path == log_dir / "marquee.log"
        assert any(isinstance(h, logging.Handler) for h in root.handlers)
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = original_handlers
        root.setLevel(original_level)


def test_init_logging_reads_level_from_env(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TMUX_MARQUEE_LOG_LEVEL", "debug")
    monkeypatch.setattr(logging_setup, "_default_log_dir", lambda: tmp_path)
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    root.handlers.clear()
    try:
        logging_setup.init_logging()
        assert root.level == logging.DEBUG
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = original_handlers
        root.setLevel(original_level)


def test_init_logging_invalid_level_defaults(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TMUX_MARQUEE_LOG_LEVEL", "notalevel")
    monkeypatch.setattr(logging_setup, "_default_log_dir", lambda: tmp_path)
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    root.handlers.clear()
    try:
        logging_setup.init_logging()
        assert root.level == logging.WARNING
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers = original_handlers
        root.setLevel(original_level)


def test_set_console_level_adjusts_stream_only(tmp_path: Path) -> None:
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    root.handlers.clear()
    try:
        stream_handler = logging.StreamHandler()
        file_handler = logging.FileHandler(tmp_path / "app.log")
        stream_handler.setLevel(logging.INFO)
        file_handler.setLevel(logging.INFO)
        root.addHandler(stream_handler)
        root.addHandler(file_handler)
        logging_setup.set_console_level(logging.ERROR)
        assert stream_handler.level == logging.ERROR
        assert file_handler.level == logging.INFO
        file_handler.close()
    finally:
        root.handlers = original_handlers
