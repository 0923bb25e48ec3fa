"""Per-instance scroll state persisted between invocations."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path
import random
import time
from typing import Protocol

logger = logging.getLogger(__name__)

APP_DIR_NAME = "tmux-marquee"
STALE_AFTER_SECONDS = 3600.0
SWEEP_CHANCE = 0.01


@dataclass(frozen=True)
class ScrollState:
    content_hash: str = ""
    position: int = 0
    delay_counter: int = 0


class StateBackend(Protocol):
    def load(self, instance_id: str) -> ScrollState | None:
        ...

    def save(self, instance_id: str, state: ScrollState) -> None:
        ...

    def clear(self, instance_id: str) -> None:
        ...


def state_directory() -> Path:
    """Return the directory that holds scroll state files."""
    for var in ("XDG_RUNTIME_DIR", "TMPDIR"):
        base = os.environ.get(var)
        if base:
            return Path(base) / APP_DIR_NAME
    return Path("/tmp") / APP_DIR_NAME


def _safe_name(instance_id: str) -> str:
    name = instance_id.replace(os.sep, "_").replace("/", "_")
    if os.altsep:
        name = name.replace(os.altsep, "_")
    if name in ("", ".", ".."):
        name = f"_{name}"
    return name


def _parse_int(value: str) -> int:
    try:
        return max(0, int(value.strip()))
    except ValueError:
        return 0


def parse_record(raw: str) -> ScrollState | None:
    """Parse a ``hash\\nposition\\ndelay`` record."""
    lines = raw.split("\n")
    if len(lines) < 3:
        return None
    return ScrollState(
        content_hash=lines[0],
        position=_parse_int(lines[1]),
        delay_counter=_parse_int(lines[2]),
    )


def format_record(state: ScrollState) -> str:
    return f"{state.content_hash}\n{state.position}\n{state.delay_counter}\n"


class StateStore:
    """File-backed state, one small text record per instance id."""

    def __init__(self, directory: Path | None = None) -> None:
        self._directory = directory or state_directory()

    @property
    def directory(self) -> Path:
        return self._directory

    def ensure_directory(self) -> bool:
        try:
            self._directory.mkdir(mode=0o700, parents=True, exist_ok=True)
        except OSError:
            logger.warning("Cannot create state directory %s", self._directory)
            return False
        return True

    def path_for(self, instance_id: str) -> Path:
        return self._directory / _safe_name(instance_id)

    def load(self, instance_id: str) -> ScrollState | None:
        path = self.path_for(instance_id)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError):
            logger.warning("Failed to read state from %s", path, exc_info=True)
            return None
        return parse_record(raw)

    def save(self, instance_id: str, state: ScrollState) -> None:
        """Persist ``state`` atomically; failures are logged, not raised."""
        path = self.path_for(instance_id)
        temp_path = path.with_name(f"{path.name}.tmp.{os.getpid()}")
        try:
            temp_path.write_text(format_record(state), encoding="utf-8")
            os.replace(temp_path, path)
        except OSError:
            logger.warning("Failed to write state to %s", path, exc_info=True)
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                logger.debug("Could not remove %s", temp_path)

    def clear(self, instance_id: str) -> None:
        path = self.path_for(instance_id)
        try:
            path.unlink(missing_ok=True)
        except OSError:
            logger.warning("Failed to remove state %s", path, exc_info=True)

    def sweep(self, max_age: float = STALE_AFTER_SECONDS) -> int:
        """Delete state files untouched for ``max_age`` seconds."""
        cutoff = time.time() - max_age
        removed = 0
        try:
            entries = list(self._directory.iterdir())
        except OSError:
            return 0
        for entry in entries:
            try:
                if not entry.is_file() or entry.stat().st_mtime >= cutoff:
                    continue
                entry.unlink()
            except OSError:
                continue
            removed += 1
        if removed:
            logger.info(
                "Removed %d stale state files from %s", removed, self._directory
            )
        return removed

    def maybe_sweep(
        self, chance: float = SWEEP_CHANCE, rng: random.Random | None = None
    ) -> int:
        roll = rng.random() if rng is not None else random.random()
        if roll >= chance:
            return 0
        return self.sweep()


class MemoryStateStore:
    """In-process state store with the same interface as ``StateStore``."""

    def __init__(self) -> None:
        self.states: dict[str, ScrollState] = {}

    def load(self, instance_id: str) -> ScrollState | None:
        return self.states.get(instance_id)

    def save(self, instance_id: str, state: ScrollState) -> None:
        self.states[instance_id] = state

    def clear(self, instance_id: str) -> None:
        self.states.pop(instance_id, None)
