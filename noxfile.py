"""Nox sessions for tmux-marquee development tasks."""

from __future__ import annotations

from pathlib import Path

import nox


ROOT = Path(__file__).parent
PACKAGE = "src/tmux_marquee"

nox.options.error_on_missing_interpreters = False
nox.options.sessions = ["lint", "typecheck", "tests"]


def _has_mypy_config() -> bool:
    if (ROOT / "mypy.ini").is_file():
        return True
    pyproject = ROOT / "pyproject.toml"
    if pyproject.is_file():
        return "[tool.mypy]" in pyproject.read_text(encoding="utf-8")
    return False


@nox.session
def lint(session: nox.Session) -> None:
    """Run ruff linting and formatting checks."""
    session.install("ruff")
    session.run("ruff", "check", ".")
    session.run("ruff", "format", "--check", ".")


@nox.session(name="lint-fix")
def lint_fix(session: nox.Session) -> None:
    """Apply ruff fixes and formatting."""
    session.install("ruff")
    session.run("ruff", "check", "--fix", ".")
    session.run("ruff", "format", ".")


@nox.session
def tests(session: nox.Session) -> None:
    """Run pytest with the package installed in editable mode."""
    session.install("-e", ".[dev]")
    session.run("pytest", "-q", *session.posargs)


@nox.session
def typecheck(session: nox.Session) -> None:
    """Run mypy when a config is present."""
    if not _has_mypy_config():
        session.skip("mypy config not found")
    session.install("-e", ".", "mypy")
    session.run("mypy", PACKAGE)


@nox.session
def coverage(session: nox.Session) -> None:
    """Run the suite under coverage and enforce the floor."""
    session.install("-e", ".[dev]", "coverage")
    session.run("coverage", "run", "--source=tmux_marquee", "-m", "pytest")
    session.run("coverage", "report", "--fail-under=85", "-m")


@nox.session
def build(session: nox.Session) -> None:
    """Build sdist and wheel artifacts."""
    session.install("build")
    session.run("python", "-m", "build")


@nox.session(name="tests-dev", venv_backend="none")
def tests_dev(session: nox.Session) -> None:
    """Fast local pytest using the active venv."""
    session.run("python", "-m", "pytest", "-q", *session.posargs, external=True)


@nox.session(venv_backend="none")
def demo(session: nox.Session) -> None:
    """Print a few frames of each scroll direction using the active venv."""
    sample = "\x1b[1;36mNow playing:\x1b[0m Some Artist - 長い曲名 (live)"
    for direction in ("left", "right", "bounce"):
        session.run(
            "python",
            "-m",
            "tmux_marquee",
            "--reset",
            "-i",
            f"demo-{direction}",
            external=True,
        )
        for _ in range(3):
            session.run(
                "python",
                "-m",
                "tmux_marquee",
                "-w",
                "20",
                "-i",
                f"demo-{direction}",
                "--direction",
                direction,
                "--text",
                sample,
                external=True,
            )
