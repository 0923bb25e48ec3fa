"""Command-line interface for tmux-marquee."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from typing import IO, Iterable, Optional

from tmux_marquee import __version__
from tmux_marquee.config import get_config_path, load_config, save_config
from tmux_marquee.logging_setup import init_logging
from tmux_marquee.marquee import DIRECTIONS, Marquee, MarqueeOptions
from tmux_marquee.state_store import StateStore

logger = logging.getLogger(__name__)

EPILOG = """\
examples:
  set -g status-right '#(my-cmd | tmux-marquee -w 30 -i sr)'
  set -g status-right '#(my-cmd | tmux-marquee -w #{client_width} -i sr)'
  set -g status-right '#(a | tmux-marquee -w 20 -i a) #(b | tmux-marquee -w 20 -i b)'
"""


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0: {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="tmux-marquee",
        description="Scroll text for the tmux status bar.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-w", "--width", type=_non_negative_int, help="Display width in columns"
    )
    parser.add_argument(
        "-i", "--id", dest="instance_id", help="Instance ID for independent state"
    )
    parser.add_argument(
        "-s", "--speed", type=_non_negative_int, help="Columns to advance per tick"
    )
    parser.add_argument("--separator", help="Text between loop iterations")
    parser.add_argument(
        "--direction",
        help=f"Scroll direction: {', '.join(DIRECTIONS)} (unknown values scroll left)",
    )
    parser.add_argument(
        "--pad",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Pad short text with trailing spaces",
    )
    parser.add_argument(
        "--scroll-delay",
        type=_non_negative_int,
        help="Wait N ticks before starting to scroll",
    )
    parser.add_argument(
        "--max-length",
        type=_non_negative_int,
        help="Truncate input beyond N characters (0 = unlimited)",
    )
    parser.add_argument(
        "--reset", action="store_true", help="Clear state for this ID and exit"
    )
    parser.add_argument("--text", help="Render this text instead of reading stdin")
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Animate the marquee in a live terminal preview (needs --text)",
    )
    parser.add_argument(
        "--save-defaults",
        action="store_true",
        help="Store the given options as defaults in the config file and exit",
    )
    parser.add_argument(
        "--version", action="version", version=f"tmux-marquee {__version__}"
    )
    return parser


def resolve_options(
    args: argparse.Namespace, defaults: MarqueeOptions
) -> MarqueeOptions:
    """Overlay command-line values on top of configured defaults."""
    overrides = {
        "width": args.width,
        "instance_id": args.instance_id,
        "speed": args.speed,
        "separator": args.separator,
        "direction": args.direction,
        "pad": args.pad,
        "scroll_delay": args.scroll_delay,
        "max_length": args.max_length,
    }
    changes = {key: value for key, value in overrides.items() if value is not None}
    return replace(defaults, **changes)


def read_input(stream: IO[str]) -> str:
    """Read all of ``stream`` and drop trailing newlines."""
    buffer = getattr(stream, "buffer", None)
    if buffer is not None:
        raw = buffer.read().decode("utf-8", errors="replace")
    else:
        raw = stream.read()
    return raw.rstrip("\n")


def clean_argument(value: str) -> str:
    """Decode undecodable argv bytes the same way stdin is decoded."""
    try:
        raw = value.encode("utf-8", errors="surrogateescape")
    except UnicodeEncodeError:
        raw = value.encode("utf-8", errors="replace")
    return raw.decode("utf-8", errors="replace")


def _run_preview(text: str, options: MarqueeOptions) -> int:
    try:
        from tmux_marquee.ui.preview import run_preview
    except (ImportError, RuntimeError) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return run_preview(text, options)


def main(
    argv: Optional[Iterable[str]] = None,
    stdin: Optional[IO[str]] = None,
    stdout: Optional[IO[str]] = None,
) -> int:
    """Entry point for the CLI."""
    init_logging()
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    options = resolve_options(args, load_config())
    logger.debug("Invoked id=%s options=%s", options.instance_id, options)

    if args.preview:
        if args.text is None:
            parser.error("--preview requires --text")
        return _run_preview(clean_argument(args.text), options)

    if args.save_defaults:
        try:
            save_config(options)
        except OSError as exc:
            print(f"Cannot save defaults: {exc}", file=sys.stderr)
            return 1
        logger.info("Saved defaults to %s", get_config_path())
        return 0

    store = StateStore()
    if store.ensure_directory():
        store.maybe_sweep()
    marquee = Marquee(options, store)
    if args.reset:
        marquee.reset()
        return 0

    if args.text is not None:
        text = clean_argument(args.text).rstrip("\n")
    else:
        text = read_input(stdin or sys.stdin)
    out = stdout or sys.stdout
    out.write(marquee.step(text) + "\n")
    out.flush()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
