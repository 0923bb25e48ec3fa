"""Tests for ANSI to tmux style translation."""

from __future__ import annotations

import pytest

from tmux_marquee.ansi import ansi_to_style, parse_extended_color, sgr_to_attributes


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("\x1b[31mHELLO", "#[fg=red]HELLO"),
        ("\x1b[1;38;5;200mX", "#[bold,fg=colour200]X"),
        ("\x1b[38;2;10;20;30mY", "#[fg=#0a141e]Y"),
        ("\x1b[0m", "#[default]"),
        ("\x1b[m", "#[default]"),
        ("\x1b[44;97mZ", "#[bg=blue,fg=brightwhite]Z"),
        ("\x1b[104m", "#[bg=brightblue]"),
        ("\x1b[48;5;16m", "#[bg=colour16]"),
    ],
)
def test_sgr_sequences_become_directives(raw: str, expected: str) -> None:
    assert ansi_to_style(raw) == expected


def test_non_sgr_sequences_are_stripped() -> None:
    assert ansi_to_style("a\x1b[2Jb\x1b[Hc") == "abc"
    assert ansi_to_style("\x1b[2J") == ""


def test_unterminated_sequence_drops_rest_of_input() -> None:
    assert ansi_to_style("ab\x1b[12;3") == "ab"


def test_plain_text_and_lone_escape_pass_through() -> None:
    assert ansi_to_style("plain #[bold] text") == "plain #[bold] text"
    assert ansi_to_style("a\x1bb") == "a\x1bb"


def test_unrecognized_codes_emit_nothing() -> None:
    assert ansi_to_style("\x1b[58mX") == "X"
    assert sgr_to_attributes("5;6;8") == []


def test_reset_attributes() -> None:
    assert sgr_to_attributes("22;23;24;27;29") == [
        "nobold",
        "nodim",
        "noitalics",
        "nounderscore",
        "noreverse",
        "nostrikethrough",
    ]
    assert sgr_to_attributes("39;49") == ["fg=default", "bg=default"]


def test_truncated_extended_colors_are_dropped() -> None:
    assert ansi_to_style("\x1b[38;5mX") == "X"
    assert ansi_to_style("\x1b[38;2;1;2mX") == "X"
    assert ansi_to_style("\x1b[38mX") == "X"


def test_unknown_extended_mode_consumes_only_mode() -> None:
    assert sgr_to_attributes("38;7;1") == ["bold"]


def test_parse_extended_color_cursor() -> None:
    assert parse_extended_color("bg", ["5", "9"], 0) == ("bg=colour9", 2)
    assert parse_extended_color("fg", ["1", "2", "255", "0", "16", "4"], 1) == (
        "fg=#ff0010",
        5,
    )
    assert parse_extended_color("fg", ["2", "1"], 0) == (None, 2)
    assert parse_extended_color("fg", [], 0) == (None, 0)


def test_truecolor_channels_saturate() -> None:
    assert ansi_to_style("\x1b[38;2;256;300;1000mX") == "#[fg=#ffffff]X"
    assert parse_extended_color("bg", ["2", "-5", "128", "255"], 0) == (
        "bg=#0080ff",
        4,
    )
