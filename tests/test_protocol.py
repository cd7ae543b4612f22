"""Tests for the streaming line protocol parser and line buffer."""

from __future__ import annotations

import pytest

from vibe_themer.core.protocol import (
    EMPTY_LINE_ERROR,
    INVALID_COLOR_ERROR,
    INVALID_SELECTOR_ERROR,
    INVALID_TOKEN_ERROR,
    UNKNOWN_PREFIX_ERROR,
    LineBuffer,
    parse_line,
)
from vibe_themer.core.types import SelectorSetting, TokenSetting


# --- parse_line: selectors ---


def test_selector_line_parses():
    result = parse_line("SELECTOR:editor.background=#1e1e2e")
    assert result.success
    assert result.setting == SelectorSetting(name="editor.background", color="#1e1e2e")
    assert result.setting.type == "selector"
    assert result.error is None


def test_selector_whitespace_is_trimmed_but_raw_line_kept():
    raw = "  SELECTOR: editor.foreground = #CDD6F4  "
    result = parse_line(raw)
    assert result.success
    assert result.setting == SelectorSetting(name="editor.foreground", color="#CDD6F4")
    assert result.line == raw


@pytest.mark.parametrize(
    "line",
    ["SELECTOR:", "SELECTOR:=#fff", "SELECTOR:editor.background", "SELECTOR:editor.background=", "SELECTOR: = "],
)
def test_selector_missing_parts(line):
    result = parse_line(line)
    assert not result.success
    assert result.error == INVALID_SELECTOR_ERROR
    assert result.line == line


def test_selector_invalid_color():
    result = parse_line("SELECTOR:editor.background=dark blue")
    assert not result.success
    assert result.error == INVALID_COLOR_ERROR


def test_selector_splits_on_first_equals_only():
    result = parse_line("SELECTOR:editor.background=#fff=#000")
    assert not result.success
    assert result.error == INVALID_COLOR_ERROR


@pytest.mark.parametrize("value", ["REMOVE", "remove", "Remove"])
def test_selector_remove_sentinel_is_accepted(value):
    result = parse_line(f"SELECTOR:statusBar.background={value}")
    assert result.success
    assert result.setting.color == value


# --- parse_line: tokens ---


def test_token_line_with_font_style():
    result = parse_line("TOKEN:comment=#6c7086,italic")
    assert result.success
    assert result.setting == TokenSetting(scope="comment", color="#6c7086", font_style="italic")
    assert result.setting.type == "token"


def test_token_line_without_font_style():
    result = parse_line("TOKEN:keyword.control=#cba6f7")
    assert result.success
    assert result.setting == TokenSetting(scope="keyword.control", color="#cba6f7")
    assert result.setting.font_style is None


def test_token_trailing_comma_means_no_font_style():
    result = parse_line("TOKEN:string=#a6e3a1,")
    assert result.success
    assert result.setting.font_style is None


def test_token_font_style_allows_space_separated_styles():
    result = parse_line("TOKEN:entity.name.function=#89b4fa, bold underline")
    assert result.success
    assert result.setting.font_style == "bold underline"


def test_token_font_style_drops_fields_after_the_second_comma():
    result = parse_line("TOKEN:comment=#6a9955,italic,bold")
    assert result.success
    assert result.setting == TokenSetting(scope="comment", color="#6a9955", font_style="italic")


@pytest.mark.parametrize("line", ["TOKEN:", "TOKEN:=#fff", "TOKEN:comment", "TOKEN:comment=", "TOKEN:comment=,italic"])
def test_token_missing_parts(line):
    result = parse_line(line)
    assert not result.success
    assert result.error == INVALID_TOKEN_ERROR


def test_token_invalid_color():
    result = parse_line("TOKEN:comment=grey,italic")
    assert not result.success
    assert result.error == INVALID_COLOR_ERROR


def test_token_remove_sentinel_is_accepted():
    result = parse_line("TOKEN:comment=REMOVE")
    assert result.success
    assert result.setting == TokenSetting(scope="comment", color="REMOVE")


# --- parse_line: everything else ---


@pytest.mark.parametrize("line", ["", "   ", "\t", "\r"])
def test_empty_lines(line):
    result = parse_line(line)
    assert not result.success
    assert result.error == EMPTY_LINE_ERROR
    assert result.line == line


@pytest.mark.parametrize(
    "line",
    [
        "Here is your theme:",
        "COUNT:42",
        "MESSAGE:Enjoy the vibes",
        "selector:editor.background=#fff",
        "```",
        "1. SELECTOR:editor.background=#fff",
    ],
)
def test_unknown_prefix(line):
    result = parse_line(line)
    assert not result.success
    assert result.error == UNKNOWN_PREFIX_ERROR
    assert result.line == line


def test_parse_is_deterministic():
    line = "TOKEN:comment=#6c7086,italic"
    assert parse_line(line) == parse_line(line)


@pytest.mark.parametrize(
    "setting",
    [
        SelectorSetting(name="editor.background", color="#1e1e2e"),
        SelectorSetting(name="tab.activeBorder", color="transparent"),
        SelectorSetting(name="focusBorder", color="REMOVE"),
        TokenSetting(scope="comment", color="#6c7086", font_style="italic"),
        TokenSetting(scope="constant.numeric", color="#fab387ff"),
    ],
)
def test_formatted_settings_parse_back_to_themselves(setting):
    if isinstance(setting, SelectorSetting):
        line = f"SELECTOR:{setting.name}={setting.color}"
    else:
        suffix = f",{setting.font_style}" if setting.font_style else ""
        line = f"TOKEN:{setting.scope}={setting.color}{suffix}"
    assert parse_line(line).setting == setting


# --- LineBuffer ---


def test_line_buffer_reassembles_split_chunks():
    buffer = LineBuffer()
    assert buffer.feed("SELECTOR:editor.back") == []
    assert buffer.feed("ground=#1e1e2e\nTOKEN:com") == ["SELECTOR:editor.background=#1e1e2e"]
    assert buffer.pending == "TOKEN:com"
    assert buffer.feed("ment=#6c7086\n") == ["TOKEN:comment=#6c7086"]
    assert buffer.flush() is None


def test_line_buffer_multiple_lines_in_one_chunk_keep_order():
    buffer = LineBuffer()
    lines = buffer.feed("a\nb\n\nc\n")
    assert lines == ["a", "b", "", "c"]


def test_line_buffer_strips_carriage_returns():
    buffer = LineBuffer()
    assert buffer.feed("one\r\ntwo\r") == ["one"]
    assert buffer.feed("\n") == ["two"]


def test_line_buffer_flush_returns_trailing_partial_line():
    buffer = LineBuffer()
    buffer.feed("SELECTOR:a=#fff\nSELECTOR:b=#000")
    assert buffer.flush() == "SELECTOR:b=#000"
    assert buffer.pending == ""
    assert buffer.flush() is None


def test_line_buffer_ignores_empty_chunks():
    buffer = LineBuffer()
    assert buffer.feed("") == []
    assert buffer.pending == ""
