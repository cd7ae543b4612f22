"""Tests for color value validation."""

from __future__ import annotations

import pytest

from vibe_themer.core.colors import invalid_color_keys, is_remove_sentinel, is_valid_color_token


@pytest.mark.parametrize(
    "value",
    ["#fff", "#FFF", "#1e1e2e", "#1E1E2E", "#1e1e2eff", "#AbCdEf80", "transparent", "INHERIT", "Initial", "unset"],
)
def test_accepts_hex_and_keywords(value: str) -> None:
    assert is_valid_color_token(value)


@pytest.mark.parametrize(
    "value",
    [
        "",
        "fff",
        "#ff",
        "#ffff",
        "#fffff",
        "#fffffff",
        "#fffffffff",
        "#ggg",
        "red",
        "rgb(0,0,0)",
        " #fff",
        "#fff ",
        "REMOVE",
        "none",
    ],
)
def test_rejects_everything_else(value: str) -> None:
    assert not is_valid_color_token(value)


@pytest.mark.parametrize("value", [None, 0, 0xFFFFFF, 1.5, ["#fff"], {"color": "#fff"}, b"#fff"])
def test_non_string_input_is_rejected_without_raising(value) -> None:
    assert is_valid_color_token(value) is False


@pytest.mark.parametrize("value", ["REMOVE", "remove", "Remove", "  REMOVE  "])
def test_remove_sentinel_is_case_insensitive(value: str) -> None:
    assert is_remove_sentinel(value)


@pytest.mark.parametrize("value", ["REMOVED", "#fff", "", None, 1])
def test_non_sentinels(value) -> None:
    assert not is_remove_sentinel(value)


def test_invalid_color_keys_lists_all_offenders_in_order() -> None:
    colors = {
        "editor.background": "#000000",
        "editor.foreground": "white",
        "sideBar.background": "#12",
        "statusBar.background": "transparent",
    }
    assert invalid_color_keys(colors) == ["editor.foreground", "sideBar.background"]
