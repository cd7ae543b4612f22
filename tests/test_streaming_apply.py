"""Tests for applying streamed settings to the store."""

from __future__ import annotations

import pytest

from vibe_themer.core.apply import (
    PERMISSION_SUGGESTION,
    apply_streaming_setting,
    apply_with_fallback,
    determine_configuration_scope,
)
from vibe_themer.core.types import COLOR_CUSTOMIZATIONS_SECTION as COLORS
from vibe_themer.core.types import TOKEN_COLOR_CUSTOMIZATIONS_SECTION as TOKENS
from vibe_themer.core.types import (
    ConfigurationScope,
    ConfigurationTarget,
    SelectorSetting,
    TokenSetting,
)
from vibe_themer.store import InMemoryConfigurationStore

GLOBAL = ConfigurationTarget.GLOBAL
WORKSPACE = ConfigurationTarget.WORKSPACE


# --- scope and fallback combinator ---


def test_scope_without_workspace_folders_is_global_only():
    scope = determine_configuration_scope(False)
    assert scope.type == "global"
    assert scope.targets() == [GLOBAL]


def test_scope_with_workspace_folders_tries_global_then_workspace():
    scope = determine_configuration_scope(True)
    assert scope.type == "both"
    assert scope.targets() == [GLOBAL, WORKSPACE]


@pytest.mark.asyncio
async def test_fallback_stops_at_first_success():
    attempted = []

    async def attempt(target):
        attempted.append(target)

    result = await apply_with_fallback(
        ConfigurationScope.both(GLOBAL, WORKSPACE), attempt, failure_message="nope"
    )
    assert result.success
    assert result.applied_target is GLOBAL
    assert attempted == [GLOBAL]


@pytest.mark.asyncio
async def test_fallback_tries_next_target_after_failure():
    attempted = []

    async def attempt(target):
        attempted.append(target)
        if target is GLOBAL:
            raise PermissionError("read-only")

    result = await apply_with_fallback(
        ConfigurationScope.both(GLOBAL, WORKSPACE), attempt, failure_message="nope"
    )
    assert result.success
    assert result.applied_scope.type == "both"
    assert result.applied_target is WORKSPACE
    assert attempted == [GLOBAL, WORKSPACE]


@pytest.mark.asyncio
async def test_fallback_aggregates_failure_with_last_cause():
    async def attempt(target):
        raise PermissionError(target.value)

    result = await apply_with_fallback(
        ConfigurationScope.both(GLOBAL, WORKSPACE), attempt, failure_message="all failed"
    )
    assert not result.success
    assert result.error.message == "all failed"
    assert result.error.recoverable is True
    assert result.error.suggested_action == PERMISSION_SUGGESTION
    assert str(result.error.cause) == "workspace"


# --- selectors ---


@pytest.mark.asyncio
async def test_selector_merges_into_existing_colors():
    store = InMemoryConfigurationStore(global_settings={COLORS: {"editor.foreground": "#ffffff"}})
    result = await apply_streaming_setting(
        SelectorSetting("editor.background", "#1e1e2e"), store, False
    )
    assert result.success
    assert result.applied_scope.type == "global"
    assert store.snapshot(GLOBAL)[COLORS] == {
        "editor.foreground": "#ffffff",
        "editor.background": "#1e1e2e",
    }


@pytest.mark.asyncio
async def test_selector_last_write_wins():
    store = InMemoryConfigurationStore()
    await apply_streaming_setting(SelectorSetting("editor.background", "#000000"), store, False)
    await apply_streaming_setting(SelectorSetting("editor.background", "#111111"), store, False)
    assert store.snapshot(GLOBAL)[COLORS] == {"editor.background": "#111111"}


@pytest.mark.asyncio
async def test_selector_remove_deletes_key_and_is_idempotent():
    store = InMemoryConfigurationStore(
        global_settings={COLORS: {"editor.background": "#000000", "focusBorder": "#ff0000"}}
    )
    remove = SelectorSetting("focusBorder", "REMOVE")

    first = await apply_streaming_setting(remove, store, False)
    after_first = store.snapshot(GLOBAL)
    second = await apply_streaming_setting(remove, store, False)

    assert first.success and second.success
    assert after_first[COLORS] == {"editor.background": "#000000"}
    assert store.snapshot(GLOBAL) == after_first


@pytest.mark.asyncio
async def test_selector_remove_of_absent_key_is_a_noop():
    store = InMemoryConfigurationStore(global_settings={COLORS: {"editor.background": "#000000"}})
    result = await apply_streaming_setting(SelectorSetting("nothing.here", "remove"), store, False)
    assert result.success
    assert store.snapshot(GLOBAL)[COLORS] == {"editor.background": "#000000"}


@pytest.mark.asyncio
async def test_selector_merges_with_the_target_being_written_not_the_merged_view():
    store = InMemoryConfigurationStore(
        global_settings={COLORS: {"a": "#111111"}},
        workspace_settings={COLORS: {"b": "#222222"}},
        has_workspace_folders=True,
    )
    await apply_streaming_setting(SelectorSetting("c", "#333333"), store, True)
    assert store.snapshot(GLOBAL)[COLORS] == {"a": "#111111", "c": "#333333"}
    assert store.snapshot(WORKSPACE)[COLORS] == {"b": "#222222"}


@pytest.mark.asyncio
async def test_selector_falls_back_to_workspace_when_global_write_fails():
    store = InMemoryConfigurationStore(has_workspace_folders=True, fail_writes_for={GLOBAL})
    result = await apply_streaming_setting(SelectorSetting("editor.background", "#000"), store, True)
    assert result.success
    assert result.applied_target is WORKSPACE
    assert store.snapshot(WORKSPACE)[COLORS] == {"editor.background": "#000"}
    assert COLORS not in store.snapshot(GLOBAL)


@pytest.mark.asyncio
async def test_all_targets_failing_is_a_recoverable_failure():
    store = InMemoryConfigurationStore(fail_writes_for={GLOBAL, WORKSPACE})
    result = await apply_streaming_setting(SelectorSetting("editor.background", "#000"), store, True)
    assert not result.success
    assert result.error.message == "Failed to apply selector setting: editor.background"
    assert result.error.recoverable is True
    assert result.error.suggested_action == PERMISSION_SUGGESTION


# --- tokens ---


@pytest.mark.asyncio
async def test_token_appends_rule_with_font_style():
    store = InMemoryConfigurationStore()
    await apply_streaming_setting(TokenSetting("comment", "#6c7086", "italic"), store, False)
    assert store.snapshot(GLOBAL)[TOKENS] == {
        "textMateRules": [
            {"scope": "comment", "settings": {"foreground": "#6c7086", "fontStyle": "italic"}}
        ]
    }


@pytest.mark.asyncio
async def test_token_replaces_every_rule_with_same_scope_and_keeps_others():
    existing = {
        "comments": "#888888",
        "textMateRules": [
            {"scope": "comment", "settings": {"foreground": "#111111"}},
            {"scope": "string", "settings": {"foreground": "#222222"}},
            {"scope": "comment", "settings": {"foreground": "#333333"}},
            {"scope": ["comment", "string"], "settings": {"foreground": "#444444"}},
        ],
    }
    store = InMemoryConfigurationStore(global_settings={TOKENS: existing})

    await apply_streaming_setting(TokenSetting("comment", "#6c7086"), store, False)

    tokens = store.snapshot(GLOBAL)[TOKENS]
    assert tokens["comments"] == "#888888"
    assert tokens["textMateRules"] == [
        {"scope": "string", "settings": {"foreground": "#222222"}},
        {"scope": ["comment", "string"], "settings": {"foreground": "#444444"}},
        {"scope": "comment", "settings": {"foreground": "#6c7086"}},
    ]


@pytest.mark.asyncio
async def test_token_remove_drops_rule_without_adding_one_and_is_idempotent():
    store = InMemoryConfigurationStore(
        global_settings={
            TOKENS: {
                "textMateRules": [
                    {"scope": "comment", "settings": {"foreground": "#111111"}},
                    {"scope": "string", "settings": {"foreground": "#222222"}},
                ]
            }
        }
    )
    remove = TokenSetting("comment", "REMOVE")

    await apply_streaming_setting(remove, store, False)
    after_first = store.snapshot(GLOBAL)
    await apply_streaming_setting(remove, store, False)

    assert after_first[TOKENS]["textMateRules"] == [
        {"scope": "string", "settings": {"foreground": "#222222"}}
    ]
    assert store.snapshot(GLOBAL) == after_first


@pytest.mark.asyncio
async def test_token_failure_message_names_the_scope():
    store = InMemoryConfigurationStore(fail_writes_for={GLOBAL})
    result = await apply_streaming_setting(TokenSetting("keyword", "#ff0000"), store, False)
    assert not result.success
    assert result.error.message == "Failed to apply token setting: keyword"
