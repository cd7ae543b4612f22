"""Tests for reading the effective theme state from the store."""

from __future__ import annotations

import pytest

from vibe_themer.core.state import (
    get_current_color_customizations,
    get_current_customization_scope,
    get_current_theme_state,
    get_current_token_color_customizations,
)
from vibe_themer.core.types import COLOR_CUSTOMIZATIONS_SECTION as COLORS
from vibe_themer.core.types import ConfigurationTarget
from vibe_themer.core.types import TOKEN_COLOR_CUSTOMIZATIONS_SECTION as TOKENS
from vibe_themer.store import InMemoryConfigurationStore


@pytest.mark.asyncio
async def test_workspace_colors_override_global():
    store = InMemoryConfigurationStore(
        global_settings={COLORS: {"editor.background": "#000000", "editor.foreground": "#ffffff"}},
        workspace_settings={COLORS: {"editor.background": "#112233"}},
        has_workspace_folders=True,
    )
    colors = await get_current_color_customizations(store)
    assert colors == {"editor.background": "#112233", "editor.foreground": "#ffffff"}


@pytest.mark.asyncio
async def test_workspace_token_map_replaces_global_rules_list():
    global_rules = [{"scope": "comment", "settings": {"foreground": "#777777"}}]
    workspace_rules = [{"scope": "string", "settings": {"foreground": "#a6e3a1"}}]
    store = InMemoryConfigurationStore(
        global_settings={TOKENS: {"textMateRules": global_rules, "comments": "#888888"}},
        workspace_settings={TOKENS: {"textMateRules": workspace_rules}},
    )
    tokens = await get_current_token_color_customizations(store)
    assert tokens == {"textMateRules": workspace_rules, "comments": "#888888"}


@pytest.mark.asyncio
async def test_non_mapping_values_read_as_empty():
    store = InMemoryConfigurationStore(global_settings={COLORS: "oops", TOKENS: ["bad"]})
    assert await get_current_color_customizations(store) == {}
    assert await get_current_token_color_customizations(store) == {}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("global_settings", "workspace_settings", "expected"),
    [
        ({}, {}, "global"),
        ({COLORS: {"a": "#fff"}}, {}, "global"),
        ({}, {COLORS: {"a": "#fff"}}, "workspace"),
        ({}, {TOKENS: {"textMateRules": []}}, "workspace"),
        ({COLORS: {"a": "#fff"}}, {TOKENS: {"textMateRules": []}}, "both"),
        ({COLORS: {}}, {COLORS: {}}, "global"),
    ],
)
async def test_customization_scope(global_settings, workspace_settings, expected):
    store = InMemoryConfigurationStore(
        global_settings=global_settings, workspace_settings=workspace_settings
    )
    assert await get_current_customization_scope(store) == expected


@pytest.mark.asyncio
async def test_theme_state_on_fresh_store():
    result = await get_current_theme_state(InMemoryConfigurationStore())
    assert result.success
    assert result.state.has_customizations is False
    assert result.state.color_customizations == {}
    assert result.state.token_color_customizations == {}
    assert result.state.scope == "global"


@pytest.mark.asyncio
async def test_theme_state_has_customizations_with_tokens_only():
    store = InMemoryConfigurationStore(
        global_settings={TOKENS: {"textMateRules": [{"scope": "comment", "settings": {}}]}}
    )
    result = await get_current_theme_state(store)
    assert result.success
    assert result.state.has_customizations is True


@pytest.mark.asyncio
async def test_read_failure_is_a_recoverable_structured_error():
    store = InMemoryConfigurationStore(fail_reads=True)
    result = await get_current_theme_state(store)
    assert not result.success
    assert result.state is None
    assert result.error.recoverable is True
    assert result.error.suggested_action
    assert isinstance(result.error.cause, OSError)


@pytest.mark.asyncio
async def test_state_is_a_fresh_snapshot_each_read():
    store = InMemoryConfigurationStore(global_settings={COLORS: {"a": "#fff"}})
    first = await get_current_theme_state(store)
    first.state.color_customizations["b"] = "#000"

    second = await get_current_theme_state(store)
    assert second.state.color_customizations == {"a": "#fff"}


class _ChangingStore(InMemoryConfigurationStore):
    """Records reads and gains a workspace color once the first four have happened."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.reads: list[tuple[str, ConfigurationTarget]] = []

    async def read(self, section, target):
        self.reads.append((section, target))
        if len(self.reads) == 5:
            await self.write(
                COLORS, {"editor.background": "#ff0000"}, ConfigurationTarget.WORKSPACE
            )
        return await super().read(section, target)


@pytest.mark.asyncio
async def test_theme_state_reads_each_section_once_per_level():
    store = _ChangingStore(global_settings={COLORS: {"editor.foreground": "#ffffff"}})

    result = await get_current_theme_state(store)

    assert len(store.reads) == 4
    assert set(store.reads) == {
        (section, target) for section in (COLORS, TOKENS) for target in ConfigurationTarget
    }
    assert result.state.color_customizations == {"editor.foreground": "#ffffff"}
    assert result.state.scope == "global"
