"""Current-state reading and the context block fed to the next generation.

Reads merge the two storage levels with workspace values overriding global
ones, which is the precedence the editor itself uses when resolving settings.
Writes (see ``apply``) go the other way and try global first. Both orders are
intentional.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from ..store.protocol import ConfigurationStore
from .types import (
    COLOR_CUSTOMIZATIONS_SECTION,
    TOKEN_COLOR_CUSTOMIZATIONS_SECTION,
    ConfigurationTarget,
    CurrentThemeResult,
    CurrentThemeState,
    ScopeLabel,
    ThemeApplicationError,
)

logger = logging.getLogger(__name__)

MAX_CONTEXT_COLOR_ENTRIES = 5
MAX_CONTEXT_TOKEN_ENTRIES = 3
MAX_CONTEXT_ENTRY_CHARS = 200

CONTEXT_HEADER = "CURRENT THEME CONTEXT:"
CONTEXT_FOOTER = "User request:"


async def _read_mapping(
    store: ConfigurationStore, section: str, target: ConfigurationTarget
) -> dict[str, Any]:
    value = await store.read(section, target)
    return dict(value) if isinstance(value, dict) else {}


async def _read_both(store: ConfigurationStore, section: str) -> tuple[dict, dict]:
    global_value = await _read_mapping(store, section, ConfigurationTarget.GLOBAL)
    workspace_value = await _read_mapping(store, section, ConfigurationTarget.WORKSPACE)
    return global_value, workspace_value


def _scope_of(
    global_colors: dict, workspace_colors: dict, global_tokens: dict, workspace_tokens: dict
) -> ScopeLabel:
    has_workspace = bool(workspace_colors) or bool(workspace_tokens)
    has_global = bool(global_colors) or bool(global_tokens)

    if has_workspace and has_global:
        return "both"
    if has_workspace:
        return "workspace"
    return "global"


async def get_current_color_customizations(store: ConfigurationStore) -> dict[str, str]:
    """Effective UI color overrides, workspace winning on conflicts."""
    global_colors, workspace_colors = await _read_both(store, COLOR_CUSTOMIZATIONS_SECTION)
    return {**global_colors, **workspace_colors}


async def get_current_token_color_customizations(store: ConfigurationStore) -> dict[str, Any]:
    """Effective token color overrides, workspace winning on conflicts.

    The merge is shallow: a workspace ``textMateRules`` list replaces the
    global one rather than being concatenated with it.
    """
    global_tokens, workspace_tokens = await _read_both(store, TOKEN_COLOR_CUSTOMIZATIONS_SECTION)
    return {**global_tokens, **workspace_tokens}


async def get_current_customization_scope(store: ConfigurationStore) -> ScopeLabel:
    """Which storage level(s) currently hold customizations.

    ``global`` is returned when nothing is stored anywhere; it is a neutral
    default, not a statement that global settings exist.
    """
    global_colors, workspace_colors = await _read_both(store, COLOR_CUSTOMIZATIONS_SECTION)
    global_tokens, workspace_tokens = await _read_both(store, TOKEN_COLOR_CUSTOMIZATIONS_SECTION)
    return _scope_of(global_colors, workspace_colors, global_tokens, workspace_tokens)


async def get_current_theme_state(store: ConfigurationStore) -> CurrentThemeResult:
    """Snapshot the effective customizations. Never raises for store errors.

    Each section is read once per level, so colors, tokens, and scope all
    describe the same four reads.
    """
    try:
        global_colors, workspace_colors = await _read_both(store, COLOR_CUSTOMIZATIONS_SECTION)
        global_tokens, workspace_tokens = await _read_both(
            store, TOKEN_COLOR_CUSTOMIZATIONS_SECTION
        )
    except Exception as exc:
        logger.warning("Failed to read current theme state: %s", exc)
        return CurrentThemeResult(
            success=False,
            error=ThemeApplicationError.create(
                "Failed to read current theme state",
                exc,
                True,
                "Try again or check editor settings",
            ),
        )

    colors = {**global_colors, **workspace_colors}
    tokens = {**global_tokens, **workspace_tokens}
    return CurrentThemeResult(
        success=True,
        state=CurrentThemeState(
            color_customizations=colors,
            token_color_customizations=tokens,
            has_customizations=bool(colors) or bool(tokens),
            scope=_scope_of(global_colors, workspace_colors, global_tokens, workspace_tokens),
        ),
    )


def _clip(line: str, limit: int) -> str:
    if len(line) <= limit:
        return line
    return line[: max(limit - 3, 0)] + "..."


def _section_lines(
    title: str,
    entries: list[tuple[str, str]],
    cap: int,
    entry_chars: int,
) -> list[str]:
    lines = [f"{title} ({len(entries)} settings):"]
    for key, value in entries[:cap]:
        lines.append(_clip(f"- {key}: {value}", entry_chars))
    if len(entries) > cap:
        lines.append(f"... and {len(entries) - cap} more settings")
    return lines


def format_current_theme_context(
    state: CurrentThemeState,
    *,
    max_color_entries: int = MAX_CONTEXT_COLOR_ENTRIES,
    max_token_entries: int = MAX_CONTEXT_TOKEN_ENTRIES,
    max_entry_chars: int = MAX_CONTEXT_ENTRY_CHARS,
) -> str:
    """Render the state as a context block prepended to the user's request.

    Returns an empty string when nothing is customized. Entries keep the
    store's insertion order, so the same state always renders the same text.
    """
    if not state.has_customizations:
        return ""

    lines = [CONTEXT_HEADER]

    color_entries = [(key, str(value)) for key, value in state.color_customizations.items()]
    if color_entries:
        lines.extend(
            _section_lines(
                "Active workbench color overrides",
                color_entries,
                max_color_entries,
                max_entry_chars,
            )
        )

    token_entries = [
        (key, json.dumps(value, separators=(",", ":"), ensure_ascii=False))
        for key, value in state.token_color_customizations.items()
    ]
    if token_entries:
        if color_entries:
            lines.append("")
        lines.extend(
            _section_lines(
                "Active syntax highlighting overrides",
                token_entries,
                max_token_entries,
                max_entry_chars,
            )
        )

    lines.append("")
    lines.append(CONTEXT_FOOTER)
    return "\n".join(lines)
