"""Applying theme settings to the configuration store.

Two entry points share one retry combinator:

- ``apply_streaming_setting`` merges a single streamed setting into what is
  already stored at a target (read-modify-write).
- ``apply_theme_customizations`` writes a complete, validated theme.

Writes try the global target first and fall back to the workspace target when
the host has workspace folders. Reads (``state``) resolve the other way round,
with workspace values winning.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from ..store.protocol import ConfigurationStore
from .colors import invalid_color_keys, is_remove_sentinel, is_valid_color_token
from .types import (
    COLOR_CUSTOMIZATIONS_SECTION,
    TEXTMATE_RULES_KEY,
    TOKEN_COLOR_CUSTOMIZATIONS_SECTION,
    ConfigurationScope,
    ConfigurationTarget,
    SelectorSetting,
    StreamingThemeSetting,
    ThemeApplicationError,
    ThemeApplicationResult,
    ThemeCustomizations,
    TokenColorRule,
    TokenSetting,
)

logger = logging.getLogger(__name__)

PERMISSION_SUGGESTION = "Check editor settings permissions and try restarting the editor"

Attempt = Callable[[ConfigurationTarget], Awaitable[None]]


class Notifier(Protocol):
    """Receives the user-facing outcome of a batch application."""

    def info(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class LoggingNotifier:
    """Default notifier: reports outcomes through the module logger."""

    def info(self, message: str) -> None:
        logger.info(message)

    def error(self, message: str) -> None:
        logger.error(message)


def determine_configuration_scope(has_workspace_folders: bool) -> ConfigurationScope:
    if has_workspace_folders:
        return ConfigurationScope.both(ConfigurationTarget.GLOBAL, ConfigurationTarget.WORKSPACE)
    return ConfigurationScope.single(ConfigurationTarget.GLOBAL)


async def apply_with_fallback(
    scope: ConfigurationScope,
    attempt: Attempt,
    *,
    failure_message: str,
    suggested_action: str = PERMISSION_SUGGESTION,
) -> ThemeApplicationResult:
    """Run ``attempt`` against each target of ``scope`` until one succeeds.

    Targets are tried strictly in order. The last exception becomes the
    ``cause`` of the aggregated failure.
    """
    last_error: Exception | None = None
    for target in scope.targets():
        try:
            await attempt(target)
        except Exception as exc:
            logger.debug("Write to %s target failed: %s", target.value, exc)
            last_error = exc
            continue
        return ThemeApplicationResult.ok(scope, target)

    logger.warning("%s: %s", failure_message, last_error)
    return ThemeApplicationResult.fail(
        ThemeApplicationError.create(failure_message, last_error, True, suggested_action)
    )


# --- Streaming ---


async def _read_dict(
    store: ConfigurationStore, section: str, target: ConfigurationTarget
) -> dict[str, Any]:
    value = await store.read(section, target)
    return dict(value) if isinstance(value, dict) else {}


def _merge_selector(existing: dict[str, Any], setting: SelectorSetting) -> dict[str, Any]:
    updated = dict(existing)
    if is_remove_sentinel(setting.color):
        updated.pop(setting.name, None)
    else:
        updated[setting.name] = setting.color
    return updated


def _merge_token(existing: dict[str, Any], setting: TokenSetting) -> dict[str, Any]:
    rules = existing.get(TEXTMATE_RULES_KEY)
    if not isinstance(rules, list):
        rules = []
    kept = [
        rule for rule in rules if not (isinstance(rule, dict) and rule.get("scope") == setting.scope)
    ]
    if not is_remove_sentinel(setting.color):
        settings: dict[str, str] = {"foreground": setting.color}
        if setting.font_style:
            settings["fontStyle"] = setting.font_style
        kept.append({"scope": setting.scope, "settings": settings})
    return {**existing, TEXTMATE_RULES_KEY: kept}


async def apply_streaming_setting(
    setting: StreamingThemeSetting,
    store: ConfigurationStore,
    has_workspace_folders: bool,
) -> ThemeApplicationResult:
    """Merge one streamed setting into the store.

    Each key holds at most one value per target: a selector overwrites its
    slot, a token replaces every rule with the same scope. ``REMOVE`` deletes
    the slot or rule so the base theme shows through; removing something that
    is not there is a no-op.
    """
    scope = determine_configuration_scope(has_workspace_folders)

    if isinstance(setting, SelectorSetting):
        section = COLOR_CUSTOMIZATIONS_SECTION

        async def attempt(target: ConfigurationTarget) -> None:
            existing = await _read_dict(store, section, target)
            await store.write(section, _merge_selector(existing, setting), target)

    else:
        section = TOKEN_COLOR_CUSTOMIZATIONS_SECTION

        async def attempt(target: ConfigurationTarget) -> None:
            existing = await _read_dict(store, section, target)
            await store.write(section, _merge_token(existing, setting), target)

    return await apply_with_fallback(
        scope,
        attempt,
        failure_message=f"Failed to apply {setting.type} setting: {setting.key}",
    )


# --- Batch ---


def validate_theme_customizations(customizations: ThemeCustomizations) -> ThemeApplicationResult:
    """Check every color value; the failure names all offending keys.

    ``REMOVE`` is not a color and is rejected here: a complete theme states
    every value it sets.
    """
    if not isinstance(customizations.color_customizations, dict):
        return ThemeApplicationResult.fail(
            ThemeApplicationError.create(
                "Invalid color customizations provided",
                TypeError("Color customizations must be a mapping"),
                False,
                "Check the theme generation output",
            )
        )

    invalid = invalid_color_keys(customizations.color_customizations)
    for rule in customizations.token_colors:
        for color in (rule.settings.foreground, rule.settings.background):
            if color is not None and not is_valid_color_token(color):
                invalid.append(_rule_label(rule))
                break

    if invalid:
        return ThemeApplicationResult.fail(
            ThemeApplicationError.create(
                f"Invalid color format for: {', '.join(invalid)}",
                ValueError(
                    "Colors must be hex codes (#rgb, #rrggbb, #rrggbbaa) or CSS color keywords"
                ),
                False,
                "Regenerate the theme or fix the listed colors",
            )
        )
    return ThemeApplicationResult(success=True)


def _rule_label(rule: TokenColorRule) -> str:
    if isinstance(rule.scope, str):
        return rule.scope
    return ", ".join(rule.scope)


def prepare_token_color_customizations(
    token_colors: tuple[TokenColorRule, ...] | list[TokenColorRule],
    existing: dict[str, Any] | None,
) -> dict[str, Any]:
    """Set ``textMateRules`` on the existing token map, keeping its other keys."""
    base = dict(existing or {})
    if not token_colors:
        return base
    return {**base, TEXTMATE_RULES_KEY: [rule.to_dict() for rule in token_colors]}


async def apply_theme_customizations(
    customizations: ThemeCustomizations,
    store: ConfigurationStore,
    *,
    has_workspace_folders: bool,
    suppress_notifications: bool = False,
    notifier: Notifier | None = None,
) -> ThemeApplicationResult:
    """Validate and write a complete theme.

    UI colors replace the stored color map wholesale. Token rules, when
    present, replace the rule list of the token map at the same target.
    """
    notify = notifier or LoggingNotifier()

    validation = validate_theme_customizations(customizations)
    if not validation.success:
        if not suppress_notifications and validation.error is not None:
            notify.error(validation.error.message)
        return validation

    scope = determine_configuration_scope(has_workspace_folders)

    async def attempt(target: ConfigurationTarget) -> None:
        await store.write(
            COLOR_CUSTOMIZATIONS_SECTION, dict(customizations.color_customizations), target
        )
        if customizations.token_colors:
            existing = await _read_dict(store, TOKEN_COLOR_CUSTOMIZATIONS_SECTION, target)
            await store.write(
                TOKEN_COLOR_CUSTOMIZATIONS_SECTION,
                prepare_token_color_customizations(customizations.token_colors, existing),
                target,
            )

    result = await apply_with_fallback(
        scope,
        attempt,
        failure_message="Failed to apply theme to any configuration target",
    )

    if not suppress_notifications:
        if result.success and result.applied_scope is not None:
            notify.info(
                f'Theme "{customizations.description}" applied {result.applied_scope.describe()}'
            )
        elif result.error is not None:
            notify.error(result.error.message)
    return result


# --- Reset ---


async def reset_theme_customizations(store: ConfigurationStore) -> ThemeApplicationResult:
    """Clear both sections at both targets.

    Every clear is attempted even when an earlier one fails. Succeeds when at
    least one target was fully cleared.
    """
    cleared: list[ConfigurationTarget] = []
    last_error: Exception | None = None

    for target in (ConfigurationTarget.WORKSPACE, ConfigurationTarget.GLOBAL):
        target_ok = True
        for section in (COLOR_CUSTOMIZATIONS_SECTION, TOKEN_COLOR_CUSTOMIZATIONS_SECTION):
            try:
                await store.write(section, None, target)
            except Exception as exc:
                logger.debug("Clearing %s at %s failed: %s", section, target.value, exc)
                last_error = exc
                target_ok = False
        if target_ok:
            cleared.append(target)

    if not cleared:
        return ThemeApplicationResult.fail(
            ThemeApplicationError.create(
                "Failed to reset theme customizations",
                last_error,
                True,
                PERMISSION_SUGGESTION,
            )
        )

    if len(cleared) == 2:
        scope = ConfigurationScope.both(ConfigurationTarget.GLOBAL, ConfigurationTarget.WORKSPACE)
    else:
        scope = ConfigurationScope.single(cleared[0])
    return ThemeApplicationResult.ok(scope, cleared[-1])
