"""Core theme API: streaming protocol, appliers, state reading, and sessions."""

from __future__ import annotations

from .apply import (
    apply_streaming_setting,
    apply_theme_customizations,
    apply_with_fallback,
    determine_configuration_scope,
    reset_theme_customizations,
    validate_theme_customizations,
)
from .colors import is_remove_sentinel, is_valid_color_token
from .config import ThemerConfig
from .events import GenerationSummary, ThemeEvent
from .payload import ThemePayloadError, customizations_to_payload, parse_theme_payload
from .protocol import LineBuffer, parse_line
from .session import SessionStateError, ThemeSession
from .state import format_current_theme_context, get_current_theme_state
from .types import (
    ConfigurationScope,
    ConfigurationTarget,
    CurrentThemeResult,
    CurrentThemeState,
    ParseResult,
    SelectorSetting,
    ThemeApplicationError,
    ThemeApplicationResult,
    ThemeCustomizations,
    TokenColorRule,
    TokenSetting,
    TokenSettings,
)

__all__ = [
    "ConfigurationScope",
    "ConfigurationTarget",
    "CurrentThemeResult",
    "CurrentThemeState",
    "GenerationSummary",
    "LineBuffer",
    "ParseResult",
    "SelectorSetting",
    "SessionStateError",
    "ThemeApplicationError",
    "ThemeApplicationResult",
    "ThemeCustomizations",
    "ThemeEvent",
    "ThemePayloadError",
    "ThemeSession",
    "ThemerConfig",
    "TokenColorRule",
    "TokenSetting",
    "TokenSettings",
    "apply_streaming_setting",
    "apply_theme_customizations",
    "apply_with_fallback",
    "customizations_to_payload",
    "determine_configuration_scope",
    "format_current_theme_context",
    "get_current_theme_state",
    "is_remove_sentinel",
    "is_valid_color_token",
    "parse_line",
    "parse_theme_payload",
    "reset_theme_customizations",
    "validate_theme_customizations",
]
