"""vibe-themer: turn a mood into editor colors, streamed and applied live."""

__version__ = "0.1.0"

from .core import (
    GenerationSummary,
    ThemeCustomizations,
    ThemeEvent,
    ThemerConfig,
    ThemeSession,
    format_current_theme_context,
    get_current_theme_state,
    parse_line,
)
from .store import InMemoryConfigurationStore, JsonSettingsStore

__all__ = [
    "__version__",
    "GenerationSummary",
    "InMemoryConfigurationStore",
    "JsonSettingsStore",
    "ThemeCustomizations",
    "ThemeEvent",
    "ThemeSession",
    "ThemerConfig",
    "format_current_theme_context",
    "get_current_theme_state",
    "parse_line",
]
