"""Display utilities and formatting helpers."""

from __future__ import annotations

import re
import sys
from typing import Any

from rich.markup import escape

from ..core.types import SelectorSetting, StreamingThemeSetting, ThemeApplicationError
from .state import console
from .theme import THEME

_SWATCH_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


def _markup(text: str, color: str) -> str:
    """Wrap text in Rich markup with the given color, escaping special chars."""
    return f"[{color}]{escape(text)}[/{color}]"


def _is_interactive_terminal() -> bool:
    """Return True when running in an interactive TTY."""
    return console.is_terminal and sys.stdin.isatty() and sys.stdout.isatty()


def _swatch(color: str) -> str:
    """Two-cell color sample; blank for values Rich cannot render."""
    if _SWATCH_RE.match(color):
        return f"[on {color}]  [/on {color}]"
    return "  "


def _format_setting(setting: StreamingThemeSetting) -> str:
    """Render an applied setting as one markup line."""
    if isinstance(setting, SelectorSetting):
        kind = _markup("selector", THEME.selector)
    else:
        kind = _markup("token   ", THEME.token)
    value = setting.color
    if getattr(setting, "font_style", None):
        value = f"{value} ({setting.font_style})"
    return f"{kind} {_swatch(setting.color)} {escape(setting.key)} {_markup(value, THEME.muted)}"


def _format_error(error: ThemeApplicationError) -> str:
    text = _markup(error.message, THEME.error)
    if error.suggested_action:
        text += "\n" + _markup(error.suggested_action, THEME.muted)
    return text


def _format_usage(usage: dict[str, Any] | None) -> str | None:
    """Format token usage and cost, or None when nothing was reported."""
    if not usage:
        return None
    parts = [f"in:{usage.get('input_tokens', 0)}", f"out:{usage.get('output_tokens', 0)}"]
    cost = usage.get("cost_usd")
    if cost is not None:
        parts.append(f"${cost:.4f}")
    return " ".join(parts)
