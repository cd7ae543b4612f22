"""Color value validation shared by the streaming and batch paths."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

_HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")

CSS_COLOR_KEYWORDS: frozenset[str] = frozenset({"transparent", "inherit", "initial", "unset"})

REMOVE_SENTINEL = "REMOVE"


def is_valid_color_token(value: Any) -> bool:
    """Return True for 3/6/8-digit hex colors or one of the allowed CSS keywords.

    The REMOVE sentinel is deliberately not a color; use ``is_remove_sentinel``.
    """
    if not isinstance(value, str):
        return False
    if _HEX_COLOR_RE.fullmatch(value):
        return True
    return value.lower() in CSS_COLOR_KEYWORDS


def is_remove_sentinel(value: Any) -> bool:
    """Return True when a value means "delete this key" (case-insensitive)."""
    return isinstance(value, str) and value.strip().upper() == REMOVE_SENTINEL


def invalid_color_keys(colors: Mapping[str, Any]) -> list[str]:
    """Keys whose values fail ``is_valid_color_token``, in mapping order."""
    return [key for key, value in colors.items() if not is_valid_color_token(value)]
