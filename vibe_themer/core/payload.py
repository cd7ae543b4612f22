"""Parsing complete (non-streaming) theme payloads.

A payload is a JSON object::

    {
        "selectors": {"editor.background": "#1e1e2e", ...},
        "tokenColors": [{"scope": "comment", "settings": {"foreground": "#6c7086"}}]
    }

Models often wrap the object in a fenced code block or surround it with
prose, so extraction is tolerant. Validation of color values is left to the
batch applier.
"""

from __future__ import annotations

import json
import re
from typing import Any

from .types import ThemeCustomizations, TokenColorRule

SELECTORS_KEY = "selectors"
TOKEN_COLORS_KEY = "tokenColors"

_FENCED_BLOCK_RE = re.compile(r"```(?:json)?\s*\n(.*?)```", re.DOTALL | re.IGNORECASE)


class ThemePayloadError(ValueError):
    """Raised when a model response does not contain a usable theme payload."""


def _extract_json_object(text: str) -> dict[str, Any]:
    candidates: list[str] = [text.strip()]
    fenced = _FENCED_BLOCK_RE.search(text)
    if fenced:
        candidates.append(fenced.group(1).strip())
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        candidates.append(text[start : end + 1])

    for candidate in candidates:
        if not candidate:
            continue
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data
    raise ThemePayloadError("Response did not contain a JSON theme object")


def parse_theme_payload(text: str, description: str = "") -> ThemeCustomizations:
    """Build ``ThemeCustomizations`` from a model response or cached file."""
    if not text or not text.strip():
        raise ThemePayloadError("Empty theme payload")

    data = _extract_json_object(text)

    selectors = data.get(SELECTORS_KEY, {})
    if not isinstance(selectors, dict):
        raise ThemePayloadError(f"'{SELECTORS_KEY}' must be an object")
    bad_keys = [key for key, value in selectors.items() if not isinstance(value, str)]
    if bad_keys:
        raise ThemePayloadError(f"Non-string color values for: {', '.join(bad_keys)}")

    raw_rules = data.get(TOKEN_COLORS_KEY, [])
    if not isinstance(raw_rules, list):
        raise ThemePayloadError(f"'{TOKEN_COLORS_KEY}' must be a list")
    rules: list[TokenColorRule] = []
    for index, raw in enumerate(raw_rules):
        if not isinstance(raw, dict) or not raw.get("scope"):
            raise ThemePayloadError(f"Token color rule {index} needs a scope")
        rules.append(TokenColorRule.from_dict(raw))

    if not selectors and not rules:
        raise ThemePayloadError("Theme payload has no selectors or token colors")

    return ThemeCustomizations(
        color_customizations={key: value.strip() for key, value in selectors.items()},
        token_colors=tuple(rules),
        description=description or str(data.get("description", "")),
    )


def customizations_to_payload(customizations: ThemeCustomizations) -> dict[str, Any]:
    """Inverse of ``parse_theme_payload``, for caching a generated theme."""
    payload: dict[str, Any] = {
        SELECTORS_KEY: dict(customizations.color_customizations),
        TOKEN_COLORS_KEY: [rule.to_dict() for rule in customizations.token_colors],
    }
    if customizations.description:
        payload["description"] = customizations.description
    return payload
