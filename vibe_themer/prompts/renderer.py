"""Render prompt templates with Jinja2."""

from __future__ import annotations

from typing import Any

from jinja2 import Environment

from .loader import PromptTemplate

_env = Environment(keep_trailing_newline=False, trim_blocks=True, lstrip_blocks=True)


def render_string(template: str, variables: dict[str, Any]) -> str:
    return _env.from_string(template).render(**variables)


def prepare_prompt(prompt: PromptTemplate, variables: dict[str, Any]) -> str:
    """Fill defaults, check required variables, and render the system prompt."""
    values: dict[str, Any] = {}
    for var in prompt.variables:
        if var.name in variables:
            values[var.name] = variables[var.name]
        elif var.default is not None:
            values[var.name] = var.default
        elif var.required:
            raise ValueError(f"Missing required prompt variable: {var.name}")
    for key, value in variables.items():
        values.setdefault(key, value)
    return render_string(prompt.system_prompt, values).strip()
