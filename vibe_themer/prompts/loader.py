"""Load markdown prompt templates with optional YAML frontmatter."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

BUILTIN_PROMPTS_DIR = Path(__file__).parent


@dataclass
class PromptVariable:
    name: str
    default: str | None = None
    required: bool = False


@dataclass
class PromptTemplate:
    """A system prompt body plus the variables it may reference."""

    description: str = ""
    variables: list[PromptVariable] = field(default_factory=list)
    system_prompt: str = ""


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Split ``---`` delimited YAML frontmatter from the body.

    Content without a closed frontmatter block is returned unchanged (stripped)
    with an empty mapping.
    """
    stripped = content.strip()
    if not stripped.startswith("---"):
        return {}, stripped
    parts = stripped.split("---", 2)
    if len(parts) < 3:
        return {}, stripped
    data = yaml.safe_load(parts[1]) or {}
    if not isinstance(data, dict):
        raise ValueError("Prompt frontmatter must be a YAML mapping")
    return data, parts[2].strip()


def _resolve_path(name_or_path: str | Path) -> Path:
    candidate = Path(name_or_path).expanduser()
    if candidate.exists():
        return candidate
    builtin = BUILTIN_PROMPTS_DIR / f"{Path(str(name_or_path)).stem}.md"
    if isinstance(name_or_path, str) and "/" not in name_or_path and builtin.exists():
        return builtin
    raise FileNotFoundError(f"Prompt not found: {name_or_path}")


def load_prompt(name_or_path: str | Path) -> PromptTemplate:
    """Load a built-in prompt by name (``"streaming"``) or a ``.md`` file path."""
    path = _resolve_path(name_or_path)
    frontmatter, body = parse_frontmatter(path.read_text(encoding="utf-8"))

    variables: list[PromptVariable] = []
    for raw in frontmatter.get("variables") or []:
        if isinstance(raw, str):
            variables.append(PromptVariable(name=raw))
        elif isinstance(raw, dict) and raw.get("name"):
            default = raw.get("default")
            variables.append(
                PromptVariable(
                    name=str(raw["name"]),
                    default=None if default is None else str(default),
                    required=bool(raw.get("required", False)),
                )
            )
        else:
            raise ValueError(f"Invalid variable declaration in {path}: {raw!r}")

    if not body:
        raise ValueError(f"Prompt {path} has an empty body")

    return PromptTemplate(
        description=str(frontmatter.get("description", "")),
        variables=variables,
        system_prompt=body,
    )
