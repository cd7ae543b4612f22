"""Themer configuration: model settings and where the editor keeps its settings."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .state import MAX_CONTEXT_COLOR_ENTRIES, MAX_CONTEXT_TOKEN_ENTRIES

CONFIG_DIR = Path.home() / ".config" / "vibe-themer"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.yaml"
DEFAULT_MODEL = "gpt-4.1-mini"


def default_user_settings_path() -> Path:
    """Per-platform location of the editor's user ``settings.json``."""
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "Code" / "User" / "settings.json"
    if sys.platform.startswith("win"):
        appdata = os.getenv("APPDATA") or str(Path.home() / "AppData" / "Roaming")
        return Path(appdata) / "Code" / "User" / "settings.json"
    config_home = os.getenv("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(config_home) / "Code" / "User" / "settings.json"


def default_workspace_settings_path(cwd: Path | None = None) -> Path | None:
    """``./.vscode/settings.json`` when the current directory is a workspace."""
    vscode_dir = (cwd or Path.cwd()) / ".vscode"
    return vscode_dir / "settings.json" if vscode_dir.is_dir() else None


def _env_float(name: str) -> float | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _env_path(name: str) -> str | None:
    raw = os.getenv(name)
    return raw if raw else None


@dataclass
class ThemerConfig:
    """How themes are generated and where they are written.

    Loaded from ``~/.config/vibe-themer/config.yaml`` when present; every
    field falls back to an environment variable or a built-in default.
    Unknown YAML keys are kept in ``extras``. The API key is read from the
    environment only and never written back to disk.

    Usage::

        config = ThemerConfig.from_file("~/.config/vibe-themer/config.yaml")
        config.model = "gpt-4.1"
        config.to_file("~/.config/vibe-themer/config.yaml")
    """

    model: str = field(
        default_factory=lambda: os.getenv("VIBE_THEMER_MODEL")
        or os.getenv("OPENAI_MODEL")
        or DEFAULT_MODEL
    )
    api_key: str | None = field(default_factory=lambda: os.getenv("OPENAI_API_KEY"))
    base_url: str | None = field(default_factory=lambda: os.getenv("OPENAI_BASE_URL"))
    reasoning_effort: str | None = field(
        default_factory=lambda: os.getenv("VIBE_THEMER_REASONING_EFFORT")
    )
    temperature: float | None = field(
        default_factory=lambda: _env_float("VIBE_THEMER_TEMPERATURE")
    )
    user_settings: str | None = field(
        default_factory=lambda: _env_path("VIBE_THEMER_USER_SETTINGS")
    )
    workspace_settings: str | None = field(
        default_factory=lambda: _env_path("VIBE_THEMER_WORKSPACE_SETTINGS")
    )
    max_context_colors: int = MAX_CONTEXT_COLOR_ENTRIES
    max_context_tokens: int = MAX_CONTEXT_TOKEN_ENTRIES
    chunk_timeout: float = 180.0
    extras: dict[str, Any] = field(default_factory=dict)

    # Keys loaded from YAML into fields; everything else goes to extras.
    _KNOWN_FIELDS = frozenset(
        {
            "model",
            "base_url",
            "reasoning_effort",
            "temperature",
            "user_settings",
            "workspace_settings",
            "max_context_colors",
            "max_context_tokens",
            "chunk_timeout",
        }
    )

    @classmethod
    def from_file(cls, path: str | Path) -> ThemerConfig:
        """Load config from a YAML file."""
        path = Path(path).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a YAML mapping: {path}")
        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> ThemerConfig:
        known: dict[str, Any] = {}
        extras: dict[str, Any] = {}
        for key, value in data.items():
            if key in cls._KNOWN_FIELDS:
                known[key] = value
            else:
                extras[key] = value
        known["extras"] = extras
        config = cls(**known)
        config._validate()
        return config

    def _validate(self) -> None:
        for name in ("max_context_colors", "max_context_tokens"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
        if not isinstance(self.chunk_timeout, (int, float)) or self.chunk_timeout <= 0:
            raise ValueError(f"chunk_timeout must be a positive number, got {self.chunk_timeout!r}")
        if self.temperature is not None and not isinstance(self.temperature, (int, float)):
            raise ValueError(f"temperature must be a number, got {self.temperature!r}")

    def to_file(self, path: str | Path) -> None:
        """Save config to a YAML file."""
        path = Path(path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self._to_dict(), f, default_flow_style=False, sort_keys=False)

    def _to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"model": self.model}
        if self.base_url:
            data["base_url"] = self.base_url
        if self.reasoning_effort:
            data["reasoning_effort"] = self.reasoning_effort
        if self.temperature is not None:
            data["temperature"] = self.temperature
        if self.user_settings:
            data["user_settings"] = self.user_settings
        if self.workspace_settings:
            data["workspace_settings"] = self.workspace_settings
        data["max_context_colors"] = self.max_context_colors
        data["max_context_tokens"] = self.max_context_tokens
        data["chunk_timeout"] = self.chunk_timeout
        data.update(self.extras)
        return data

    def resolve_user_settings(self) -> Path:
        if self.user_settings:
            return Path(self.user_settings).expanduser()
        return default_user_settings_path()

    def resolve_workspace_settings(self) -> Path | None:
        if self.workspace_settings:
            return Path(self.workspace_settings).expanduser()
        return default_workspace_settings_path()
