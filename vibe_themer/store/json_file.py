"""Editor ``settings.json`` files as a configuration store."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from ..core.types import ConfigurationTarget

logger = logging.getLogger(__name__)


class SettingsFileError(ValueError):
    """Raised when a settings file exists but cannot be used."""


class JsonSettingsStore:
    """``ConfigurationStore`` over a user and an optional workspace settings file.

    Missing files read as empty. Files must be plain JSON objects; files with
    comments or trailing commas are rejected rather than rewritten, so a
    hand-edited settings file is never silently reformatted. Writes go through
    a temporary file and ``os.replace``.
    """

    def __init__(self, user_settings: str | Path, workspace_settings: str | Path | None = None) -> None:
        self.user_settings = Path(user_settings).expanduser()
        self.workspace_settings = (
            Path(workspace_settings).expanduser() if workspace_settings is not None else None
        )

    @property
    def has_workspace_folders(self) -> bool:
        return self.workspace_settings is not None

    def path_for(self, target: ConfigurationTarget) -> Path:
        if target is ConfigurationTarget.GLOBAL:
            return self.user_settings
        if self.workspace_settings is None:
            raise SettingsFileError("No workspace settings file is configured")
        return self.workspace_settings

    async def read(self, section: str, target: ConfigurationTarget) -> Any:
        if target is ConfigurationTarget.WORKSPACE and self.workspace_settings is None:
            return None
        path = self.path_for(target)
        data = await asyncio.to_thread(_load_settings, path)
        return data.get(section)

    async def write(self, section: str, value: Any, target: ConfigurationTarget) -> None:
        path = self.path_for(target)
        await asyncio.to_thread(_update_settings, path, section, value)
        logger.debug("Wrote %s to %s", section, path)


def _load_settings(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SettingsFileError(f"Unable to read {path}: {exc}") from exc
    if not content.strip():
        return {}
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise SettingsFileError(
            f"{path} is not plain JSON ({exc}); remove comments and trailing commas"
        ) from exc
    if not isinstance(data, dict):
        raise SettingsFileError(f"Expected a JSON object in {path}")
    return data


def _update_settings(path: Path, section: str, value: Any) -> None:
    data = _load_settings(path)
    if value is None:
        data.pop(section, None)
    else:
        data[section] = value

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=4, ensure_ascii=False)
            f.write("\n")
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
