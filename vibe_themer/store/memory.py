"""In-memory configuration store for tests and dry runs."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from ..core.types import ConfigurationTarget


class InMemoryConfigurationStore:
    """``ConfigurationStore`` backed by one dict per target.

    ``fail_writes_for`` makes writes to the listed targets raise
    ``PermissionError``; ``fail_reads`` makes every read raise ``OSError``.
    Values are deep-copied on the way in and out so callers never share
    mutable state with the store.
    """

    def __init__(
        self,
        *,
        global_settings: dict[str, Any] | None = None,
        workspace_settings: dict[str, Any] | None = None,
        has_workspace_folders: bool = False,
        fail_writes_for: set[ConfigurationTarget] | None = None,
        fail_reads: bool = False,
    ) -> None:
        self._data: dict[ConfigurationTarget, dict[str, Any]] = {
            ConfigurationTarget.GLOBAL: deepcopy(global_settings or {}),
            ConfigurationTarget.WORKSPACE: deepcopy(workspace_settings or {}),
        }
        self._has_workspace_folders = has_workspace_folders
        self.fail_writes_for: set[ConfigurationTarget] = set(fail_writes_for or ())
        self.fail_reads = fail_reads
        self.writes: list[tuple[str, ConfigurationTarget]] = []

    @property
    def has_workspace_folders(self) -> bool:
        return self._has_workspace_folders

    async def read(self, section: str, target: ConfigurationTarget) -> Any:
        if self.fail_reads:
            raise OSError(f"Cannot read {section} at {target.value}")
        return deepcopy(self._data[target].get(section))

    async def write(self, section: str, value: Any, target: ConfigurationTarget) -> None:
        if target in self.fail_writes_for:
            raise PermissionError(f"Cannot write {section} at {target.value}")
        self.writes.append((section, target))
        if value is None:
            self._data[target].pop(section, None)
        else:
            self._data[target][section] = deepcopy(value)

    def snapshot(self, target: ConfigurationTarget) -> dict[str, Any]:
        """Synchronous copy of everything stored at a target."""
        return deepcopy(self._data[target])
