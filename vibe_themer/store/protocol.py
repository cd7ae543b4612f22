"""Configuration store boundary."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from ..core.types import ConfigurationTarget


@runtime_checkable
class ConfigurationStore(Protocol):
    """Host-owned key-value configuration with two storage levels.

    Only two sections are used: ``workbench.colorCustomizations`` and
    ``editor.tokenColorCustomizations``. The store is shared with other
    writers; every read is a fresh snapshot.
    """

    @property
    def has_workspace_folders(self) -> bool:
        """True when a workspace-level target is available."""
        ...

    async def read(self, section: str, target: ConfigurationTarget) -> Any:
        """Return the section value stored at exactly this target, or None."""
        ...

    async def write(self, section: str, value: Any, target: ConfigurationTarget) -> None:
        """Replace the section value at this target. ``None`` clears it."""
        ...
