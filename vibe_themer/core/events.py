"""Events and summaries produced while a theme is generated and applied."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Literal

from .types import (
    ParseResult,
    StreamingThemeSetting,
    ThemeApplicationError,
    ThemeApplicationResult,
    ThemeCustomizations,
)

ThemeEventType = Literal["applied", "skipped", "apply_failed", "error", "cancelled", "done"]
GenerationMode = Literal["streaming", "full", "payload"]


@dataclass
class ThemeEvent:
    """Event emitted during ``ThemeSession`` generation.

    Event types:
    - ``applied``: a streamed setting was written (``setting``, ``result``).
    - ``skipped``: a line could not be parsed (``line``, ``content`` has the reason).
    - ``apply_failed``: a parsed setting could not be written (``setting``, ``error``).
    - ``error``: the generator failed; nothing further is applied.
    - ``cancelled``: generation stopped on request; earlier settings remain.
    - ``done``: generation finished (``content`` has the summary, ``usage`` set).
    """

    type: ThemeEventType
    content: str | None = None
    line: str | None = None
    setting: StreamingThemeSetting | None = None
    result: ThemeApplicationResult | None = None
    error: ThemeApplicationError | None = None
    usage: dict[str, Any] | None = None


EventHandler = Callable[[ThemeEvent], None | Awaitable[None]]


@dataclass
class GenerationSummary:
    """Outcome of one generation or payload application."""

    description: str
    mode: GenerationMode = "streaming"
    applied: list[StreamingThemeSetting] = field(default_factory=list)
    skipped: list[ParseResult] = field(default_factory=list)
    failures: list[ThemeApplicationError] = field(default_factory=list)
    batch_result: ThemeApplicationResult | None = None
    theme: ThemeCustomizations | None = None
    cancelled: bool = False
    error: str | None = None
    usage: dict[str, Any] = field(default_factory=dict)

    @property
    def applied_count(self) -> int:
        if self.batch_result is None:
            return len(self.applied)
        if not self.batch_result.success or self.theme is None:
            return 0
        return len(self.theme.color_customizations) + len(self.theme.token_colors)

    @property
    def fully_succeeded(self) -> bool:
        if self.error is not None or self.cancelled or self.failures:
            return False
        if self.batch_result is not None:
            return self.batch_result.success
        return bool(self.applied) and not self.skipped

    def message(self) -> str:
        """One-line summary for the user."""
        if self.error is not None:
            return f"Theme generation failed: {self.error}"

        parts = [f"Applied {self.applied_count} settings"]
        if self.skipped:
            parts.append(f"skipped {len(self.skipped)} invalid lines")
        if self.failures:
            parts.append(f"{len(self.failures)} failed to apply")
        text = ", ".join(parts)
        if self.cancelled:
            return f"Cancelled. {text}"
        if self.batch_result is not None and self.batch_result.applied_scope is not None:
            text += f" {self.batch_result.applied_scope.describe()}"
        return text
