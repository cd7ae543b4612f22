"""Data types exchanged with the text-generation backend."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

StreamEventType = Literal["text", "done", "error"]


@dataclass(frozen=True)
class Prompt:
    """A single-turn request: system instructions plus the user message."""

    system: str
    user: str

    def to_messages(self) -> list[dict[str, Any]]:
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user},
        ]


@dataclass
class StreamEvent:
    """One event from a streaming completion.

    ``text`` events carry a content delta, ``done`` carries usage, and
    ``error`` carries a message in ``content``.
    """

    type: StreamEventType
    content: str | None = None
    usage: dict[str, Any] = field(default_factory=dict)
