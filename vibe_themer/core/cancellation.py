"""Cooperative cancellation for in-flight generations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass
class CancellationToken:
    """Shared between the caller and a running generation.

    The generation checks the token between stream chunks; settings applied
    before cancellation stay applied.
    """

    reason: str | None = None
    cancelled_at: datetime | None = None
    _cancelled: bool = False

    def cancel(self, reason: str = "requested") -> None:
        """Mark token as cancelled (idempotent)."""
        if self._cancelled:
            return
        self._cancelled = True
        self.reason = reason
        self.cancelled_at = datetime.now(timezone.utc)

    def is_cancelled(self) -> bool:
        return self._cancelled
