"""Streaming theme protocol: line parsing and chunk-to-line buffering.

The generator emits one instruction per line::

    SELECTOR:<dot.path.key>=<hex|keyword|REMOVE>
    TOKEN:<textmate.scope>=<hex|keyword|REMOVE>[,<fontStyle>]

Any other line is reported as a parse failure. The parser holds no state, so
duplicate or out-of-order lines are resolved by the applier (last write wins).
"""

from __future__ import annotations

from .colors import is_remove_sentinel, is_valid_color_token
from .types import ParseResult, SelectorSetting, TokenSetting

SELECTOR_PREFIX = "SELECTOR:"
TOKEN_PREFIX = "TOKEN:"

EMPTY_LINE_ERROR = "Empty line"
INVALID_SELECTOR_ERROR = "Invalid selector format - expected name=color"
INVALID_TOKEN_ERROR = "Invalid token format - expected scope=color[,fontStyle]"
UNKNOWN_PREFIX_ERROR = "Line must start with SELECTOR: or TOKEN:"
INVALID_COLOR_ERROR = "Invalid color format"


def _is_acceptable_value(color: str) -> bool:
    return is_valid_color_token(color) or is_remove_sentinel(color)


def parse_line(line: str) -> ParseResult:
    """Parse one raw protocol line into a typed setting or a failure."""
    trimmed = line.strip()
    if not trimmed:
        return ParseResult.fail(EMPTY_LINE_ERROR, line)

    if trimmed.startswith(SELECTOR_PREFIX):
        name, _, color = trimmed[len(SELECTOR_PREFIX) :].partition("=")
        name, color = name.strip(), color.strip()
        if not name or not color:
            return ParseResult.fail(INVALID_SELECTOR_ERROR, line)
        if not _is_acceptable_value(color):
            return ParseResult.fail(INVALID_COLOR_ERROR, line)
        return ParseResult.ok(SelectorSetting(name=name, color=color), line)

    if trimmed.startswith(TOKEN_PREFIX):
        scope, _, color_and_style = trimmed[len(TOKEN_PREFIX) :].partition("=")
        # Only the field after the first comma is a font style; extra fields are dropped.
        color, _, rest = color_and_style.partition(",")
        font_style = rest.split(",", 1)[0]
        scope, color, font_style = scope.strip(), color.strip(), font_style.strip()
        if not scope or not color:
            return ParseResult.fail(INVALID_TOKEN_ERROR, line)
        if not _is_acceptable_value(color):
            return ParseResult.fail(INVALID_COLOR_ERROR, line)
        return ParseResult.ok(
            TokenSetting(scope=scope, color=color, font_style=font_style or None),
            line,
        )

    return ParseResult.fail(UNKNOWN_PREFIX_ERROR, line)


class LineBuffer:
    """Reassembles streamed text deltas into complete lines.

    Usage::

        buffer = LineBuffer()
        for chunk in chunks:
            for line in buffer.feed(chunk):
                handle(line)
        tail = buffer.flush()
    """

    def __init__(self) -> None:
        self._pending = ""

    @property
    def pending(self) -> str:
        return self._pending

    def feed(self, chunk: str) -> list[str]:
        """Add a chunk and return every line it completed, in arrival order."""
        if not chunk:
            return []
        self._pending += chunk
        *complete, self._pending = self._pending.split("\n")
        return [line.rstrip("\r") for line in complete]

    def flush(self) -> str | None:
        """Return the trailing partial line (if any) and clear the buffer."""
        tail, self._pending = self._pending.rstrip("\r"), ""
        return tail if tail else None
