"""Running one generation with live output: run_generation, render_summary."""

from __future__ import annotations

import asyncio
import platform
import signal
from time import monotonic

from ..core.events import GenerationSummary, ThemeEvent
from ..core.session import ThemeSession
from .formatting import _format_error, _format_setting, _format_usage, _is_interactive_terminal, _markup
from .state import console
from .theme import THEME


def _print_event(event: ThemeEvent) -> None:
    if event.type == "applied" and event.setting is not None:
        console.print(_format_setting(event.setting))
    elif event.type == "skipped":
        console.print(_markup(f"skipped  {event.line!r}: {event.content}", THEME.warning))
    elif event.type == "apply_failed" and event.error is not None:
        console.print(_format_error(event.error))
    elif event.type == "cancelled":
        console.print(_markup("Cancelled", THEME.muted))


def render_summary(summary: GenerationSummary) -> None:
    """Print the one-line outcome, and the remedy when something failed."""
    if summary.error is not None:
        console.print(_markup(summary.message(), THEME.error))
        return

    color = THEME.success if summary.fully_succeeded else THEME.warning
    console.print(_markup(summary.message(), color))
    for failure in summary.failures:
        if failure.suggested_action:
            console.print(_markup(failure.suggested_action, THEME.muted))
            break
    usage = _format_usage(summary.usage)
    if usage:
        console.print(_markup(usage, THEME.muted))


async def run_generation(
    session: ThemeSession,
    description: str,
    *,
    full: bool = False,
) -> GenerationSummary:
    """Generate and apply one theme, printing each setting as it lands.

    Ctrl+C cancels cooperatively: settings applied so far are kept.
    """
    loop = asyncio.get_running_loop()
    interactive_tty = _is_interactive_terminal()

    def on_cancel() -> None:
        console.print(f"\n{_markup('Cancelling...', THEME.warning)}")
        session.cancel()

    if platform.system() != "Windows":
        loop.add_signal_handler(signal.SIGINT, on_cancel)

    status_ctx = None
    start = monotonic()
    if interactive_tty:
        status_ctx = console.status(
            "generating (0s)",
            spinner="dots",
            spinner_style=THEME.accent,
        )
        status_ctx.__enter__()

    async def on_event(event: ThemeEvent) -> None:
        nonlocal status_ctx
        if status_ctx is not None:
            if event.type == "done":
                status_ctx.__exit__(None, None, None)
                status_ctx = None
            else:
                elapsed = int(monotonic() - start)
                status_ctx.update(f"generating ({elapsed}s • Ctrl+C: cancel)")
        if event.type not in ("done", "error"):
            _print_event(event)

    try:
        if full:
            summary = await session.generate_full(description, on_event=on_event)
        else:
            summary = await session.stream_theme(description, on_event=on_event)
    finally:
        if status_ctx is not None:
            status_ctx.__exit__(None, None, None)
        if platform.system() != "Windows":
            loop.remove_signal_handler(signal.SIGINT)

    render_summary(summary)
    return summary
