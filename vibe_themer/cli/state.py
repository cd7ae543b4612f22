"""Shared CLI state: console, app, constants."""

from __future__ import annotations

import typer
from rich.console import Console

from ..core.config import CONFIG_DIR, DEFAULT_CONFIG_PATH

__all__ = ["CONFIG_DIR", "DEFAULT_CONFIG_PATH", "app", "console", "err_console"]

# Rich consoles for all output
console = Console()
err_console = Console(stderr=True)

# Typer app
app = typer.Typer(
    name="vibe-themer",
    help="Turn a mood into editor colors, streamed and applied as they are generated.",
    epilog=(
        "Examples:\n"
        '  vibe-themer "warm sunset over mountains"\n'
        '  vibe-themer "make the comments more readable"\n'
        '  vibe-themer generate --full "minimal dark forest"\n'
        "  vibe-themer show\n"
        "  vibe-themer apply ./theme.json\n"
        "  vibe-themer reset\n"
        "  vibe-themer suggest --count 3"
    ),
    add_completion=False,
)
