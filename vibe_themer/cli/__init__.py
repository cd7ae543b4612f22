"""CLI package for vibe-themer."""

import sys

from .runner import render_summary, run_generation
from .state import app

# Import command modules so their @app.command() decorators register
from . import admin as _admin  # noqa: F401
from . import main_cmd as _main_cmd  # noqa: F401

from .main_cmd import generate

SUBCOMMANDS = {"generate", "show", "apply", "reset", "suggest"}


def cli() -> None:
    """CLI entrypoint with `generate` as the default command."""
    args = sys.argv[1:]
    if not args or args[0] not in SUBCOMMANDS:
        args = ["generate", *args]
    app(args=args, prog_name="vibe-themer")


__all__ = ["app", "cli", "generate", "render_summary", "run_generation"]


if __name__ == "__main__":
    cli()
