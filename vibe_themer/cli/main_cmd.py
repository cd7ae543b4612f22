"""Main CLI command: generate a theme from a description."""

import asyncio
import json
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv

load_dotenv()

from ..cli_errors import CliUsageError, SaveThemeError
from ..core.payload import customizations_to_payload
from ..core.session import ThemeSession
from ..core.suggestions import get_random_curated_suggestions
from .formatting import _is_interactive_terminal, _markup
from .runner import run_generation
from .setup import build_store, configure_logging, load_config
from .state import app, console
from .theme import THEME


def _ask_for_description() -> str:
    """Offer a few curated ideas and read a description from the terminal."""
    console.print(_markup("Need inspiration? Try one of these:", THEME.muted))
    for suggestion in get_random_curated_suggestions(3):
        console.print(f"  {_markup(suggestion.label, THEME.accent)}")
    return typer.prompt("Describe your vibe").strip()


def _save_theme(session: ThemeSession, save_path: str) -> None:
    theme = session.last_theme
    if theme is None:
        console.print(_markup("Nothing was applied, so no theme was saved.", THEME.muted))
        return
    path = Path(save_path).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(customizations_to_payload(theme), indent=2) + "\n", encoding="utf-8"
        )
    except OSError as exc:
        raise SaveThemeError(str(path), str(exc)) from exc
    console.print(_markup(f"Saved theme to {path}", THEME.muted))


@app.command()
def generate(
    description: Annotated[
        str | None,
        typer.Argument(
            metavar="DESCRIPTION",
            help="Mood, vibe, or edit request (prompted for when omitted)",
        ),
    ] = None,
    full: Annotated[
        bool,
        typer.Option("--full", help="Request the whole theme as one JSON payload instead of streaming"),
    ] = False,
    no_context: Annotated[
        bool,
        typer.Option("--no-context", help="Do not send the current customizations to the model"),
    ] = False,
    model: Annotated[
        str | None,
        typer.Option("--model", "-m", help="Model to use (LiteLLM identifier)"),
    ] = None,
    base_url: Annotated[
        str | None,
        typer.Option("--base-url", help="API base URL for OpenAI-compatible endpoints"),
    ] = None,
    reasoning_effort: Annotated[
        str | None,
        typer.Option("--reasoning-effort", help="Reasoning effort: low, medium, high"),
    ] = None,
    config_path: Annotated[
        str | None,
        typer.Option("--config", "-c", help="Path to a YAML config file"),
    ] = None,
    user_settings: Annotated[
        str | None,
        typer.Option("--user-settings", help="Path to the editor's user settings.json"),
    ] = None,
    workspace_settings: Annotated[
        str | None,
        typer.Option("--workspace-settings", help="Path to a workspace settings.json"),
    ] = None,
    save: Annotated[
        str | None,
        typer.Option("--save", help="Write the applied theme to a JSON file for `apply`"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """Generate a theme and apply it as it streams in."""
    configure_logging(verbose)

    try:
        config = load_config(
            config_path,
            model=model,
            base_url=base_url,
            reasoning_effort=reasoning_effort,
            user_settings=user_settings,
            workspace_settings=workspace_settings,
        )
        if not description:
            if not _is_interactive_terminal():
                raise CliUsageError("A theme description is required.")
            description = _ask_for_description()
            if not description:
                raise CliUsageError("A theme description is required.")

        session = ThemeSession(build_store(config), config=config, use_context=not no_context)
        session.start()
    except CliUsageError as exc:
        console.print(_markup(str(exc), THEME.error))
        raise typer.Exit(1) from exc

    console.print(_markup(f"{config.model}: {description}", THEME.muted))
    summary = asyncio.run(run_generation(session, description, full=full))

    if save:
        try:
            _save_theme(session, save)
        except SaveThemeError as exc:
            console.print(_markup(str(exc), THEME.error))
            raise typer.Exit(1) from exc

    if summary.error is not None:
        raise typer.Exit(1)
    if summary.cancelled:
        raise typer.Exit(130)
    if summary.failures and summary.applied_count == 0:
        raise typer.Exit(1)
