"""Store commands: show, apply, reset, suggest."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from ..cli_errors import CliUsageError, PayloadFileError
from ..core.payload import ThemePayloadError, parse_theme_payload
from ..core.session import ThemeSession
from ..core.state import format_current_theme_context, get_current_theme_state
from ..core.suggestions import get_random_curated_suggestions
from .formatting import _format_error, _markup, _swatch
from .runner import render_summary
from .setup import build_store, configure_logging, load_config
from .state import app, console
from .theme import THEME

ConfigOption = Annotated[
    str | None,
    typer.Option("--config", "-c", help="Path to a YAML config file"),
]
UserSettingsOption = Annotated[
    str | None,
    typer.Option("--user-settings", help="Path to the editor's user settings.json"),
]
WorkspaceSettingsOption = Annotated[
    str | None,
    typer.Option("--workspace-settings", help="Path to a workspace settings.json"),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")]


def _session_for(
    config_path: str | None,
    user_settings: str | None,
    workspace_settings: str | None,
) -> ThemeSession:
    config = load_config(
        config_path,
        user_settings=user_settings,
        workspace_settings=workspace_settings,
    )
    return ThemeSession(build_store(config), config=config)


@app.command()
def show(
    config_path: ConfigOption = None,
    user_settings: UserSettingsOption = None,
    workspace_settings: WorkspaceSettingsOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Show the current customizations and the context sent with the next request."""
    configure_logging(verbose)
    try:
        session = _session_for(config_path, user_settings, workspace_settings)
    except CliUsageError as exc:
        console.print(_markup(str(exc), THEME.error))
        raise typer.Exit(1) from exc

    result = asyncio.run(get_current_theme_state(session.store))
    if not result.success or result.state is None:
        if result.error is not None:
            console.print(_format_error(result.error))
        raise typer.Exit(1)

    state = result.state
    if not state.has_customizations:
        console.print(_markup("No theme customizations found.", THEME.muted))
        return

    console.print(_markup(f"Scope: {state.scope}", THEME.muted))

    if state.color_customizations:
        table = Table(title="Workbench colors", show_header=True, header_style="bold")
        table.add_column("Key")
        table.add_column("")
        table.add_column("Value")
        for key, value in state.color_customizations.items():
            table.add_row(escape(key), _swatch(str(value)), escape(str(value)))
        console.print(table)

    if state.token_color_customizations:
        table = Table(title="Token colors", show_header=True, header_style="bold")
        table.add_column("Key")
        table.add_column("Value")
        for key, value in state.token_color_customizations.items():
            table.add_row(escape(key), escape(json.dumps(value)))
        console.print(table)

    context = format_current_theme_context(
        state,
        max_color_entries=session.config.max_context_colors,
        max_token_entries=session.config.max_context_tokens,
    )
    console.print(_markup("Context for the next request:", THEME.muted))
    console.print(context, markup=False, highlight=False)


@app.command()
def apply(
    payload_file: Annotated[
        str,
        typer.Argument(metavar="FILE", help="Theme JSON saved with `generate --save`"),
    ],
    config_path: ConfigOption = None,
    user_settings: UserSettingsOption = None,
    workspace_settings: WorkspaceSettingsOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Apply a saved theme payload."""
    configure_logging(verbose)
    path = Path(payload_file).expanduser()
    try:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise PayloadFileError(str(path), str(exc)) from exc
        try:
            customizations = parse_theme_payload(text, description=path.stem)
        except ThemePayloadError as exc:
            raise PayloadFileError(str(path), str(exc)) from exc
        session = _session_for(config_path, user_settings, workspace_settings)
    except CliUsageError as exc:
        console.print(_markup(str(exc), THEME.error))
        raise typer.Exit(1) from exc

    summary = asyncio.run(session.apply_payload(customizations))
    if summary.batch_result is not None and summary.batch_result.error is not None:
        console.print(_format_error(summary.batch_result.error))
        raise typer.Exit(1)
    render_summary(summary)


@app.command()
def reset(
    config_path: ConfigOption = None,
    user_settings: UserSettingsOption = None,
    workspace_settings: WorkspaceSettingsOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Remove every color customization so the base theme shows through."""
    configure_logging(verbose)
    try:
        session = _session_for(config_path, user_settings, workspace_settings)
    except CliUsageError as exc:
        console.print(_markup(str(exc), THEME.error))
        raise typer.Exit(1) from exc

    result = asyncio.run(session.reset())
    if not result.success:
        if result.error is not None:
            console.print(_format_error(result.error))
        raise typer.Exit(1)
    console.print(_markup("Theme customizations cleared.", THEME.success))


@app.command()
def suggest(
    count: Annotated[
        int,
        typer.Option("--count", "-n", help="How many ideas to show (0 for all)"),
    ] = 6,
    seed: Annotated[
        int | None,
        typer.Option("--seed", help="Seed for a reproducible pick"),
    ] = None,
) -> None:
    """Print curated theme ideas."""
    for suggestion in get_random_curated_suggestions(count, seed):
        line = _markup(suggestion.label, THEME.accent)
        if suggestion.description:
            line += "  " + _markup(suggestion.description, THEME.muted)
        console.print(line)
