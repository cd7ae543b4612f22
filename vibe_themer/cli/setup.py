"""Shared command setup: logging, config loading, and store construction."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from rich.logging import RichHandler

from ..cli_errors import InvalidConfigError
from ..core.config import DEFAULT_CONFIG_PATH, ThemerConfig
from ..store import JsonSettingsStore
from .state import err_console


def configure_logging(verbose: bool) -> None:
    """Route package logs through Rich on stderr.

    Without ``--verbose`` only errors are shown; per-line warnings are
    already rendered by the command itself.
    """
    handler = RichHandler(console=err_console, show_path=False, show_time=verbose)
    logger = logging.getLogger("vibe_themer")
    logger.handlers = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.ERROR)
    logger.propagate = False


def load_config(
    config_path: str | None,
    *,
    model: str | None = None,
    base_url: str | None = None,
    reasoning_effort: str | None = None,
    user_settings: str | None = None,
    workspace_settings: str | None = None,
) -> ThemerConfig:
    """Load the YAML config (explicit path or default location) and apply CLI overrides."""
    path = Path(config_path).expanduser() if config_path else DEFAULT_CONFIG_PATH
    if config_path or path.exists():
        try:
            config = ThemerConfig.from_file(path)
        except (FileNotFoundError, ValueError, TypeError, yaml.YAMLError) as exc:
            raise InvalidConfigError(str(path), str(exc)) from exc
    else:
        config = ThemerConfig()

    if model:
        config.model = model
    if base_url:
        config.base_url = base_url
    if reasoning_effort:
        config.reasoning_effort = reasoning_effort
    if user_settings:
        config.user_settings = user_settings
    if workspace_settings:
        config.workspace_settings = workspace_settings
    return config


def build_store(config: ThemerConfig) -> JsonSettingsStore:
    return JsonSettingsStore(
        config.resolve_user_settings(),
        config.resolve_workspace_settings(),
    )
