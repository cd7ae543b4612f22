"""Centralized CLI theme tokens."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CliTheme:
    """Semantic Rich color tokens for CLI output."""

    primary: str = "#E6EDF3"
    secondary: str = "#56B6C2"
    muted: str = "#7F848E"
    accent: str = "#C678DD"
    success: str = "#98C379"
    warning: str = "#E5C07B"
    error: str = "#E06C75"
    selector: str = "#61AFEF"
    token: str = "#D19A66"


THEME = CliTheme()
