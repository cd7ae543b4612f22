"""Domain types for theme settings, configuration scopes, and results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

COLOR_CUSTOMIZATIONS_SECTION = "workbench.colorCustomizations"
TOKEN_COLOR_CUSTOMIZATIONS_SECTION = "editor.tokenColorCustomizations"
TEXTMATE_RULES_KEY = "textMateRules"

ScopeLabel = Literal["workspace", "global", "both"]


class ConfigurationTarget(str, Enum):
    """Storage level a setting is read from or written to."""

    GLOBAL = "global"
    WORKSPACE = "workspace"


# --- Streaming settings ---


@dataclass(frozen=True)
class SelectorSetting:
    """One UI color slot decoded from a ``SELECTOR:`` line."""

    name: str
    color: str

    @property
    def type(self) -> Literal["selector"]:
        return "selector"

    @property
    def key(self) -> str:
        return self.name


@dataclass(frozen=True)
class TokenSetting:
    """One syntax token rule decoded from a ``TOKEN:`` line."""

    scope: str
    color: str
    font_style: str | None = None

    @property
    def type(self) -> Literal["token"]:
        return "token"

    @property
    def key(self) -> str:
        return self.scope


StreamingThemeSetting = SelectorSetting | TokenSetting


@dataclass(frozen=True)
class ParseResult:
    """Outcome of parsing one protocol line. ``line`` is always the raw input."""

    success: bool
    line: str
    setting: StreamingThemeSetting | None = None
    error: str | None = None

    @classmethod
    def ok(cls, setting: StreamingThemeSetting, line: str) -> ParseResult:
        return cls(success=True, line=line, setting=setting)

    @classmethod
    def fail(cls, error: str, line: str) -> ParseResult:
        return cls(success=False, line=line, error=error)


# --- Full theme payloads ---


@dataclass(frozen=True)
class TokenSettings:
    """Display settings of a token rule."""

    foreground: str | None = None
    background: str | None = None
    font_style: str | None = None

    def to_dict(self) -> dict[str, str]:
        data: dict[str, str] = {}
        if self.foreground is not None:
            data["foreground"] = self.foreground
        if self.background is not None:
            data["background"] = self.background
        if self.font_style is not None:
            data["fontStyle"] = self.font_style
        return data


@dataclass(frozen=True)
class TokenColorRule:
    """A TextMate scope (or scopes) with display settings, in host format."""

    scope: str | tuple[str, ...]
    settings: TokenSettings = field(default_factory=TokenSettings)

    def to_dict(self) -> dict[str, Any]:
        scope: str | list[str] = self.scope if isinstance(self.scope, str) else list(self.scope)
        return {"scope": scope, "settings": self.settings.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TokenColorRule:
        raw_scope = data.get("scope", "")
        if isinstance(raw_scope, (list, tuple)):
            scope: str | tuple[str, ...] = tuple(str(item) for item in raw_scope)
        else:
            scope = str(raw_scope)
        raw_settings = data.get("settings") or {}
        if not isinstance(raw_settings, dict):
            raw_settings = {}
        return cls(
            scope=scope,
            settings=TokenSettings(
                foreground=_optional_str(raw_settings.get("foreground")),
                background=_optional_str(raw_settings.get("background")),
                font_style=_optional_str(raw_settings.get("fontStyle")),
            ),
        )


def _optional_str(value: Any) -> str | None:
    return value.strip() if isinstance(value, str) else None


@dataclass(frozen=True)
class ThemeCustomizations:
    """A complete theme: UI colors, token rules, and a description."""

    color_customizations: dict[str, str]
    token_colors: tuple[TokenColorRule, ...] = ()
    description: str = ""


# --- Scopes ---


@dataclass(frozen=True)
class ConfigurationScope:
    """Where settings are written.

    ``both`` carries a primary and a fallback target that are attempted in
    that order; the single-target scopes carry only ``primary``.
    """

    type: ScopeLabel
    primary: ConfigurationTarget
    fallback: ConfigurationTarget | None = None

    @classmethod
    def single(cls, target: ConfigurationTarget) -> ConfigurationScope:
        label: ScopeLabel = "workspace" if target is ConfigurationTarget.WORKSPACE else "global"
        return cls(type=label, primary=target)

    @classmethod
    def both(
        cls, primary: ConfigurationTarget, fallback: ConfigurationTarget
    ) -> ConfigurationScope:
        return cls(type="both", primary=primary, fallback=fallback)

    def targets(self) -> list[ConfigurationTarget]:
        """Ordered write targets."""
        if self.fallback is None:
            return [self.primary]
        return [self.primary, self.fallback]

    def describe(self) -> str:
        if self.type == "workspace":
            return "to workspace settings"
        if self.type == "global":
            return "to global settings"
        return "to global settings (with workspace fallback)"


# --- Results ---


@dataclass(frozen=True)
class ThemeApplicationError:
    """Structured failure with enough context to decide retry vs abort."""

    message: str
    cause: Any = None
    recoverable: bool = True
    suggested_action: str | None = None

    @classmethod
    def create(
        cls,
        message: str,
        cause: Any = None,
        recoverable: bool = True,
        suggested_action: str | None = None,
    ) -> ThemeApplicationError:
        return cls(
            message=message,
            cause=cause,
            recoverable=recoverable,
            suggested_action=suggested_action,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary for logging or display."""
        return {
            "message": self.message,
            "cause": repr(self.cause) if self.cause is not None else None,
            "recoverable": self.recoverable,
            "suggested_action": self.suggested_action,
        }


@dataclass(frozen=True)
class ThemeApplicationResult:
    """Outcome of applying settings to the configuration store.

    ``applied_scope`` is the scope the write was planned against;
    ``applied_target`` is the target whose write actually succeeded.
    """

    success: bool
    applied_scope: ConfigurationScope | None = None
    applied_target: ConfigurationTarget | None = None
    error: ThemeApplicationError | None = None

    @classmethod
    def ok(
        cls,
        applied_scope: ConfigurationScope,
        applied_target: ConfigurationTarget | None = None,
    ) -> ThemeApplicationResult:
        return cls(success=True, applied_scope=applied_scope, applied_target=applied_target)

    @classmethod
    def fail(cls, error: ThemeApplicationError) -> ThemeApplicationResult:
        return cls(success=False, error=error)


@dataclass(frozen=True)
class CurrentThemeState:
    """Effective customizations merged across storage scopes."""

    color_customizations: dict[str, str]
    token_color_customizations: dict[str, Any]
    has_customizations: bool
    scope: ScopeLabel

    @classmethod
    def empty(cls) -> CurrentThemeState:
        return cls(
            color_customizations={},
            token_color_customizations={},
            has_customizations=False,
            scope="global",
        )


@dataclass(frozen=True)
class CurrentThemeResult:
    """Outcome of reading the current theme state."""

    success: bool
    state: CurrentThemeState | None = None
    error: ThemeApplicationError | None = None
