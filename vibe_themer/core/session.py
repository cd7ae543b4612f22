"""ThemeSession: generation context tying the generator, parser, and store together.

One session owns one client and one configuration store. It carries no
module-level state, so several sessions (for example against different
stores in tests) can coexist.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from ..cli_errors import MissingApiKeyError, PromptLoadError
from ..client.model import Prompt
from ..prompts import PromptTemplate, load_prompt, prepare_prompt
from ..store.protocol import ConfigurationStore
from .apply import apply_streaming_setting, apply_theme_customizations, reset_theme_customizations
from .cancellation import CancellationToken
from .colors import is_remove_sentinel
from .config import ThemerConfig
from .events import EventHandler, GenerationMode, GenerationSummary, ThemeEvent
from .payload import ThemePayloadError, parse_theme_payload
from .protocol import LineBuffer, parse_line
from .state import format_current_theme_context, get_current_theme_state
from .types import (
    SelectorSetting,
    StreamingThemeSetting,
    ThemeApplicationResult,
    ThemeCustomizations,
    TokenColorRule,
    TokenSettings,
)

logger = logging.getLogger(__name__)

SessionStatus = Literal["created", "ready", "error", "reset"]


class SessionStateError(RuntimeError):
    """Raised when a session is used out of lifecycle order."""


class _ThemeAccumulator:
    """Tracks what a streaming generation actually applied."""

    def __init__(self, description: str) -> None:
        self.description = description
        self.colors: dict[str, str] = {}
        self.tokens: dict[str, TokenColorRule] = {}

    def add(self, setting: StreamingThemeSetting) -> None:
        if isinstance(setting, SelectorSetting):
            if is_remove_sentinel(setting.color):
                self.colors.pop(setting.name, None)
            else:
                self.colors[setting.name] = setting.color
            return
        if is_remove_sentinel(setting.color):
            self.tokens.pop(setting.scope, None)
        else:
            self.tokens[setting.scope] = TokenColorRule(
                scope=setting.scope,
                settings=TokenSettings(foreground=setting.color, font_style=setting.font_style),
            )

    def build(self) -> ThemeCustomizations:
        return ThemeCustomizations(
            color_customizations=dict(self.colors),
            token_colors=tuple(self.tokens.values()),
            description=self.description,
        )


class ThemeSession:
    """Generates themes and applies them to a configuration store.

    Lifecycle: ``created`` -> ``start()`` -> ``ready``. A generator failure
    moves the session to ``error``; generation may be retried from there.
    ``reset()`` clears every stored customization and moves to ``reset``;
    ``start()`` makes the session ready again.

    Generation (``stream_theme``, ``generate_full``) requires ``start()``.
    ``apply_payload`` and ``reset`` only touch the store and work in any state.

    Usage::

        session = ThemeSession(store, config=ThemerConfig())
        session.start()
        summary = await session.stream_theme("warm sunset over mountains")
        print(summary.message())
    """

    def __init__(
        self,
        store: ConfigurationStore,
        *,
        config: ThemerConfig | None = None,
        client: Any | None = None,
        use_context: bool = True,
        streaming_prompt: str = "streaming",
        full_prompt: str = "full",
    ) -> None:
        self._store = store
        self._config = config or ThemerConfig()
        self._client = client
        self.use_context = use_context
        self._streaming_prompt_name = streaming_prompt
        self._full_prompt_name = full_prompt
        self._streaming_prompt: PromptTemplate | None = None
        self._full_prompt: PromptTemplate | None = None
        self._status: SessionStatus = "created"
        self._token: CancellationToken | None = None
        self._last_theme: ThemeCustomizations | None = None

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def store(self) -> ConfigurationStore:
        return self._store

    @property
    def config(self) -> ThemerConfig:
        return self._config

    @property
    def last_theme(self) -> ThemeCustomizations | None:
        """Customizations applied by the most recent generation, if any."""
        return self._last_theme

    # --- Lifecycle ---

    def start(self) -> None:
        """Create the generator client and load prompts.

        Raises:
            MissingApiKeyError: no client was injected, no API key is configured,
                and no custom ``base_url`` is set.
            PromptLoadError: a prompt template cannot be loaded.
        """
        if self._client is None:
            if not self._config.api_key and not self._config.base_url:
                self._status = "error"
                raise MissingApiKeyError()
            from ..client.litellm_client import LiteLLMClient

            self._client = LiteLLMClient(
                model=self._config.model,
                api_key=self._config.api_key,
                base_url=self._config.base_url,
                chunk_timeout=self._config.chunk_timeout,
                temperature=self._config.temperature,
                reasoning_effort=self._config.reasoning_effort,
            )

        try:
            self._streaming_prompt = load_prompt(self._streaming_prompt_name)
            self._full_prompt = load_prompt(self._full_prompt_name)
        except (FileNotFoundError, ValueError) as exc:
            self._status = "error"
            raise PromptLoadError(str(exc)) from exc

        self._status = "ready"

    def cancel(self) -> None:
        """Request cooperative cancellation of the in-flight generation."""
        if self._token is not None:
            self._token.cancel()

    async def reset(self) -> ThemeApplicationResult:
        """Clear all customizations at every target."""
        result = await reset_theme_customizations(self._store)
        self._last_theme = None
        self._status = "reset"
        return result

    def _require_generation_ready(self) -> None:
        if self._status not in ("ready", "error"):
            raise SessionStateError(
                f"Session is '{self._status}'; call start() before generating a theme"
            )

    # --- Context ---

    async def build_context(self) -> str:
        """Context block describing the current customizations, or ''."""
        result = await get_current_theme_state(self._store)
        if not result.success or result.state is None:
            message = result.error.message if result.error else "unknown error"
            logger.warning("Generating without theme context: %s", message)
            return ""
        return format_current_theme_context(
            result.state,
            max_color_entries=self._config.max_context_colors,
            max_token_entries=self._config.max_context_tokens,
        )

    # --- Generation ---

    async def stream_theme(
        self, description: str, *, on_event: EventHandler | None = None
    ) -> GenerationSummary:
        """Stream a theme from the generator, applying each setting as it arrives.

        Lines are applied in arrival order, one at a time. A malformed line
        or a failed write is recorded and the stream continues.
        """
        self._require_generation_ready()
        assert self._streaming_prompt is not None

        token = CancellationToken()
        self._token = token
        summary = GenerationSummary(description=description, mode="streaming")
        accumulator = _ThemeAccumulator(description)

        context = await self.build_context() if self.use_context else ""
        prompt = Prompt(
            system=prepare_prompt(self._streaming_prompt, {"has_context": bool(context)}),
            user=f"{context}\n{description}" if context else description,
        )
        has_workspace_folders = self._store.has_workspace_folders
        buffer = LineBuffer()
        finished = False

        try:
            async for event in self._client.stream(prompt):
                if token.is_cancelled():
                    break

                if event.type == "text":
                    for line in buffer.feed(event.content or ""):
                        if token.is_cancelled():
                            break
                        await self._handle_line(
                            line, summary, accumulator, has_workspace_folders, on_event
                        )
                elif event.type == "done":
                    summary.usage = dict(event.usage or {})
                    finished = True
                elif event.type == "error":
                    summary.error = event.content or "Unknown generator error"
                    break

            if token.is_cancelled():
                summary.cancelled = True
                await _emit(on_event, ThemeEvent(type="cancelled", content=token.reason))
            elif summary.error is None:
                # A partial trailing line is only trusted once the stream ends cleanly.
                tail = buffer.flush()
                if tail is not None:
                    await self._handle_line(
                        tail, summary, accumulator, has_workspace_folders, on_event
                    )
                if not finished:
                    logger.debug("Stream ended without a done event")
        finally:
            self._token = None

        return await self._finish(summary, accumulator.build(), on_event)

    async def _handle_line(
        self,
        line: str,
        summary: GenerationSummary,
        accumulator: _ThemeAccumulator,
        has_workspace_folders: bool,
        on_event: EventHandler | None,
    ) -> None:
        if not line.strip():
            logger.debug("Skipping blank line")
            return

        parsed = parse_line(line)
        if not parsed.success or parsed.setting is None:
            logger.warning("Skipping line %r: %s", line, parsed.error)
            summary.skipped.append(parsed)
            await _emit(on_event, ThemeEvent(type="skipped", content=parsed.error, line=line))
            return

        setting = parsed.setting
        result = await apply_streaming_setting(setting, self._store, has_workspace_folders)
        if result.success:
            summary.applied.append(setting)
            accumulator.add(setting)
            await _emit(
                on_event,
                ThemeEvent(type="applied", line=line, setting=setting, result=result),
            )
        else:
            assert result.error is not None
            summary.failures.append(result.error)
            await _emit(
                on_event,
                ThemeEvent(
                    type="apply_failed",
                    content=result.error.message,
                    line=line,
                    setting=setting,
                    result=result,
                    error=result.error,
                ),
            )

    async def generate_full(
        self, description: str, *, on_event: EventHandler | None = None
    ) -> GenerationSummary:
        """Request a complete theme in one response and batch-apply it."""
        self._require_generation_ready()
        assert self._full_prompt is not None

        summary = GenerationSummary(description=description, mode="full")
        prompt = Prompt(system=prepare_prompt(self._full_prompt, {}), user=description)

        try:
            content, usage = await self._client.complete(prompt.to_messages())
        except Exception as exc:
            logger.warning("Full theme generation failed: %s", exc)
            summary.error = str(exc) or exc.__class__.__name__
            return await self._finish(summary, None, on_event)
        summary.usage = dict(usage or {})

        try:
            customizations = parse_theme_payload(content, description)
        except ThemePayloadError as exc:
            summary.error = str(exc)
            return await self._finish(summary, None, on_event)

        return await self._apply_batch(customizations, summary, on_event)

    async def apply_payload(
        self,
        customizations: ThemeCustomizations,
        *,
        on_event: EventHandler | None = None,
    ) -> GenerationSummary:
        """Batch-apply an already generated theme (for example a cached file)."""
        summary = GenerationSummary(description=customizations.description, mode="payload")
        return await self._apply_batch(customizations, summary, on_event)

    async def _apply_batch(
        self,
        customizations: ThemeCustomizations,
        summary: GenerationSummary,
        on_event: EventHandler | None,
    ) -> GenerationSummary:
        result = await apply_theme_customizations(
            customizations,
            self._store,
            has_workspace_folders=self._store.has_workspace_folders,
            suppress_notifications=True,
        )
        summary.batch_result = result
        if not result.success and result.error is not None:
            summary.failures.append(result.error)
            await _emit(
                on_event,
                ThemeEvent(
                    type="apply_failed",
                    content=result.error.message,
                    result=result,
                    error=result.error,
                ),
            )
        return await self._finish(summary, customizations if result.success else None, on_event)

    async def _finish(
        self,
        summary: GenerationSummary,
        theme: ThemeCustomizations | None,
        on_event: EventHandler | None,
    ) -> GenerationSummary:
        mode: GenerationMode = summary.mode
        if summary.error is not None:
            if mode != "payload":
                self._status = "error"
            await _emit(on_event, ThemeEvent(type="error", content=summary.error))
        elif mode != "payload":
            self._status = "ready"

        if theme is not None and (theme.color_customizations or theme.token_colors):
            summary.theme = theme
            self._last_theme = theme

        await _emit(
            on_event,
            ThemeEvent(type="done", content=summary.message(), usage=summary.usage),
        )
        return summary


async def _emit(handler: EventHandler | None, event: ThemeEvent) -> None:
    if handler is None:
        return
    maybe_awaitable = handler(event)
    if maybe_awaitable is not None:
        await maybe_awaitable
