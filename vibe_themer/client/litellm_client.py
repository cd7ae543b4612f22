"""LiteLLM client for theme generation with cost tracking.

Wraps LiteLLM so any provider it supports (OpenAI, Anthropic, local
OpenAI-compatible servers, ...) can drive theme generation:
- Streaming with a per-chunk timeout, so slow reasoning models are allowed
  to think while a stuck connection is still detected
- Usage and cost via LiteLLM's pricing database

Usage:
    client = LiteLLMClient(model="openai/gpt-4.1-mini")
    async for event in client.stream(prompt):
        ...
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Any

from .model import Prompt, StreamEvent

logger = logging.getLogger(__name__)


class LiteLLMClient:
    """Streaming and one-shot completions via LiteLLM."""

    # How long to wait for the next chunk before aborting
    DEFAULT_CHUNK_TIMEOUT: float = 180.0
    COMPLETE_TIMEOUT: float = 600.0

    def __init__(
        self,
        model: str = "gpt-4.1-mini",
        api_key: str | None = None,
        base_url: str | None = None,
        chunk_timeout: float | None = None,
        temperature: float | None = None,
        reasoning_effort: str | None = None,
    ) -> None:
        """Initialize the LiteLLM client.

        Args:
            model: Model identifier (e.g., "openai/gpt-4.1-mini", "anthropic/claude-sonnet-4").
            api_key: Optional API key (falls back to provider environment variables).
            base_url: Optional OpenAI-compatible endpoint.
            chunk_timeout: Max seconds to wait for the next chunk (default: 180).
            temperature: Sampling temperature; ignored when reasoning_effort is set.
            reasoning_effort: Reasoning effort level for compatible models.
        """
        try:
            import litellm
        except ImportError as exc:
            raise ImportError(
                "litellm is required for LiteLLMClient. Install with: pip install vibe-themer"
            ) from exc
        self._litellm = litellm

        self._model = model
        self._api_key = api_key
        self._base_url = base_url
        self._chunk_timeout = chunk_timeout or self.DEFAULT_CHUNK_TIMEOUT
        self._temperature = temperature
        self._reasoning_effort = reasoning_effort

        litellm.suppress_debug_info = True

    @property
    def model(self) -> str:
        return self._model

    def _build_kwargs(self, messages: list[dict[str, Any]], stream: bool) -> dict[str, Any]:
        """Build kwargs for litellm.acompletion()."""
        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": messages,
            "stream": stream,
        }

        if stream:
            # Request usage in the final chunk
            kwargs["stream_options"] = {"include_usage": True}

        if self._api_key:
            kwargs["api_key"] = self._api_key
        if self._base_url:
            kwargs["api_base"] = self._base_url

        # reasoning_effort and temperature are mutually exclusive
        if self._reasoning_effort:
            kwargs["reasoning_effort"] = self._reasoning_effort
        elif self._temperature is not None:
            kwargs["temperature"] = self._temperature

        return kwargs

    def _extract_usage(self, usage_obj: Any, response: Any = None) -> dict[str, Any]:
        """Extract token counts and cost.

        Cost is first computed from the full response; streaming chunks often
        cannot be priced that way, so it falls back to model plus token counts.
        """
        usage: dict[str, Any] = {"input_tokens": 0, "output_tokens": 0}

        if usage_obj:
            usage["input_tokens"] = getattr(usage_obj, "prompt_tokens", 0) or 0
            usage["output_tokens"] = getattr(usage_obj, "completion_tokens", 0) or 0

            details = getattr(usage_obj, "completion_tokens_details", None)
            if details is not None and getattr(details, "reasoning_tokens", None):
                usage["reasoning_tokens"] = details.reasoning_tokens

        cost: float | None = None
        if response is not None:
            try:
                cost = self._litellm.completion_cost(completion_response=response)
            except Exception as exc:
                logger.debug("completion_cost from response failed: %s", exc)
                cost = None

        if cost is None and (usage["input_tokens"] or usage["output_tokens"]):
            try:
                cost = self._litellm.completion_cost(
                    model=self._model,
                    prompt_tokens=usage["input_tokens"],
                    completion_tokens=usage["output_tokens"],
                )
            except Exception as exc:
                logger.debug("completion_cost from token counts failed: %s", exc)
                cost = None

        if cost is not None:
            usage["cost_usd"] = cost
        return usage

    async def stream(self, prompt: Prompt) -> AsyncIterator[StreamEvent]:
        """Yield ``text`` deltas, then ``done`` with usage, or a single ``error``.

        Transport failures and chunk timeouts are reported as ``error``
        events rather than raised, so a caller can keep whatever it already
        applied.
        """
        kwargs = self._build_kwargs(prompt.to_messages(), stream=True)

        try:
            response = await self._litellm.acompletion(**kwargs)
            usage: dict[str, Any] = {}

            async for chunk in self._iter_with_timeout(response):
                if getattr(chunk, "usage", None):
                    usage = self._extract_usage(chunk.usage, response=chunk)

                if not chunk.choices:
                    continue

                delta = chunk.choices[0].delta
                if delta.content:
                    yield StreamEvent(type="text", content=delta.content)

            yield StreamEvent(type="done", usage=usage)

        except asyncio.TimeoutError:
            yield StreamEvent(
                type="error",
                content=f"Chunk timeout: no response received for {self._chunk_timeout}s",
            )
        except Exception as e:
            yield StreamEvent(type="error", content=str(e))

    async def _iter_with_timeout(self, response: Any) -> AsyncIterator[Any]:
        """Iterate a streaming response, raising asyncio.TimeoutError on a stall."""
        aiter = response.__aiter__()
        while True:
            try:
                chunk = await asyncio.wait_for(aiter.__anext__(), timeout=self._chunk_timeout)
            except StopAsyncIteration:
                break
            yield chunk

    async def complete(self, messages: list[dict[str, Any]]) -> tuple[str, dict[str, Any]]:
        """Non-streaming completion. Returns (content, usage).

        Transport errors propagate to the caller.
        """
        kwargs = self._build_kwargs(messages, stream=False)
        kwargs["timeout"] = self.COMPLETE_TIMEOUT
        response = await self._litellm.acompletion(**kwargs)

        content = response.choices[0].message.content or ""
        usage = self._extract_usage(getattr(response, "usage", None), response=response)
        return content, usage
