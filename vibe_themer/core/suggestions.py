"""Curated theme prompt ideas shown when the user has nothing in mind."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Literal

SuggestionSource = Literal["ai_generated", "curated_fallback"]

_VALID_SOURCES = ("ai_generated", "curated_fallback")


@dataclass(frozen=True)
class ThemePromptSuggestion:
    label: str
    description: str | None = None
    source: SuggestionSource = "curated_fallback"


CURATED_SUGGESTIONS: tuple[ThemePromptSuggestion, ...] = (
    ThemePromptSuggestion("warm sunset over mountains", "Golden hour vibes with mountain silhouettes"),
    ThemePromptSuggestion("minimal dark forest", "Clean aesthetic with nature-inspired tones"),
    ThemePromptSuggestion("vibrant retro 80s", "Neon colors and nostalgic energy"),
    ThemePromptSuggestion(
        "the feeling of finding a $20 bill in old jeans", "Unexpected joy and comfort"
    ),
    ThemePromptSuggestion(
        "existential dread but make it cozy", "Philosophical depths with warm comfort"
    ),
    ThemePromptSuggestion(
        "needs more cat energy", "Playful, independent, and mysteriously elegant"
    ),
    ThemePromptSuggestion(
        "what if this theme went to therapy", "Self-aware colors with emotional intelligence"
    ),
    ThemePromptSuggestion("make it taste like lavender", "Soft purple and calming neutral tones"),
    ThemePromptSuggestion(
        "3am coding session with warm amber highlights", "Deep focus atmosphere with gentle warmth"
    ),
    ThemePromptSuggestion("cyberpunk cat cafe vibes", "Futuristic neon meets cozy comfort"),
    ThemePromptSuggestion(
        "sunset reflecting off your monitor", "Natural light meeting digital workspace"
    ),
    ThemePromptSuggestion(
        "if autumn had a debugging session", "Seasonal warmth with problem-solving energy"
    ),
)


def is_valid_suggestion(suggestion: Any) -> bool:
    """Accept suggestion objects or dicts with a non-empty label and known source."""
    if isinstance(suggestion, ThemePromptSuggestion):
        fields = {
            "label": suggestion.label,
            "description": suggestion.description,
            "source": suggestion.source,
        }
    elif isinstance(suggestion, dict):
        fields = suggestion
    else:
        return False

    label = fields.get("label")
    description = fields.get("description")
    return (
        isinstance(label, str)
        and bool(label.strip())
        and (description is None or isinstance(description, str))
        and fields.get("source") in _VALID_SOURCES
    )


def validate_suggestions(suggestions: list[Any]) -> list[Any]:
    return [s for s in suggestions if is_valid_suggestion(s)]


def get_random_curated_suggestions(
    count: int = 6, seed: int | None = None
) -> list[ThemePromptSuggestion]:
    """Pick ``count`` suggestions. A seed makes the pick reproducible.

    A count outside ``1..len(CURATED_SUGGESTIONS)`` returns every suggestion
    in curated order.
    """
    if count <= 0 or count > len(CURATED_SUGGESTIONS):
        return list(CURATED_SUGGESTIONS)
    shuffled = list(CURATED_SUGGESTIONS)
    random.Random(seed).shuffle(shuffled)
    return shuffled[:count]
