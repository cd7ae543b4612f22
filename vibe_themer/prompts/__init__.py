"""Built-in prompt templates and loading helpers."""

from .loader import PromptTemplate, PromptVariable, load_prompt, parse_frontmatter
from .renderer import prepare_prompt, render_string

__all__ = [
    "PromptTemplate",
    "PromptVariable",
    "load_prompt",
    "parse_frontmatter",
    "prepare_prompt",
    "render_string",
]
