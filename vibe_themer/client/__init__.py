"""Text-generation client."""

from .litellm_client import LiteLLMClient
from .model import Prompt, StreamEvent

__all__ = ["LiteLLMClient", "Prompt", "StreamEvent"]
