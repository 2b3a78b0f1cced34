"""Text-generation provider abstraction for the AI assistant."""

from .base import LLMProvider, LLMResponse
from .gemini_provider import GeminiProvider
from .litellm_provider import LiteLLMProvider
from .factory import get_provider, list_providers

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "GeminiProvider",
    "LiteLLMProvider",
    "get_provider",
    "list_providers",
]
