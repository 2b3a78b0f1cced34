"""Factory for creating text-generation providers."""

from typing import Dict, Optional, Type

from loguru import logger

from config import settings
from .base import LLMProvider
from .gemini_provider import GeminiProvider
from .litellm_provider import LiteLLMProvider


# Registry of available providers
PROVIDERS: Dict[str, Type[LLMProvider]] = {
    "gemini": GeminiProvider,
    "google": GeminiProvider,
    "litellm": LiteLLMProvider,
}

_ALIASES = {"google"}


def get_provider(
    provider_name: Optional[str] = None,
    model: Optional[str] = None,
) -> LLMProvider:
    """Get a provider instance.

    Args:
        provider_name: Provider name (gemini, google, litellm). Defaults to
            settings.ai_provider.
        model: Default model for the provider (settings.ai_model when omitted)

    Returns:
        LLMProvider instance

    Raises:
        ValueError: Unknown provider name

    Examples:
        get_provider()                                  # configured default
        get_provider("gemini", "gemini-2.5-pro")
        get_provider("litellm", "openai/gpt-4o-mini")
    """
    provider_key = (provider_name or settings.ai_provider).lower()
    if provider_key not in PROVIDERS:
        raise ValueError(
            f"Unknown provider: {provider_key}. "
            f"Available: {list(PROVIDERS.keys())}"
        )
    provider_class = PROVIDERS[provider_key]
    if provider_class is LiteLLMProvider:
        return LiteLLMProvider(default_model=model)
    return provider_class(model=model)


def list_providers() -> Dict[str, bool]:
    """List all providers and their availability.

    Returns:
        Dict mapping provider name to availability status
    """
    result = {}
    for name, provider_class in PROVIDERS.items():
        if name in _ALIASES:
            continue
        try:
            result[name] = provider_class().is_available()
        except Exception as e:
            logger.warning(f"Provider {name} could not be constructed: {e}")
            result[name] = False
    return result
