"""LiteLLM-backed provider for any model LiteLLM can route to."""

from typing import Optional

from loguru import logger

from config import settings
from .base import LLMProvider, LLMResponse


# Bare model-name prefixes LiteLLM needs a provider prefix for
_PROVIDER_PREFIXES = {
    "gemini": "gemini",
    "claude": "anthropic",
    "deepseek": "deepseek",
}


def to_litellm_model(model: str) -> str:
    """Map a bare model name to a LiteLLM model string.

    Strings that already carry a provider prefix (provider/model) pass
    through, as do OpenAI model names.
    """
    if "/" in model:
        return model
    lowered = model.lower()
    for prefix, provider in _PROVIDER_PREFIXES.items():
        if lowered.startswith(prefix):
            return f"{provider}/{model}"
    return model


class LiteLLMProvider(LLMProvider):
    """Provider that delegates to litellm.completion()."""

    def __init__(self, default_model: Optional[str] = None, metadata: Optional[dict] = None):
        """Initialize with the model to use by default.

        Args:
            default_model: LiteLLM model string or bare model name
                (settings.ai_model when omitted)
            metadata: Optional dict passed through to litellm
        """
        self._default_model = to_litellm_model(default_model or settings.ai_model)
        self._metadata = metadata or {}

    @property
    def name(self) -> str:
        return "litellm"

    @property
    def default_model(self) -> str:
        return self._default_model

    def complete(
        self,
        system_prompt: str,
        user_message: str,
        model: Optional[str] = None,
        max_tokens: int = 1024,
    ) -> LLMResponse:
        import litellm

        resolved_model = to_litellm_model(model) if model else self._default_model
        logger.debug(f"LiteLLM request: model={resolved_model}, max_tokens={max_tokens}")
        response = litellm.completion(
            model=resolved_model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            max_tokens=max_tokens,
            metadata={**self._metadata},
        )

        content = response.choices[0].message.content or ""
        usage = getattr(response, "usage", None)
        input_tokens = getattr(usage, "prompt_tokens", 0) or 0
        output_tokens = getattr(usage, "completion_tokens", 0) or 0
        hidden = getattr(response, "_hidden_params", None) or {}
        cost = float(hidden.get("response_cost", 0) or 0)

        return LLMResponse(
            content=content,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            model=getattr(response, "model", None) or resolved_model,
            provider=self.name,
            cost=cost,
        )

    def is_available(self) -> bool:
        """LiteLLM reads API keys from env; available whenever a model is set."""
        return bool(self._default_model)
