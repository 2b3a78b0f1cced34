"""Google Gemini provider (google-genai SDK)."""

import os
from typing import Optional

from loguru import logger

from config import settings
from .base import LLMProvider, LLMResponse


class GeminiProvider(LLMProvider):
    """Provider for Google Gemini models."""

    MODELS = {
        "gemini-flash": "gemini-2.5-flash",
        "gemini-pro": "gemini-2.5-pro",
        "gemini-flash-lite": "gemini-2.5-flash-lite",
    }

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        """Initialize Gemini provider.

        Args:
            api_key: Google API key. Falls back to settings, then GOOGLE_API_KEY,
                GEMINI_API_KEY or API_KEY env vars.
            model: Default model (settings.ai_model when omitted)
        """
        self.api_key = (
            api_key
            or settings.google_api_key
            or os.environ.get("GOOGLE_API_KEY")
            or os.environ.get("GEMINI_API_KEY")
            or os.environ.get("API_KEY")
        )
        self._model = model or settings.ai_model
        self._client = None

    @property
    def name(self) -> str:
        return "gemini"

    @property
    def default_model(self) -> str:
        return self._model

    def _get_client(self):
        if self._client is None:
            from google import genai
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def _resolve_model(self, model: Optional[str]) -> str:
        if model is None:
            return self.default_model
        return self.MODELS.get(model, model)

    def complete(
        self,
        system_prompt: str,
        user_message: str,
        model: Optional[str] = None,
        max_tokens: int = 1024,
    ) -> LLMResponse:
        from google.genai import types

        resolved_model = self._resolve_model(model)
        logger.debug(f"Gemini request: model={resolved_model}, max_tokens={max_tokens}")

        response = self._get_client().models.generate_content(
            model=resolved_model,
            contents=user_message,
            config=types.GenerateContentConfig(
                system_instruction=system_prompt,
                max_output_tokens=max_tokens,
            ),
        )

        text = response.text or ""
        # Usage metadata is optional; estimate when absent
        usage = getattr(response, "usage_metadata", None)
        input_tokens = getattr(usage, "prompt_token_count", None) or len(system_prompt + user_message) // 4
        output_tokens = getattr(usage, "candidates_token_count", None) or len(text) // 4

        return LLMResponse(
            content=text,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            model=resolved_model,
            provider=self.name,
        )

    def is_available(self) -> bool:
        return bool(self.api_key)
