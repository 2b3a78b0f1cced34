"""Provider interface for the text assistant.

A provider turns one instruction prompt plus one user prompt into plain
text. Everything the assistant needs to know about a call (the text, token
counts, which model answered) comes back in an LLMResponse.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class LLMResponse:
    """Result of a single generation call."""
    content: Optional[str]
    input_tokens: int
    output_tokens: int
    model: str
    provider: str
    cost: float = 0.0

    @property
    def text(self) -> str:
        """Generated text with surrounding whitespace removed ('' when nothing came back)."""
        return (self.content or "").strip()


class LLMProvider(ABC):
    """Text-in, text-out generation backend."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier shown by `contract-guard providers`."""

    @property
    @abstractmethod
    def default_model(self) -> str:
        pass

    @abstractmethod
    def complete(
        self,
        system_prompt: str,
        user_message: str,
        model: Optional[str] = None,
        max_tokens: int = 1024,
    ) -> LLMResponse:
        """Generate text for one prompt.

        Args:
            system_prompt: Role and output rules (risk analyst, editor)
            user_message: Contract facts or the text to rewrite
            model: Overrides default_model for this call
            max_tokens: Cap on generated tokens

        Raises:
            Whatever the underlying SDK raises; the assistant handles it.
        """

    async def acomplete(
        self,
        system_prompt: str,
        user_message: str,
        model: Optional[str] = None,
        max_tokens: int = 1024,
    ) -> LLMResponse:
        # SDK calls block, so they run on a worker thread
        return await asyncio.to_thread(self.complete, system_prompt, user_message, model, max_tokens)

    def is_available(self) -> bool:
        """False when credentials are missing and no call should be attempted."""
        return True
