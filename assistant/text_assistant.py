"""AI text assistant: executive risk summaries and narrative rewrites.

The assistant never raises on provider trouble. Missing credentials, call
failures and empty responses all map to fixed fallback results, so callers
can show whatever comes back.
"""

from typing import Optional, Union

from loguru import logger

from contracts import Contract
from config import settings
from providers import LLMProvider, LLMResponse, get_provider
from assistant.prompts import (
    CONTRACT_EDITOR_PROMPT,
    RISK_ANALYST_PROMPT,
    RefineContext,
    refine_message,
    risk_summary_message,
)


NO_API_KEY_MESSAGE = "API Key not configured. Unable to perform AI analysis."
ANALYSIS_ERROR_MESSAGE = "Error generating AI analysis. Please review manually."
EMPTY_ANALYSIS_MESSAGE = "No analysis generated."

# Shorter inputs are returned untouched by refine
MIN_REFINE_LENGTH = 5


class ContractTextAssistant:
    """Risk summarisation and text refinement over an LLMProvider."""

    def __init__(
        self,
        provider: Optional[LLMProvider] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
    ):
        """Initialize the assistant.

        Args:
            provider: Provider to call (the configured default when omitted)
            model: Model override passed on every call
            max_tokens: Response cap (settings.ai_max_output_tokens when omitted)
        """
        self.provider = provider if provider is not None else get_provider()
        self.model = model
        self.max_tokens = max_tokens or settings.ai_max_output_tokens

    def is_configured(self) -> bool:
        return self.provider.is_available()

    # --- result mapping ---

    def _summary_from(self, contract_id: str, response: Union[LLMResponse, Exception]) -> str:
        if isinstance(response, Exception):
            logger.error(f"Risk analysis failed for {contract_id}: {response}")
            return ANALYSIS_ERROR_MESSAGE
        text = response.text
        logger.debug(
            f"Risk analysis for {contract_id}: {response.output_tokens} tokens from {response.model}"
        )
        return text or EMPTY_ANALYSIS_MESSAGE

    def _refined_from(self, original: str, response: Union[LLMResponse, Exception]) -> str:
        if isinstance(response, Exception):
            logger.error(f"Text refinement failed: {response}")
            return original
        return response.text or original

    def _should_refine(self, text: str) -> bool:
        if not text or len(text) < MIN_REFINE_LENGTH:
            return False
        if not self.is_configured():
            logger.warning("AI provider not configured; returning text unchanged")
            return False
        return True

    # --- sync API ---

    def summarize_risk(self, contract: Contract) -> str:
        """Three-bullet executive risk assessment for a contract."""
        if not self.is_configured():
            logger.warning(f"AI provider {self.provider.name} has no API key; skipping analysis")
            return NO_API_KEY_MESSAGE
        try:
            response = self.provider.complete(
                system_prompt=RISK_ANALYST_PROMPT,
                user_message=risk_summary_message(contract),
                model=self.model,
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            return self._summary_from(contract.id, e)
        return self._summary_from(contract.id, response)

    def refine(self, text: str, context: RefineContext = RefineContext.SCOPE) -> str:
        """Rewrite rough narrative text; returns the input when nothing can be done."""
        if not self._should_refine(text):
            return text
        try:
            response = self.provider.complete(
                system_prompt=CONTRACT_EDITOR_PROMPT,
                user_message=refine_message(text, RefineContext(context)),
                model=self.model,
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            return self._refined_from(text, e)
        return self._refined_from(text, response)

    # --- async API ---

    async def asummarize_risk(self, contract: Contract) -> str:
        """Async summarize_risk; the provider call runs in a worker thread."""
        if not self.is_configured():
            logger.warning(f"AI provider {self.provider.name} has no API key; skipping analysis")
            return NO_API_KEY_MESSAGE
        try:
            response = await self.provider.acomplete(
                RISK_ANALYST_PROMPT,
                risk_summary_message(contract),
                self.model,
                self.max_tokens,
            )
        except Exception as e:
            return self._summary_from(contract.id, e)
        return self._summary_from(contract.id, response)

    async def arefine(self, text: str, context: RefineContext = RefineContext.SCOPE) -> str:
        if not self._should_refine(text):
            return text
        try:
            response = await self.provider.acomplete(
                CONTRACT_EDITOR_PROMPT,
                refine_message(text, RefineContext(context)),
                self.model,
                self.max_tokens,
            )
        except Exception as e:
            return self._refined_from(text, e)
        return self._refined_from(text, response)
