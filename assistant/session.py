"""Review session: which contract a user is looking at, and AI results for it."""

from typing import Optional

from loguru import logger

from contracts import Contract
from errors import ContractValidationError
from workflow import WorkflowEngine
from assistant.text_assistant import (
    ANALYSIS_ERROR_MESSAGE,
    EMPTY_ANALYSIS_MESSAGE,
    NO_API_KEY_MESSAGE,
    ContractTextAssistant,
)


_FALLBACK_MESSAGES = {NO_API_KEY_MESSAGE, ANALYSIS_ERROR_MESSAGE, EMPTY_ANALYSIS_MESSAGE}


class ReviewSession:
    """Tracks the contract currently on screen for one viewer.

    An AI summary is written back to a contract only if that contract is
    still the one being viewed when the call resolves.
    """

    def __init__(self, engine: WorkflowEngine, assistant: ContractTextAssistant,
                 viewer_id: Optional[str] = None):
        self.engine = engine
        self.assistant = assistant
        self.viewer_id = viewer_id
        self.current_id: Optional[str] = None

    def view(self, contract_id: str) -> Contract:
        """Open a contract; clears its unread-comment flag for this viewer."""
        contract = self.engine.repository.get_by_id(contract_id)
        self.current_id = contract_id
        if self.viewer_id is not None:
            contract = self.engine.mark_viewed(contract_id, self.viewer_id)
        return contract

    def close(self) -> None:
        self.current_id = None

    async def request_risk_summary(self, refresh: bool = False) -> Optional[str]:
        """Summarize the viewed contract's risk.

        Returns the cached analysis unless refresh is set. Returns None when
        the user moved to another contract before the call finished; the
        result is then discarded.
        """
        contract_id = self.current_id
        if contract_id is None:
            raise ContractValidationError("No contract is being viewed")

        contract = self.engine.repository.get_by_id(contract_id)
        if contract.ai_risk_analysis and not refresh:
            return contract.ai_risk_analysis

        analysis = await self.assistant.asummarize_risk(contract)
        if self.current_id != contract_id:
            logger.debug(f"Discarding stale risk analysis for {contract_id}")
            return None

        # Fallback text is shown but not cached so a later request can retry
        if analysis not in _FALLBACK_MESSAGES:
            self.engine.record_ai_analysis(contract_id, analysis)
        return analysis
