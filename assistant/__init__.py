"""AI text assistant and review session."""

from .prompts import RefineContext
from .text_assistant import (
    ANALYSIS_ERROR_MESSAGE,
    EMPTY_ANALYSIS_MESSAGE,
    NO_API_KEY_MESSAGE,
    ContractTextAssistant,
)
from .session import ReviewSession

__all__ = [
    "RefineContext",
    "ANALYSIS_ERROR_MESSAGE",
    "EMPTY_ANALYSIS_MESSAGE",
    "NO_API_KEY_MESSAGE",
    "ContractTextAssistant",
    "ReviewSession",
]
