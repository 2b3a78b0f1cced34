"""Risk trigger catalog and evaluator."""

from .catalog import (
    TRIGGER_CATALOG,
    AUTO_TRIGGER_IDS,
    CHECKLIST_TRIGGER_IDS,
    get_trigger,
    is_checklist_trigger,
)
from .evaluator import (
    RiskThresholds,
    classify_contract_type,
    evaluate,
    evaluate_contract,
    suggest_checklist_triggers,
)

__all__ = [
    "TRIGGER_CATALOG",
    "AUTO_TRIGGER_IDS",
    "CHECKLIST_TRIGGER_IDS",
    "get_trigger",
    "is_checklist_trigger",
    "RiskThresholds",
    "classify_contract_type",
    "evaluate",
    "evaluate_contract",
    "suggest_checklist_triggers",
]
