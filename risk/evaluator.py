"""Risk trigger evaluator.

Pure functions: the same inputs always give the same triggers. Callers
validate amounts (non-negative, finite) before evaluating; Contract and
ContractDraft already enforce that.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from contracts import Contract, ContractType, RiskEvaluation, RiskTrigger
from config import settings
from risk.catalog import (
    CAPEX_OVER_5M,
    FIXED_TERM_OVER_3_YEARS,
    LIABILITY_CAP_BELOW_100,
    OPEX_OVER_1M,
    SUBCONTRACTING_OVER_30,
    TRIGGER_CATALOG,
    is_checklist_trigger,
)


@dataclass(frozen=True)
class RiskThresholds:
    """Amount thresholds used by the automatic rules."""
    opex_high_risk: float
    capex_high_risk: float
    capex_classification: float

    @classmethod
    def from_settings(cls) -> "RiskThresholds":
        return cls(
            opex_high_risk=settings.opex_high_risk_threshold,
            capex_high_risk=settings.capex_high_risk_threshold,
            capex_classification=settings.capex_classification_threshold,
        )


def classify_contract_type(amount: float, thresholds: Optional[RiskThresholds] = None) -> ContractType:
    """CAPEX above the classification threshold, OPEX otherwise."""
    thresholds = thresholds or RiskThresholds.from_settings()
    return ContractType.CAPEX if amount > thresholds.capex_classification else ContractType.OPEX


def evaluate(
    amount: float,
    contract_type: ContractType,
    manual_trigger_ids: Iterable[str] = (),
    thresholds: Optional[RiskThresholds] = None,
) -> RiskEvaluation:
    """Evaluate the risk triggers for a contract's declared attributes.

    Args:
        amount: Contract value (non-negative)
        contract_type: CAPEX or OPEX; decides which financial rule applies
        manual_trigger_ids: Checklist flags a reviewer has confirmed
        thresholds: Override the configured thresholds

    Returns:
        RiskEvaluation with triggered copies in catalog order
    """
    thresholds = thresholds or RiskThresholds.from_settings()
    fired = {tid for tid in manual_trigger_ids if is_checklist_trigger(tid)}

    if contract_type == ContractType.OPEX and amount > thresholds.opex_high_risk:
        fired.add(OPEX_OVER_1M)
    if contract_type == ContractType.CAPEX and amount > thresholds.capex_high_risk:
        fired.add(CAPEX_OVER_5M)

    detected: List[RiskTrigger] = [
        t.model_copy(update={"triggered": True})
        for t in TRIGGER_CATALOG
        if t.id in fired
    ]
    return RiskEvaluation(detected_triggers=detected)


def evaluate_contract(contract: Contract, thresholds: Optional[RiskThresholds] = None) -> RiskEvaluation:
    """Evaluate a contract from its own amount, type and checklist flags."""
    return evaluate(
        contract.amount,
        contract.contract_type,
        contract.manual_trigger_ids,
        thresholds,
    )


def suggest_checklist_triggers(contract: Contract) -> List[str]:
    """Checklist flags the contract's declared attributes point at.

    Hints for the reviewer only; they are not detected until confirmed.
    """
    suggestions = []
    if contract.liability_cap_percent < settings.liability_cap_floor_percent:
        suggestions.append(LIABILITY_CAP_BELOW_100)
    years = contract.term_years()
    if years is not None and years > settings.max_fixed_term_years:
        suggestions.append(FIXED_TERM_OVER_3_YEARS)
    if contract.is_subcontracting and contract.subcontracting_percent > settings.max_subcontracting_percent:
        suggestions.append(SUBCONTRACTING_OVER_30)
    return [tid for tid in suggestions if tid not in contract.manual_trigger_ids]
