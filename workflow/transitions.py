"""Pure transition rules for the approval workflow.

Nothing here mutates a contract. `plan_transition` validates an action and
returns what applying it would do; the engine then applies the plan.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional

from contracts import (
    Action,
    ApprovalKey,
    Contract,
    ContractStatus,
    DECISION_ACTIONS,
    ReviewDecision,
    User,
)
from config import settings
from errors import ContractValidationError, InvalidTransitionError
from workflow.permissions import approval_key_for, available_actions, is_binding_decision


STANDARD_APPROVALS = frozenset({ApprovalKey.CFO, ApprovalKey.FUNCTION_HEAD})

# Field name -> label used in validation messages
MANDATORY_TEXT_FIELDS: Dict[str, str] = {
    "contractor_name": "Contractor name",
    "department": "Department",
    "scope_of_work": "Scope of work",
    "background_need": "Background / need",
    "tender_process_summary": "Tender process summary",
    "technical_eval_summary": "Technical evaluation summary",
    "commercial_eval_summary": "Commercial evaluation summary",
    "risk_description": "Risk description",
    "mitigation_measures": "Mitigation measures",
}


@dataclass(frozen=True)
class TransitionPlan:
    """What applying an action will do to a contract."""
    action: Action
    from_status: ContractStatus
    to_status: ContractStatus
    audit_label: str
    decision: Optional[ReviewDecision] = None
    approval_key: Optional[ApprovalKey] = None
    binding: bool = True

    @property
    def changes_status(self) -> bool:
        return self.from_status != self.to_status


def required_approvals(contract: Contract) -> FrozenSet[ApprovalKey]:
    """Standard approvals a contract needs before it can leave Submitted.

    CFO and Function Head always; Legal as well for high-risk contracts or
    contracts off standard terms.
    """
    required = set(STANDARD_APPROVALS)
    if contract.is_high_risk or not contract.is_standard_terms:
        required.add(ApprovalKey.LEGAL)
    return frozenset(required)


def requires_ceo(contract: Contract, threshold: Optional[float] = None) -> bool:
    """High-risk or above the CEO value threshold."""
    threshold = settings.ceo_escalation_threshold if threshold is None else threshold
    return contract.is_high_risk or contract.amount > threshold


def pending_approvals(contract: Contract) -> FrozenSet[ApprovalKey]:
    return frozenset(k for k in required_approvals(contract) if not contract.has_approval(k))


def missing_mandatory_fields(contract: Contract) -> Dict[str, str]:
    """Field-level problems that block submission (empty when complete)."""
    missing = {
        name: f"{label} is required"
        for name, label in MANDATORY_TEXT_FIELDS.items()
        if not (getattr(contract, name) or "").strip()
    }
    if contract.amount <= 0:
        missing["amount"] = "Amount must be greater than zero"
    if contract.start_date is None:
        missing["start_date"] = "Start date is required"
    if contract.end_date is None:
        missing["end_date"] = "End date is required"
    if contract.start_date and contract.end_date and contract.end_date < contract.start_date:
        missing["end_date"] = "End date is before start date"
    return missing


def resubmission_approvals(approvals: Dict[ApprovalKey, bool]) -> Dict[ApprovalKey, bool]:
    """Approvals carried into a resubmission.

    Approvals granted before a changes request are kept; approvals only
    ever gain entries.
    """
    return dict(approvals)


def routed_status(contract: Contract) -> ContractStatus:
    """Where a contract under review belongs, given its approvals and risk.

    Submitted while a required approval is outstanding; after that Pending
    CEO when escalation applies, otherwise Approved.
    """
    if pending_approvals(contract):
        return ContractStatus.SUBMITTED
    return ContractStatus.PENDING_CEO if requires_ceo(contract) else ContractStatus.APPROVED


def status_after_approval(contract: Contract, key: ApprovalKey) -> ContractStatus:
    """Status once `key` is granted on top of the contract's current approvals."""
    if contract.status == ContractStatus.PENDING_CEO:
        return ContractStatus.APPROVED

    granted = {**contract.corporate_approvals, key: True}
    return routed_status(contract.model_copy(update={"corporate_approvals": granted}))


def authorize(contract: Contract, actor: User, action: Action) -> None:
    """Raise InvalidTransitionError unless the actor may take this action now."""
    if not actor.is_active:
        raise InvalidTransitionError(contract.id, action.value, contract.status.value,
                                     f"user {actor.id} is inactive")
    if action not in available_actions(actor, contract):
        key = approval_key_for(actor.role)
        if contract.status.is_terminal() and action != Action.COMMENT:
            reason = "contract is closed"
        elif action == Action.APPROVE and key is not None and contract.has_approval(key):
            reason = f"approval '{key.value}' already recorded"
        else:
            reason = f"{actor.role.value} may not {action.value} a contract in status '{contract.status.value}'"
        raise InvalidTransitionError(contract.id, action.value, contract.status.value, reason)


def plan_transition(contract: Contract, actor: User, action: Action) -> TransitionPlan:
    """Validate a submit or review decision and work out its effect.

    Args:
        contract: Current state of the contract
        actor: User taking the action
        action: SUBMIT, APPROVE, REJECT or REQUEST_CHANGES

    Returns:
        TransitionPlan describing the resulting status and bookkeeping

    Raises:
        InvalidTransitionError: Wrong role, inactive actor, or wrong/terminal status
        ContractValidationError: Submission with mandatory fields missing
    """
    if action == Action.SUBMIT:
        authorize(contract, actor, action)
        missing = missing_mandatory_fields(contract)
        if missing:
            raise ContractValidationError(
                f"Contract {contract.id} is incomplete ({len(missing)} field(s))",
                details=missing,
            )
        if contract.status != ContractStatus.CHANGES_REQUESTED:
            return TransitionPlan(
                action=action,
                from_status=contract.status,
                to_status=ContractStatus.SUBMITTED,
                audit_label="Submitted Contract",
            )
        # Kept approvals can already cover the required set
        carried = resubmission_approvals(contract.corporate_approvals)
        return TransitionPlan(
            action=action,
            from_status=contract.status,
            to_status=routed_status(contract.model_copy(update={"corporate_approvals": carried})),
            audit_label="Resubmitted Contract",
        )

    if action not in DECISION_ACTIONS:
        raise InvalidTransitionError(contract.id, action.value, contract.status.value,
                                     "not a status transition")

    authorize(contract, actor, action)
    decision = DECISION_ACTIONS[action]

    if not is_binding_decision(actor, contract.status, action):
        return TransitionPlan(
            action=action,
            from_status=contract.status,
            to_status=contract.status,
            audit_label="Ad-Hoc Review",
            decision=decision,
            binding=False,
        )

    if action == Action.APPROVE:
        key = approval_key_for(actor.role)
        to_status = status_after_approval(contract, key)
        return TransitionPlan(
            action=action,
            from_status=contract.status,
            to_status=to_status,
            audit_label=decision.value,
            decision=decision,
            approval_key=key,
        )

    to_status = (
        ContractStatus.REJECTED if action == Action.REJECT
        else ContractStatus.CHANGES_REQUESTED
    )
    return TransitionPlan(
        action=action,
        from_status=contract.status,
        to_status=to_status,
        audit_label=decision.value,
        decision=decision,
    )
