"""Capability table for contract actions.

`allowed_actions` is the single place that says which role may do what in
which status. Presentation consults it to decide which controls to show;
the engine consults it before executing anything.
"""

from typing import Dict, FrozenSet, Optional

from contracts import Action, ApprovalKey, Contract, ContractStatus, User, UserRole


DECISIONS = frozenset({Action.APPROVE, Action.REJECT, Action.REQUEST_CHANGES})

CORPORATE_APPROVERS: Dict[UserRole, ApprovalKey] = {
    UserRole.CORPORATE_CFO: ApprovalKey.CFO,
    UserRole.CORPORATE_LEGAL: ApprovalKey.LEGAL,
    UserRole.CORPORATE_FUNCTION: ApprovalKey.FUNCTION_HEAD,
}

APPROVAL_KEYS: Dict[UserRole, ApprovalKey] = {
    **CORPORATE_APPROVERS,
    UserRole.CEO: ApprovalKey.CEO,
}


def approval_key_for(role: UserRole) -> Optional[ApprovalKey]:
    """The corporate approval slot a role fills, if any."""
    return APPROVAL_KEYS.get(role)


def allowed_actions(role: UserRole, status: ContractStatus) -> FrozenSet[Action]:
    """Actions a role may take on a contract in the given status.

    Commenting is always allowed, including on closed contracts.
    """
    actions = {Action.COMMENT}
    open_ = not status.is_terminal()

    if role == UserRole.SCM:
        if status.is_editable():
            actions |= {Action.EDIT, Action.SUBMIT, Action.SET_RISK_FLAG}
        if open_:
            actions |= {Action.ADD_AD_HOC_REVIEWER, Action.ATTACH_DOCUMENT}

    elif role in CORPORATE_APPROVERS:
        if status == ContractStatus.SUBMITTED:
            actions |= DECISIONS
        if open_:
            actions |= {Action.ADD_AD_HOC_REVIEWER, Action.SET_RISK_FLAG, Action.ATTACH_DOCUMENT}

    elif role == UserRole.CEO:
        if status == ContractStatus.PENDING_CEO:
            actions |= DECISIONS
        if open_:
            actions |= {Action.ADD_AD_HOC_REVIEWER, Action.SET_RISK_FLAG}

    elif role == UserRole.ADMIN:
        if open_:
            actions.add(Action.ADD_AD_HOC_REVIEWER)

    return frozenset(actions)


def available_actions(user: User, contract: Contract) -> FrozenSet[Action]:
    """Actions this user may take on this contract right now.

    Narrows `allowed_actions` with per-contract facts: inactive users get
    nothing, a granted approval cannot be given twice, and ad-hoc reviewers
    may record advisory decisions while the contract is under review.
    """
    if not user.is_active:
        return frozenset()

    actions = set(allowed_actions(user.role, contract.status))

    key = approval_key_for(user.role)
    if Action.APPROVE in actions and key is not None and contract.has_approval(key):
        actions.discard(Action.APPROVE)

    if contract.is_ad_hoc_reviewer(user.id) and contract.status.is_under_review():
        if not actions & DECISIONS:
            actions |= DECISIONS

    return frozenset(actions)


def is_binding_decision(user: User, status: ContractStatus, action: Action) -> bool:
    """True when the user's role decides this action, False for advisory ad-hoc reviews."""
    return action in allowed_actions(user.role, status)
