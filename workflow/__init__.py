"""Approval workflow: capability table, transition rules and the engine."""

from .permissions import (
    allowed_actions,
    approval_key_for,
    available_actions,
    is_binding_decision,
)
from .transitions import (
    TransitionPlan,
    missing_mandatory_fields,
    pending_approvals,
    plan_transition,
    required_approvals,
    requires_ceo,
    resubmission_approvals,
    routed_status,
)
from .engine import WorkflowEngine

__all__ = [
    "allowed_actions",
    "approval_key_for",
    "available_actions",
    "is_binding_decision",
    "TransitionPlan",
    "missing_mandatory_fields",
    "pending_approvals",
    "plan_transition",
    "required_approvals",
    "requires_ceo",
    "resubmission_approvals",
    "routed_status",
    "WorkflowEngine",
]
