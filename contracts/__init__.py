"""Pydantic contracts for Contract Guard.

All data handed between the evaluator, workflow engine, register and
assistant is typed through these models.
"""

from .organisation_contracts import (
    Entity,
    UserRole,
    User,
)

from .risk_contracts import (
    RiskCategory,
    ContractType,
    RiskTrigger,
    RiskEvaluation,
)

from .workflow_contracts import (
    ContractStatus,
    ReviewDecision,
    ApprovalKey,
    Action,
    DECISION_ACTIONS,
    Review,
    Comment,
    AuditEntry,
    AdHocReviewer,
    ContractDocument,
    utc_now,
)

from .contract import (
    ContractDraft,
    Contract,
)

from .register_contracts import (
    StatusFilter,
    SortOrder,
    KpiCard,
    RegisterQuery,
    StatusCount,
    EntitySpend,
    DashboardMetrics,
    RegisterView,
)

__all__ = [
    # Organisation
    "Entity",
    "UserRole",
    "User",
    # Risk
    "RiskCategory",
    "ContractType",
    "RiskTrigger",
    "RiskEvaluation",
    # Workflow
    "ContractStatus",
    "ReviewDecision",
    "ApprovalKey",
    "Action",
    "DECISION_ACTIONS",
    "Review",
    "Comment",
    "AuditEntry",
    "AdHocReviewer",
    "ContractDocument",
    "utc_now",
    # Contract
    "ContractDraft",
    "Contract",
    # Register
    "StatusFilter",
    "SortOrder",
    "KpiCard",
    "RegisterQuery",
    "StatusCount",
    "EntitySpend",
    "DashboardMetrics",
    "RegisterView",
]
