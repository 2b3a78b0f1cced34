"""Contract aggregate.

The central record moved through the approval workflow. Risk fields are
computed by the evaluator; workflow fields are only changed by the engine.
"""

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from .organisation_contracts import Entity
from .risk_contracts import ContractType, RiskTrigger
from .workflow_contracts import (
    AdHocReviewer,
    ApprovalKey,
    AuditEntry,
    Comment,
    ContractDocument,
    ContractStatus,
    Review,
)


class ContractDraft(BaseModel):
    """Fields a submitter fills in to open a new draft."""

    entity: Entity
    department: str = ""
    contractor_name: str = ""
    contract_type: Optional[ContractType] = Field(
        default=None,
        description="Derived from amount when omitted",
    )
    amount: float = Field(..., ge=0, allow_inf_nan=False)
    currency: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    has_extension_options: bool = False
    scope_of_work: str = ""
    background_need: str = ""
    tender_process_summary: str = ""
    special_considerations: str = ""
    technical_eval_summary: str = ""
    commercial_eval_summary: str = ""
    is_standard_terms: bool = True
    deviations_description: Optional[str] = None
    liability_cap_percent: float = Field(default=100.0, ge=0)
    is_subcontracting: bool = False
    subcontracting_percent: float = Field(default=0.0, ge=0, le=100)
    risk_description: str = ""
    mitigation_measures: str = ""
    price_structure: str = "Fixed"
    ddq_number: Optional[str] = None
    ddq_date: Optional[date] = None
    ddq_validity_date: Optional[date] = None
    other_checks_details: Optional[str] = None


class Contract(ContractDraft):
    """A contract in the register."""

    id: str = Field(..., min_length=1)
    contract_type: ContractType
    currency: str = "USD"

    # Risk
    manual_trigger_ids: List[str] = Field(
        default_factory=list,
        description="Checklist flags confirmed by a reviewer",
    )
    detected_triggers: List[RiskTrigger] = Field(default_factory=list)
    is_high_risk: bool = False

    # Workflow
    status: ContractStatus = ContractStatus.DRAFT
    submitter_id: str
    submission_date: Optional[datetime] = None
    corporate_approvals: Dict[ApprovalKey, bool] = Field(default_factory=dict)
    reviews: List[Review] = Field(default_factory=list)
    ad_hoc_reviewers: List[AdHocReviewer] = Field(default_factory=list)
    comments: List[Comment] = Field(default_factory=list)
    has_unread_comments: bool = False
    audit_trail: List[AuditEntry] = Field(default_factory=list)

    documents: List[ContractDocument] = Field(default_factory=list)
    ai_risk_analysis: Optional[str] = None

    @model_validator(mode='after')
    def sync_high_risk_flag(self) -> 'Contract':
        """Keep is_high_risk equal to 'any trigger detected'."""
        expected = len(self.detected_triggers) > 0
        if self.is_high_risk != expected:
            object.__setattr__(self, 'is_high_risk', expected)
        return self

    def is_ad_hoc_reviewer(self, user_id: str) -> bool:
        return any(r.user_id == user_id for r in self.ad_hoc_reviewers)

    def has_approval(self, key: ApprovalKey) -> bool:
        return bool(self.corporate_approvals.get(key, False))

    def latest_comment(self) -> Optional[Comment]:
        return self.comments[-1] if self.comments else None

    def term_years(self) -> Optional[float]:
        """Contract duration in years, or None when dates are missing."""
        if self.start_date is None or self.end_date is None:
            return None
        return (self.end_date - self.start_date).days / 365.25

    def decided_at(self) -> Optional[datetime]:
        """Timestamp of the decision that closed the contract, if it is closed."""
        if not self.status.is_terminal():
            return None
        binding = [r for r in self.reviews if not r.is_ad_hoc]
        return binding[-1].timestamp if binding else None
