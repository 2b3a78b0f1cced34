"""Workflow contracts: statuses, decisions, reviews, comments and audit entries."""

import uuid
from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum
from datetime import datetime, timezone

from .organisation_contracts import UserRole


def _short_id(prefix: str) -> str:
    return f"{prefix}{uuid.uuid4().hex[:8]}"


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class ContractStatus(str, Enum):
    """Approval status of a contract."""
    DRAFT = "Draft"
    SUBMITTED = "Submitted"
    PENDING_CEO = "Pending CEO"
    CHANGES_REQUESTED = "Changes Requested"
    APPROVED = "Approved"
    REJECTED = "Rejected"

    def is_terminal(self) -> bool:
        """Approved and Rejected contracts accept no further transitions."""
        return self in (ContractStatus.APPROVED, ContractStatus.REJECTED)

    def is_under_review(self) -> bool:
        """Submitted or waiting on the CEO."""
        return self in (ContractStatus.SUBMITTED, ContractStatus.PENDING_CEO)

    def is_editable(self) -> bool:
        """The submitter may edit and (re)submit from these states."""
        return self in (ContractStatus.DRAFT, ContractStatus.CHANGES_REQUESTED)


class ReviewDecision(str, Enum):
    """Decision recorded by a reviewer."""
    APPROVED = "Approved"
    REJECTED = "Rejected"
    CHANGES_REQUESTED = "Changes Requested"


class ApprovalKey(str, Enum):
    """Named corporate approval slots."""
    CFO = "cfo"
    LEGAL = "legal"
    FUNCTION_HEAD = "function_head"
    CEO = "ceo"


class Action(str, Enum):
    """Things a user can do to a contract."""
    EDIT = "edit"
    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"
    REQUEST_CHANGES = "request_changes"
    ADD_AD_HOC_REVIEWER = "add_ad_hoc_reviewer"
    SET_RISK_FLAG = "set_risk_flag"
    ATTACH_DOCUMENT = "attach_document"
    COMMENT = "comment"


DECISION_ACTIONS = {
    Action.APPROVE: ReviewDecision.APPROVED,
    Action.REJECT: ReviewDecision.REJECTED,
    Action.REQUEST_CHANGES: ReviewDecision.CHANGES_REQUESTED,
}


class Review(BaseModel):
    """One completed reviewer decision."""
    id: str = Field(default_factory=lambda: _short_id("r"))
    reviewer_id: str
    reviewer_name: str
    role: UserRole
    decision: ReviewDecision
    comment: Optional[str] = None
    timestamp: datetime = Field(default_factory=utc_now)
    is_ad_hoc: bool = Field(default=False, description="Advisory review by an ad-hoc reviewer")


class Comment(BaseModel):
    """Free-text remark on a contract."""
    id: str = Field(default_factory=lambda: _short_id("c"))
    user_id: str
    user_name: str
    role: UserRole
    text: str = Field(..., min_length=1)
    timestamp: datetime = Field(default_factory=utc_now)


class AuditEntry(BaseModel):
    """One line of a contract's append-only audit trail."""
    id: str = Field(default_factory=lambda: _short_id("a"))
    timestamp: datetime = Field(default_factory=utc_now)
    user_id: str
    user_name: str
    action: str = Field(..., description="Action label, e.g. 'Submitted Contract'")
    details: Optional[str] = None


class AdHocReviewer(BaseModel):
    """A user attached to one contract's review chain outside the standard roles."""
    user_id: str
    user_name: str
    role: UserRole
    added_by: str
    added_at: datetime = Field(default_factory=utc_now)


class ContractDocument(BaseModel):
    """Attachment metadata. Content is not managed here."""
    id: str = Field(default_factory=lambda: _short_id("d"))
    name: str = Field(..., min_length=1)
    type: str = Field(..., description="MIME type")
    size: int = Field(..., ge=0, description="Size in bytes")
    upload_date: datetime = Field(default_factory=utc_now)
