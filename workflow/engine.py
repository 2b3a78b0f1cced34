"""Workflow engine - applies contract actions against the repository.

Every mutating method follows the same shape:
1. Load the contract and the acting user (NotFoundError if absent)
2. Validate permissions and state (nothing is touched yet)
3. Apply the change to a private copy and append one audit entry
4. Store the copy with a single upsert
"""

import re
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from loguru import logger
from pydantic import ValidationError

from contracts import (
    Action,
    AdHocReviewer,
    AuditEntry,
    Comment,
    Contract,
    ContractDocument,
    ContractDraft,
    ContractStatus,
    Review,
    User,
    utc_now,
)
from config import settings
from errors import ContractValidationError
from repository import ContractRepository, UserDirectory
from risk import classify_contract_type, evaluate, get_trigger, is_checklist_trigger
from workflow.transitions import (
    TransitionPlan,
    authorize,
    plan_transition,
    resubmission_approvals,
    routed_status,
)


_ID_PATTERN = re.compile(r"^CNT-\d{4}-(\d+)$")

# Draft fields whose change requires re-running the risk evaluator
_RISK_INPUT_FIELDS = {"amount", "contract_type"}


class WorkflowEngine:
    """Approval workflow over a contract repository.

    The engine owns every state change to a contract. Presentation code
    reads contracts from the repository and calls the methods here for
    anything that mutates.
    """

    def __init__(
        self,
        repository: ContractRepository,
        users: UserDirectory,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize the engine.

        Args:
            repository: Contract store
            users: Directory used to resolve actor ids
            clock: Returns the current aware datetime (defaults to UTC now)
        """
        self.repository = repository
        self.users = users
        self._clock = clock or utc_now

    # --- helpers ---

    def _load(self, contract_id: str, actor_id: str) -> Tuple[Contract, User]:
        return self.repository.get_by_id(contract_id), self.users.get_by_id(actor_id)

    def _timestamp(self, contract: Contract) -> datetime:
        """Current time, never earlier than the last audit entry."""
        now = self._clock()
        if contract.audit_trail and contract.audit_trail[-1].timestamp > now:
            return contract.audit_trail[-1].timestamp
        return now

    def _audit(self, contract: Contract, actor: User, action: str, when: datetime,
               details: Optional[str] = None) -> AuditEntry:
        entry = AuditEntry(
            timestamp=when,
            user_id=actor.id,
            user_name=actor.name,
            action=action,
            details=details,
        )
        contract.audit_trail.append(entry)
        return entry

    def next_contract_id(self) -> str:
        """Next sequential id, e.g. CNT-2026-023."""
        highest = 0
        for contract in self.repository.get_all():
            match = _ID_PATTERN.match(contract.id)
            if match:
                highest = max(highest, int(match.group(1)))
        candidate = f"CNT-{self._clock().year}-{highest + 1:03d}"
        while self.repository.exists(candidate):
            highest += 1
            candidate = f"CNT-{self._clock().year}-{highest + 1:03d}"
        return candidate

    # --- drafting ---

    def create_draft(self, actor_id: str, draft: ContractDraft) -> Contract:
        """Open a new Draft contract for an SCM user.

        The contract type is derived from the amount when not given, and the
        risk evaluator runs before the contract is stored.
        """
        actor = self.users.get_by_id(actor_id)
        probe = Contract(
            id="CNT-NEW",
            contract_type=draft.contract_type or classify_contract_type(draft.amount),
            submitter_id=actor.id,
            **draft.model_dump(exclude={"contract_type", "currency"}),
        )
        authorize(probe, actor, Action.EDIT)

        evaluation = evaluate(probe.amount, probe.contract_type)
        contract = probe.model_copy(update={
            "id": self.next_contract_id(),
            "currency": draft.currency or settings.default_currency,
            "detected_triggers": evaluation.detected_triggers,
            "is_high_risk": evaluation.is_high_risk,
        })
        self.repository.upsert(contract)
        logger.info(f"{actor.name} opened draft {contract.id} ({contract.contractor_name or 'unnamed'})")
        return contract

    def update_draft(self, contract_id: str, actor_id: str, changes: Dict[str, Any]) -> Contract:
        """Edit draft fields; re-evaluates risk when amount or type change.

        Raises:
            ContractValidationError: Unknown field or invalid value
            InvalidTransitionError: Not an SCM user, or the contract is not editable
        """
        contract, actor = self._load(contract_id, actor_id)
        authorize(contract, actor, Action.EDIT)

        unknown = sorted(set(changes) - set(ContractDraft.model_fields))
        if unknown:
            raise ContractValidationError(
                f"Unknown contract field(s): {', '.join(unknown)}",
                details={name: "not an editable field" for name in unknown},
            )
        if not changes:
            raise ContractValidationError("No changes supplied")

        current = contract.model_dump(include=set(ContractDraft.model_fields))
        try:
            merged = ContractDraft.model_validate({**current, **changes})
        except ValidationError as e:
            raise ContractValidationError(
                f"Invalid changes for contract {contract_id}",
                details={".".join(str(p) for p in err["loc"]): err["msg"] for err in e.errors()},
            ) from e

        updates = merged.model_dump(include=set(changes))
        if "amount" in changes and "contract_type" not in changes:
            updates["contract_type"] = classify_contract_type(merged.amount)
        working = contract.model_copy(deep=True, update=updates)

        if _RISK_INPUT_FIELDS & set(updates):
            evaluation = evaluate(working.amount, working.contract_type, working.manual_trigger_ids)
            working.detected_triggers = evaluation.detected_triggers
            working.is_high_risk = evaluation.is_high_risk

        self._audit(working, actor, "Edited Contract", self._timestamp(working),
                    details=f"Updated: {', '.join(sorted(changes))}")
        self.repository.upsert(working)
        logger.info(f"{actor.name} edited {contract_id}: {sorted(changes)}")
        return working

    # --- status transitions ---

    def submit(self, contract_id: str, actor_id: str) -> Contract:
        """Draft or Changes Requested -> Submitted."""
        return self.apply(contract_id, actor_id, Action.SUBMIT)

    def approve(self, contract_id: str, actor_id: str, comment: Optional[str] = None) -> Contract:
        return self.apply(contract_id, actor_id, Action.APPROVE, comment)

    def reject(self, contract_id: str, actor_id: str, comment: Optional[str] = None) -> Contract:
        return self.apply(contract_id, actor_id, Action.REJECT, comment)

    def request_changes(self, contract_id: str, actor_id: str, comment: Optional[str] = None) -> Contract:
        return self.apply(contract_id, actor_id, Action.REQUEST_CHANGES, comment)

    def apply(
        self,
        contract_id: str,
        actor_id: str,
        action: Action,
        comment: Optional[str] = None,
    ) -> Contract:
        """Execute a submit or review decision.

        Args:
            contract_id: Contract to act on
            actor_id: User taking the action
            action: SUBMIT, APPROVE, REJECT or REQUEST_CHANGES
            comment: Optional reviewer comment (ignored for SUBMIT)

        Returns:
            The updated contract

        Raises:
            NotFoundError: Unknown contract or user
            InvalidTransitionError: Action not allowed for this actor/status
            ContractValidationError: Submission with missing fields
        """
        contract, actor = self._load(contract_id, actor_id)
        plan = plan_transition(contract, actor, action)

        working = contract.model_copy(deep=True)
        when = self._timestamp(working)
        self._apply_plan(working, actor, plan, when, comment)

        self.repository.upsert(working)
        if plan.changes_status:
            logger.info(
                f"{actor.name} ({actor.role.value}) {plan.audit_label.lower()} {contract_id}: "
                f"{plan.from_status.value} -> {plan.to_status.value}"
            )
        else:
            logger.info(f"{actor.name} ({actor.role.value}) recorded {plan.audit_label} on {contract_id}")
        return working

    def _apply_plan(self, contract: Contract, actor: User, plan: TransitionPlan,
                    when: datetime, comment: Optional[str]) -> None:
        if plan.action == Action.SUBMIT:
            if contract.submission_date is None:
                contract.submission_date = when
            if plan.from_status == ContractStatus.CHANGES_REQUESTED:
                contract.corporate_approvals = resubmission_approvals(contract.corporate_approvals)
            contract.status = plan.to_status
            details = None
            if plan.to_status != ContractStatus.SUBMITTED:
                details = f"Status -> {plan.to_status.value}"
            self._audit(contract, actor, plan.audit_label, when, details=details)
            return

        contract.reviews.append(Review(
            reviewer_id=actor.id,
            reviewer_name=actor.name,
            role=actor.role,
            decision=plan.decision,
            comment=comment,
            timestamp=when,
            is_ad_hoc=not plan.binding,
        ))
        if plan.approval_key is not None:
            contract.corporate_approvals[plan.approval_key] = True
        contract.status = plan.to_status

        details = comment
        if not plan.binding:
            details = f"{plan.decision.value}: {comment}" if comment else plan.decision.value
        elif plan.action == Action.APPROVE and plan.changes_status:
            suffix = f"Status -> {plan.to_status.value}"
            details = f"{comment} ({suffix})" if comment else suffix
        self._audit(contract, actor, plan.audit_label, when, details=details)

    # --- other recorded actions ---

    def add_ad_hoc_reviewer(self, contract_id: str, actor_id: str, reviewer_id: str) -> Contract:
        """Attach a user to the contract's review chain."""
        contract, actor = self._load(contract_id, actor_id)
        authorize(contract, actor, Action.ADD_AD_HOC_REVIEWER)
        reviewer = self.users.get_by_id(reviewer_id)
        if not reviewer.is_active:
            raise ContractValidationError(f"User {reviewer_id} is inactive",
                                          details={"reviewer_id": "inactive user"})
        if contract.is_ad_hoc_reviewer(reviewer_id):
            raise ContractValidationError(f"{reviewer.name} is already reviewing {contract_id}",
                                          details={"reviewer_id": "already attached"})

        working = contract.model_copy(deep=True)
        when = self._timestamp(working)
        working.ad_hoc_reviewers.append(AdHocReviewer(
            user_id=reviewer.id,
            user_name=reviewer.name,
            role=reviewer.role,
            added_by=actor.id,
            added_at=when,
        ))
        self._audit(working, actor, "Added Ad-Hoc Reviewer", when,
                    details=f"{reviewer.name} ({reviewer.role.value})")
        self.repository.upsert(working)
        logger.info(f"{actor.name} added {reviewer.name} as ad-hoc reviewer on {contract_id}")
        return working

    def set_risk_flag(self, contract_id: str, actor_id: str, trigger_id: str, triggered: bool = True) -> Contract:
        """Confirm or clear a checklist risk flag, then re-evaluate."""
        contract, actor = self._load(contract_id, actor_id)
        authorize(contract, actor, Action.SET_RISK_FLAG)
        if not is_checklist_trigger(trigger_id):
            raise ContractValidationError(
                f"'{trigger_id}' is not a checklist risk flag",
                details={"trigger_id": "automatic or unknown trigger"},
            )
        if (trigger_id in contract.manual_trigger_ids) == triggered:
            raise ContractValidationError(
                f"Risk flag {trigger_id} is already {'set' if triggered else 'clear'} on {contract_id}",
            )

        working = contract.model_copy(deep=True)
        if triggered:
            working.manual_trigger_ids.append(trigger_id)
        else:
            working.manual_trigger_ids.remove(trigger_id)
        evaluation = evaluate(working.amount, working.contract_type, working.manual_trigger_ids)
        working.detected_triggers = evaluation.detected_triggers
        working.is_high_risk = evaluation.is_high_risk

        trigger = get_trigger(trigger_id)
        details = f"{trigger.description}: {'triggered' if triggered else 'cleared'}"
        # Legal and CEO routing follow risk, so an open review can move either way
        if working.status.is_under_review():
            routed = routed_status(working)
            if routed != working.status:
                details += f" (Status -> {routed.value})"
                logger.info(f"{contract_id}: {working.status.value} -> {routed.value} after risk flag change")
                working.status = routed

        self._audit(working, actor, "Updated Risk Flag", self._timestamp(working), details=details)
        self.repository.upsert(working)
        logger.info(f"{actor.name} {'set' if triggered else 'cleared'} {trigger_id} on {contract_id}")
        return working

    def attach_document(self, contract_id: str, actor_id: str, name: str, mime_type: str, size: int) -> Contract:
        """Record an attachment's metadata."""
        contract, actor = self._load(contract_id, actor_id)
        authorize(contract, actor, Action.ATTACH_DOCUMENT)
        try:
            document = ContractDocument(name=name, type=mime_type, size=size, upload_date=self._clock())
        except ValidationError as e:
            raise ContractValidationError(
                f"Invalid document for contract {contract_id}",
                details={".".join(str(p) for p in err["loc"]): err["msg"] for err in e.errors()},
            ) from e

        working = contract.model_copy(deep=True)
        working.documents.append(document)
        self._audit(working, actor, "Attached Document", self._timestamp(working), details=name)
        self.repository.upsert(working)
        return working

    # --- comments and annotations (not audited) ---

    def add_comment(self, contract_id: str, actor_id: str, text: str) -> Contract:
        """Append a comment. Allowed at any status, including closed contracts."""
        contract, actor = self._load(contract_id, actor_id)
        authorize(contract, actor, Action.COMMENT)
        if not text or not text.strip():
            raise ContractValidationError("Comment text is empty", details={"text": "required"})

        working = contract.model_copy(deep=True)
        working.comments.append(Comment(
            user_id=actor.id,
            user_name=actor.name,
            role=actor.role,
            text=text.strip(),
            timestamp=self._clock(),
        ))
        working.has_unread_comments = True
        self.repository.upsert(working)
        logger.debug(f"{actor.name} commented on {contract_id}")
        return working

    def mark_viewed(self, contract_id: str, viewer_id: str) -> Contract:
        """Clear the unread flag when someone other than the last commenter opens the contract."""
        contract, viewer = self._load(contract_id, viewer_id)
        latest = contract.latest_comment()
        if not contract.has_unread_comments or latest is None or latest.user_id == viewer.id:
            return contract
        working = contract.model_copy(update={"has_unread_comments": False})
        self.repository.upsert(working)
        return working

    def record_ai_analysis(self, contract_id: str, analysis: str) -> Contract:
        """Cache the assistant's risk analysis on the contract."""
        contract = self.repository.get_by_id(contract_id)
        working = contract.model_copy(update={"ai_risk_analysis": analysis})
        self.repository.upsert(working)
        return working

    def history(self, contract_id: str) -> List[AuditEntry]:
        return self.repository.get_by_id(contract_id).audit_trail
