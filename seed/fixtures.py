"""Demo users and contracts.

Fixtures are built relative to a reference time so that submission ages
and review durations look the same whenever the workspace is seeded.
"""

from datetime import date, datetime, timedelta
from typing import Dict, List, Tuple

from contracts import (
    ApprovalKey,
    AuditEntry,
    Comment,
    Contract,
    ContractDocument,
    ContractStatus,
    ContractType,
    Entity,
    Review,
    ReviewDecision,
    User,
    UserRole,
)
from risk import classify_contract_type, evaluate
from workflow.transitions import required_approvals, requires_ceo


SUBMITTER_ID = "u1"

USERS: List[User] = [
    User(id="u1", name="Sarah SCM", role=UserRole.SCM, entity=Entity.BRAZIL),
    User(id="u2", name="Charles CFO", role=UserRole.CORPORATE_CFO, entity=Entity.LONDON),
    User(id="u3", name="Larry Legal", role=UserRole.CORPORATE_LEGAL, entity=Entity.LONDON),
    User(id="u4", name="Fiona Function", role=UserRole.CORPORATE_FUNCTION, entity=Entity.CONGO),
    User(id="u5", name="Chief CEO", role=UserRole.CEO, entity=Entity.LONDON),
    User(id="u6", name="Adam Admin", role=UserRole.ADMIN, entity=Entity.LONDON),
    # Ad-hoc reviewers
    User(id="u7", name="Eric Engineering", role=UserRole.ENGINEERING, entity=Entity.BRAZIL),
    User(id="u8", name="Helen HSE", role=UserRole.HSE, entity=Entity.BRAZIL),
    User(id="u9", name="Ian IT", role=UserRole.CORPORATE_FUNCTION, entity=Entity.LONDON),
]

# Who signs each approval slot in the seeded history
_SIGNATORIES: Dict[ApprovalKey, str] = {
    ApprovalKey.CFO: "u2",
    ApprovalKey.LEGAL: "u3",
    ApprovalKey.FUNCTION_HEAD: "u4",
    ApprovalKey.CEO: "u5",
}
_SIGNING_ORDER = (ApprovalKey.CFO, ApprovalKey.LEGAL, ApprovalKey.FUNCTION_HEAD, ApprovalKey.CEO)

# id, entity, status, amount, title, submitted days ago, days under review
REGISTER: List[Tuple[str, Entity, ContractStatus, float, str, float, float]] = [
    # Brazil
    ("CNT-2023-003", Entity.BRAZIL, ContractStatus.APPROVED, 15_000_000, "FPSO Maintenance", 9.5, 6.0),
    ("CNT-2023-004", Entity.BRAZIL, ContractStatus.SUBMITTED, 8_000_000, "Support Vessel Charter", 2.25, 0),
    ("CNT-2023-005", Entity.BRAZIL, ContractStatus.REJECTED, 2_000_000, "Offshore Catering", 7.0, 3.0),
    ("CNT-2023-006", Entity.BRAZIL, ContractStatus.DRAFT, 500_000, "Waste Management", 0, 0),
    ("CNT-2023-007", Entity.BRAZIL, ContractStatus.PENDING_CEO, 45_000_000, "Subsea Tree Installation", 5.5, 2.5),
    # Congo
    ("CNT-2023-008", Entity.CONGO, ContractStatus.APPROVED, 1_200_000, "Road Maintenance", 11.0, 4.0),
    ("CNT-2023-009", Entity.CONGO, ContractStatus.PENDING_CEO, 3_000_000, "Site Security Services", 4.0, 1.5),
    ("CNT-2023-010", Entity.CONGO, ContractStatus.CHANGES_REQUESTED, 5_000_000, "Base Camp Construction", 6.0, 1.0),
    ("CNT-2023-011", Entity.CONGO, ContractStatus.SUBMITTED, 800_000, "Diesel Supply", 1.5, 0),
    ("CNT-2023-012", Entity.CONGO, ContractStatus.APPROVED, 600_000, "Medical Services", 8.0, 2.0),
    # Equatorial Guinea
    ("CNT-2023-013", Entity.EQUATORIAL_GUINEA, ContractStatus.PENDING_CEO, 12_000_000, "Gas Turbine Overhaul", 3.5, 2.0),
    ("CNT-2023-014", Entity.EQUATORIAL_GUINEA, ContractStatus.APPROVED, 1_500_000, "Scaffolding Services", 10.0, 5.0),
    ("CNT-2023-015", Entity.EQUATORIAL_GUINEA, ContractStatus.SUBMITTED, 900_000, "Paint & Blast", 0.75, 0),
    ("CNT-2023-016", Entity.EQUATORIAL_GUINEA, ContractStatus.DRAFT, 300_000, "Valve Supply", 0, 0),
    ("CNT-2023-017", Entity.EQUATORIAL_GUINEA, ContractStatus.REJECTED, 2_000_000, "Crane Rental", 6.5, 2.0),
    # London
    ("CNT-2023-018", Entity.LONDON, ContractStatus.PENDING_CEO, 5_000_000, "ERP License Renewal", 4.5, 3.0),
    ("CNT-2023-019", Entity.LONDON, ContractStatus.APPROVED, 1_000_000, "Global Audit Services", 5.0, 1.0),
    ("CNT-2023-020", Entity.LONDON, ContractStatus.SUBMITTED, 2_000_000, "Legal Counsel Retainer", 3.0, 0),
    ("CNT-2023-021", Entity.LONDON, ContractStatus.PENDING_CEO, 8_000_000, "New Office Lease", 2.75, 1.5),
    ("CNT-2023-022", Entity.LONDON, ContractStatus.CHANGES_REQUESTED, 1_500_000, "IT Infrastructure Support", 4.25, 2.0),
]


def _user(user_id: str) -> User:
    return next(u for u in USERS if u.id == user_id)


def _record_decision(contract: Contract, user_id: str, decision: ReviewDecision,
                     when: datetime, comment: str) -> None:
    reviewer = _user(user_id)
    contract.reviews.append(Review(
        reviewer_id=reviewer.id,
        reviewer_name=reviewer.name,
        role=reviewer.role,
        decision=decision,
        comment=comment,
        timestamp=when,
    ))
    contract.audit_trail.append(AuditEntry(
        timestamp=when,
        user_id=reviewer.id,
        user_name=reviewer.name,
        action=decision.value,
        details=comment,
    ))


def _replay_history(contract: Contract, submitted: datetime, review_days: float) -> None:
    """Fill approvals, reviews and audit entries consistent with the contract's status."""
    submitter = _user(SUBMITTER_ID)
    contract.audit_trail.append(AuditEntry(
        timestamp=submitted,
        user_id=submitter.id,
        user_name=submitter.name,
        action="Submitted Contract",
    ))

    status = contract.status
    if status == ContractStatus.SUBMITTED:
        return
    if status in (ContractStatus.REJECTED, ContractStatus.CHANGES_REQUESTED):
        decision = (ReviewDecision.REJECTED if status == ContractStatus.REJECTED
                    else ReviewDecision.CHANGES_REQUESTED)
        comment = ("Commercial terms not competitive." if status == ContractStatus.REJECTED
                   else "Please expand the tender summary.")
        _record_decision(contract, "u2", decision, submitted + timedelta(days=review_days), comment)
        return

    keys = [k for k in _SIGNING_ORDER if k in required_approvals(contract)]
    if status == ContractStatus.APPROVED and requires_ceo(contract):
        keys.append(ApprovalKey.CEO)
    step = timedelta(days=review_days) / len(keys)
    for i, key in enumerate(keys, start=1):
        contract.corporate_approvals[key] = True
        _record_decision(contract, _SIGNATORIES[key], ReviewDecision.APPROVED,
                         submitted + step * i, "Approved.")


def mock_contract(
    contract_id: str,
    entity: Entity,
    status: ContractStatus,
    amount: float,
    title: str,
    now: datetime,
    submitted_days_ago: float = 1.0,
    review_days: float = 1.0,
) -> Contract:
    """A register contract with standard narrative fields and a consistent history."""
    contract_type = classify_contract_type(amount)
    evaluation = evaluate(amount, contract_type)
    contract = Contract(
        id=contract_id,
        entity=entity,
        department="Operations",
        contractor_name=title,
        contract_type=contract_type,
        amount=amount,
        currency="USD",
        start_date=date(2024, 1, 1),
        end_date=date(2025, 1, 1),
        scope_of_work=f"Provision of {title.lower()} services.",
        background_need="Operational requirement.",
        tender_process_summary="Competitive tender.",
        special_considerations="None",
        technical_eval_summary="Technically qualified.",
        commercial_eval_summary="Commercially aligned.",
        risk_description="Standard operational risks.",
        mitigation_measures="Standard mitigation.",
        status=status,
        submitter_id=SUBMITTER_ID,
        detected_triggers=evaluation.detected_triggers,
        ddq_number="REEU3P-12345",
        ddq_date=date(2023, 6, 15),
        ddq_validity_date=date(2025, 6, 15),
        other_checks_details="Financial health check passed. QHSE audit score 92%.",
    )
    if status != ContractStatus.DRAFT:
        contract.submission_date = now - timedelta(days=submitted_days_ago)
        _replay_history(contract, contract.submission_date, review_days)
    return contract


def _drilling_support(now: datetime) -> Contract:
    submitted = now - timedelta(hours=48)
    cfo, legal, scm = _user("u2"), _user("u3"), _user("u1")
    evaluation = evaluate(12_000_000, ContractType.CAPEX)
    return Contract(
        id="CNT-2023-001",
        entity=Entity.BRAZIL,
        department="Drilling",
        contractor_name="DeepSea Solutions",
        contract_type=ContractType.CAPEX,
        amount=12_000_000,
        start_date=date(2023, 11, 1),
        end_date=date(2026, 11, 1),
        has_extension_options=True,
        scope_of_work="Provision of deepwater drilling rig support services.",
        background_need="Critical for Q4 campaign.",
        tender_process_summary="Competitive tender, 4 bidders.",
        special_considerations="None",
        technical_eval_summary="Scored 85/100",
        commercial_eval_summary="Lowest compliant bidder",
        risk_description="Operational delays due to weather.",
        mitigation_measures="Buffer built into schedule.",
        status=ContractStatus.PENDING_CEO,
        submitter_id=scm.id,
        submission_date=submitted,
        detected_triggers=evaluation.detected_triggers,
        corporate_approvals={
            ApprovalKey.CFO: True,
            ApprovalKey.LEGAL: True,
            ApprovalKey.FUNCTION_HEAD: True,
        },
        reviews=[
            Review(id="r1", reviewer_id=cfo.id, reviewer_name=cfo.name, role=cfo.role,
                   decision=ReviewDecision.APPROVED, comment="Budget approved.",
                   timestamp=now - timedelta(hours=24)),
            Review(id="r2", reviewer_id=legal.id, reviewer_name=legal.name, role=legal.role,
                   decision=ReviewDecision.APPROVED, comment="Legal terms standard.",
                   timestamp=now - timedelta(seconds=85_000)),
        ],
        audit_trail=[
            AuditEntry(id="a1", timestamp=submitted, user_id=scm.id, user_name=scm.name,
                       action="Submitted Contract"),
            AuditEntry(id="a2", timestamp=now - timedelta(hours=24), user_id=cfo.id,
                       user_name=cfo.name, action="Approved", details="Budget approved."),
            AuditEntry(id="a3", timestamp=now - timedelta(seconds=85_000), user_id=legal.id,
                       user_name=legal.name, action="Approved", details="Legal terms standard."),
        ],
        comments=[
            Comment(id="c1", user_id=cfo.id, user_name=cfo.name, role=cfo.role,
                    text="Please clarify the payment terms on page 12.",
                    timestamp=now - timedelta(seconds=100_000)),
            Comment(id="c2", user_id=scm.id, user_name=scm.name, role=scm.role,
                    text="Updated to standard 30 days net.",
                    timestamp=now - timedelta(seconds=90_000)),
        ],
        has_unread_comments=True,
        documents=[
            ContractDocument(id="d1", name="Scope_Of_Work_vFinal.pdf", type="application/pdf",
                             size=1_024_000, upload_date=submitted),
        ],
        ddq_number="REEU3P-98765",
        ddq_date=date(2023, 1, 10),
        ddq_validity_date=date(2025, 1, 10),
        other_checks_details="Standard technical qualification passed.",
    )


def _local_transport(now: datetime) -> Contract:
    submitted = now - timedelta(hours=1)
    scm = _user("u1")
    return Contract(
        id="CNT-2023-002",
        entity=Entity.CONGO,
        department="Logistics",
        contractor_name="Local Transport Co",
        contract_type=ContractType.OPEX,
        amount=800_000,
        start_date=date(2024, 1, 1),
        end_date=date(2024, 12, 31),
        scope_of_work="Logistics support.",
        background_need="Routine transport.",
        tender_process_summary="Sole source justification provided.",
        special_considerations="None",
        technical_eval_summary="Pass",
        commercial_eval_summary="Aligned with market rates",
        is_subcontracting=True,
        subcontracting_percent=10,
        risk_description="Low risk.",
        mitigation_measures="Standard insurance.",
        status=ContractStatus.SUBMITTED,
        submitter_id=scm.id,
        submission_date=submitted,
        audit_trail=[
            AuditEntry(id="a4", timestamp=submitted, user_id=scm.id, user_name=scm.name,
                       action="Submitted Contract"),
        ],
        ddq_number="REEU3P-55555",
        ddq_date=date(2023, 8, 20),
        ddq_validity_date=date(2025, 8, 20),
        other_checks_details="Local compliance verification complete.",
    )


def seed_users() -> List[User]:
    return [u.model_copy() for u in USERS]


def seed_contracts(now: datetime) -> List[Contract]:
    """The demo register: two detailed contracts plus five per entity."""
    contracts = [_drilling_support(now), _local_transport(now)]
    for contract_id, entity, status, amount, title, days_ago, review_days in REGISTER:
        contracts.append(mock_contract(
            contract_id, entity, status, amount, title, now,
            submitted_days_ago=days_ago, review_days=review_days,
        ))
    return contracts
