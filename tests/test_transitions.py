"""Tests for the pure transition rules."""

from datetime import date

import pytest

from contracts import (
    Action,
    ApprovalKey,
    Contract,
    ContractStatus,
    ContractType,
    Entity,
    ReviewDecision,
    User,
    UserRole,
)
from errors import ContractValidationError, InvalidTransitionError
from risk import evaluate
from workflow import (
    missing_mandatory_fields,
    pending_approvals,
    plan_transition,
    required_approvals,
    requires_ceo,
    resubmission_approvals,
    routed_status,
)


SCM = User(id="u1", name="Sarah SCM", role=UserRole.SCM, entity=Entity.BRAZIL)
CFO = User(id="u2", name="Charles CFO", role=UserRole.CORPORATE_CFO, entity=Entity.LONDON)
LEGAL = User(id="u3", name="Larry Legal", role=UserRole.CORPORATE_LEGAL, entity=Entity.LONDON)
FUNCTION = User(id="u4", name="Fiona Function", role=UserRole.CORPORATE_FUNCTION, entity=Entity.CONGO)
CEO = User(id="u5", name="Chief CEO", role=UserRole.CEO, entity=Entity.LONDON)


def _complete_contract(amount: float = 500_000, contract_type: ContractType = ContractType.OPEX,
                       **overrides) -> Contract:
    data = dict(
        id="CNT-2026-001",
        entity=Entity.BRAZIL,
        department="Operations",
        contractor_name="Acme Marine",
        contract_type=contract_type,
        amount=amount,
        start_date=date(2026, 1, 1),
        end_date=date(2027, 1, 1),
        scope_of_work="Vessel support.",
        background_need="Campaign support.",
        tender_process_summary="Three bidders.",
        technical_eval_summary="Qualified.",
        commercial_eval_summary="Lowest bid.",
        risk_description="Weather delays.",
        mitigation_measures="Schedule buffer.",
        submitter_id="u1",
        detected_triggers=evaluate(amount, contract_type).detected_triggers,
    )
    data.update(overrides)
    return Contract(**data)


class TestApprovalRouting:
    """Test required approvals and CEO escalation."""

    def test_standard_contract_needs_cfo_and_function_head(self):
        assert required_approvals(_complete_contract()) == {ApprovalKey.CFO, ApprovalKey.FUNCTION_HEAD}

    def test_high_risk_contract_needs_legal(self):
        contract = _complete_contract(amount=2_000_000)
        assert ApprovalKey.LEGAL in required_approvals(contract)

    def test_non_standard_terms_need_legal(self):
        contract = _complete_contract(is_standard_terms=False)
        assert ApprovalKey.LEGAL in required_approvals(contract)

    def test_ceo_for_high_risk_or_large(self):
        assert not requires_ceo(_complete_contract())
        assert requires_ceo(_complete_contract(amount=2_000_000))
        assert requires_ceo(_complete_contract(amount=5_500_000, contract_type=ContractType.OPEX))
        assert requires_ceo(_complete_contract(), threshold=100_000)

    def test_pending_approvals(self):
        contract = _complete_contract(corporate_approvals={ApprovalKey.CFO: True})
        assert pending_approvals(contract) == {ApprovalKey.FUNCTION_HEAD}


class TestMandatoryFields:
    """Test submission completeness checks."""

    def test_complete_contract_has_nothing_missing(self):
        assert missing_mandatory_fields(_complete_contract()) == {}

    def test_blank_text_fields_reported(self):
        missing = missing_mandatory_fields(_complete_contract(contractor_name="  ", scope_of_work=""))
        assert set(missing) == {"contractor_name", "scope_of_work"}

    def test_zero_amount_reported(self):
        assert "amount" in missing_mandatory_fields(_complete_contract(amount=0))

    def test_dates_reported(self):
        assert "start_date" in missing_mandatory_fields(_complete_contract(start_date=None))
        backwards = _complete_contract(start_date=date(2027, 1, 1), end_date=date(2026, 1, 1))
        assert missing_mandatory_fields(backwards) == {"end_date": "End date is before start date"}


class TestPlanSubmit:
    """Test planning submissions."""

    def test_submit_draft(self):
        plan = plan_transition(_complete_contract(), SCM, Action.SUBMIT)
        assert plan.to_status == ContractStatus.SUBMITTED
        assert plan.audit_label == "Submitted Contract"
        assert plan.changes_status

    def test_resubmit_label(self):
        contract = _complete_contract(status=ContractStatus.CHANGES_REQUESTED)
        plan = plan_transition(contract, SCM, Action.SUBMIT)
        assert plan.audit_label == "Resubmitted Contract"

    def test_incomplete_submission_lists_fields(self):
        with pytest.raises(ContractValidationError) as exc_info:
            plan_transition(_complete_contract(department=""), SCM, Action.SUBMIT)
        assert "department" in exc_info.value.details
        assert not isinstance(exc_info.value, InvalidTransitionError)

    def test_only_scm_submits(self):
        with pytest.raises(InvalidTransitionError):
            plan_transition(_complete_contract(), CFO, Action.SUBMIT)

    def test_cannot_submit_twice(self):
        contract = _complete_contract(status=ContractStatus.SUBMITTED)
        with pytest.raises(InvalidTransitionError):
            plan_transition(contract, SCM, Action.SUBMIT)


class TestPlanDecisions:
    """Test planning reviewer decisions."""

    def test_partial_approval_stays_submitted(self):
        contract = _complete_contract(status=ContractStatus.SUBMITTED)
        plan = plan_transition(contract, CFO, Action.APPROVE)
        assert plan.to_status == ContractStatus.SUBMITTED
        assert plan.approval_key == ApprovalKey.CFO
        assert plan.decision == ReviewDecision.APPROVED
        assert not plan.changes_status

    def test_completing_approval_goes_to_approved(self):
        contract = _complete_contract(status=ContractStatus.SUBMITTED,
                                      corporate_approvals={ApprovalKey.CFO: True})
        plan = plan_transition(contract, FUNCTION, Action.APPROVE)
        assert plan.to_status == ContractStatus.APPROVED

    def test_completing_approval_escalates_high_risk(self):
        contract = _complete_contract(amount=2_000_000, status=ContractStatus.SUBMITTED,
                                      corporate_approvals={ApprovalKey.CFO: True, ApprovalKey.LEGAL: True})
        plan = plan_transition(contract, FUNCTION, Action.APPROVE)
        assert plan.to_status == ContractStatus.PENDING_CEO

    def test_ceo_approval_closes(self):
        contract = _complete_contract(status=ContractStatus.PENDING_CEO)
        plan = plan_transition(contract, CEO, Action.APPROVE)
        assert plan.to_status == ContractStatus.APPROVED
        assert plan.approval_key == ApprovalKey.CEO

    def test_reject_and_request_changes(self):
        contract = _complete_contract(status=ContractStatus.SUBMITTED)
        assert plan_transition(contract, LEGAL, Action.REJECT).to_status == ContractStatus.REJECTED
        plan = plan_transition(contract, LEGAL, Action.REQUEST_CHANGES)
        assert plan.to_status == ContractStatus.CHANGES_REQUESTED
        assert plan.audit_label == "Changes Requested"

    def test_repeat_approval_rejected(self):
        contract = _complete_contract(status=ContractStatus.SUBMITTED,
                                      corporate_approvals={ApprovalKey.CFO: True})
        with pytest.raises(InvalidTransitionError, match="already recorded"):
            plan_transition(contract, CFO, Action.APPROVE)

    def test_ceo_cannot_decide_in_submitted(self):
        contract = _complete_contract(status=ContractStatus.SUBMITTED)
        with pytest.raises(InvalidTransitionError):
            plan_transition(contract, CEO, Action.APPROVE)

    @pytest.mark.parametrize("status", [ContractStatus.APPROVED, ContractStatus.REJECTED])
    def test_closed_contracts_refuse_decisions(self, status):
        contract = _complete_contract(status=status)
        with pytest.raises(InvalidTransitionError, match="closed"):
            plan_transition(contract, CEO, Action.REJECT)

    def test_inactive_actor_refused(self):
        contract = _complete_contract(status=ContractStatus.SUBMITTED)
        inactive = CFO.model_copy(update={"is_active": False})
        with pytest.raises(InvalidTransitionError, match="inactive"):
            plan_transition(contract, inactive, Action.APPROVE)

    def test_non_transition_action_refused(self):
        contract = _complete_contract(status=ContractStatus.SUBMITTED)
        with pytest.raises(InvalidTransitionError, match="not a status transition"):
            plan_transition(contract, SCM, Action.COMMENT)


class TestResubmissionPolicy:
    """Test the approvals carried into a resubmission."""

    def test_approvals_preserved(self):
        approvals = {ApprovalKey.CFO: True}
        carried = resubmission_approvals(approvals)
        assert carried == {ApprovalKey.CFO: True}
        assert carried is not approvals

    def test_resubmission_with_partial_approvals_waits(self):
        contract = _complete_contract(status=ContractStatus.CHANGES_REQUESTED,
                                      corporate_approvals={ApprovalKey.CFO: True})
        assert plan_transition(contract, SCM, Action.SUBMIT).to_status == ContractStatus.SUBMITTED

    def test_resubmission_with_complete_set_goes_to_ceo(self):
        contract = _complete_contract(
            amount=12_000_000,
            contract_type=ContractType.CAPEX,
            status=ContractStatus.CHANGES_REQUESTED,
            corporate_approvals={ApprovalKey.CFO: True, ApprovalKey.LEGAL: True, ApprovalKey.FUNCTION_HEAD: True},
        )
        plan = plan_transition(contract, SCM, Action.SUBMIT)
        assert plan.to_status == ContractStatus.PENDING_CEO
        assert plan.audit_label == "Resubmitted Contract"

    def test_resubmission_with_complete_set_below_escalation_approves(self):
        contract = _complete_contract(
            status=ContractStatus.CHANGES_REQUESTED,
            corporate_approvals={ApprovalKey.CFO: True, ApprovalKey.FUNCTION_HEAD: True},
        )
        assert plan_transition(contract, SCM, Action.SUBMIT).to_status == ContractStatus.APPROVED


class TestRoutedStatus:
    """Test where an open contract belongs given approvals and risk."""

    def test_outstanding_approval_keeps_submitted(self):
        contract = _complete_contract(status=ContractStatus.SUBMITTED,
                                      corporate_approvals={ApprovalKey.FUNCTION_HEAD: True})
        assert routed_status(contract) == ContractStatus.SUBMITTED

    def test_high_risk_needs_legal_before_ceo(self):
        contract = _complete_contract(
            amount=2_000_000,
            status=ContractStatus.SUBMITTED,
            corporate_approvals={ApprovalKey.CFO: True, ApprovalKey.FUNCTION_HEAD: True},
        )
        assert contract.is_high_risk
        assert routed_status(contract) == ContractStatus.SUBMITTED

        contract.corporate_approvals[ApprovalKey.LEGAL] = True
        assert routed_status(contract) == ContractStatus.PENDING_CEO

    def test_low_risk_complete_set_approves(self):
        contract = _complete_contract(
            status=ContractStatus.PENDING_CEO,
            corporate_approvals={ApprovalKey.CFO: True, ApprovalKey.FUNCTION_HEAD: True},
        )
        assert routed_status(contract) == ContractStatus.APPROVED
