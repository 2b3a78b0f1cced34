"""Tests for the demo fixtures and bootstrap."""

from contracts import ApprovalKey, ContractStatus, Entity, UserRole
from register import compute_metrics
from risk import evaluate_contract
from seed import USERS, bootstrap, seed_contracts, seed_users
from workflow import required_approvals, requires_ceo

from conftest import NOW, StubProvider


class TestUsers:
    """Test the seeded users."""

    def test_nine_users(self):
        assert [u.id for u in USERS] == [f"u{i}" for i in range(1, 10)]

    def test_roles(self):
        by_id = {u.id: u for u in seed_users()}
        assert by_id["u1"].role == UserRole.SCM
        assert by_id["u5"].role == UserRole.CEO
        assert by_id["u9"].role == UserRole.CORPORATE_FUNCTION
        assert all(u.is_active for u in by_id.values())

    def test_seed_users_are_copies(self):
        users = seed_users()
        users[0].is_active = False
        assert USERS[0].is_active


class TestContracts:
    """Test the seeded register."""

    def test_twenty_two_unique_contracts(self):
        contracts = seed_contracts(NOW)
        ids = [c.id for c in contracts]
        assert len(ids) == 22
        assert len(set(ids)) == 22
        assert ids[0] == "CNT-2023-001"
        assert ids[-1] == "CNT-2023-022"

    def test_deterministic(self):
        first = [c.model_dump(exclude={"reviews", "audit_trail"}) for c in seed_contracts(NOW)]
        second = [c.model_dump(exclude={"reviews", "audit_trail"}) for c in seed_contracts(NOW)]
        assert first == second

    def test_risk_matches_evaluator(self):
        for contract in seed_contracts(NOW):
            evaluation = evaluate_contract(contract)
            assert contract.is_high_risk == evaluation.is_high_risk
            assert [t.id for t in contract.detected_triggers] == evaluation.trigger_ids

    def test_drafts_have_no_submission(self):
        for contract in seed_contracts(NOW):
            if contract.status == ContractStatus.DRAFT:
                assert contract.submission_date is None
                assert contract.audit_trail == []
            else:
                assert contract.submission_date is not None
                assert contract.audit_trail[0].action == "Submitted Contract"

    def test_audit_trails_ordered(self):
        for contract in seed_contracts(NOW):
            stamps = [e.timestamp for e in contract.audit_trail]
            assert stamps == sorted(stamps)
            assert all(s <= NOW for s in stamps)

    def test_approvals_consistent_with_status(self):
        for contract in seed_contracts(NOW):
            granted = {k for k, v in contract.corporate_approvals.items() if v}
            if contract.status == ContractStatus.PENDING_CEO:
                assert required_approvals(contract) <= granted
            if contract.status == ContractStatus.APPROVED:
                assert required_approvals(contract) <= granted
                assert (ApprovalKey.CEO in granted) == requires_ceo(contract)

    def test_flagship_contract(self):
        contract = seed_contracts(NOW)[0]
        assert contract.contractor_name == "DeepSea Solutions"
        assert contract.status == ContractStatus.PENDING_CEO
        assert contract.has_unread_comments
        assert [d.name for d in contract.documents] == ["Scope_Of_Work_vFinal.pdf"]
        assert [t.description for t in contract.detected_triggers] == ["CAPEX > USD 5M"]

    def test_every_entity_represented(self):
        spend = compute_metrics(seed_contracts(NOW)).spend_map()
        assert all(spend[e] > 0 for e in Entity)


class TestBootstrap:
    """Test workspace wiring."""

    def test_workspace_contents(self):
        workspace = bootstrap(now=NOW, provider=StubProvider())
        assert len(workspace.repository) == 22
        assert len(workspace.users.get_all()) == 9
        assert workspace.engine.repository is workspace.repository
        assert workspace.assistant.provider.name == "stub"

    def test_workspaces_are_independent(self):
        first = bootstrap(now=NOW, provider=StubProvider())
        second = bootstrap(now=NOW, provider=StubProvider())
        first.engine.approve("CNT-2023-002", "u2")
        assert not second.repository.get_by_id("CNT-2023-002").corporate_approvals
