"""Tests for the interactive register state."""

import pytest

from contracts import ContractStatus, Entity, KpiCard, SortOrder, StatusFilter
from config import settings
from register import RegisterViewState, derive_view
from seed import seed_contracts

from conftest import NOW


def _on_page_three() -> RegisterViewState:
    state = RegisterViewState(page_size=5)
    state.total_pages = 5
    state.go_to(3)
    return state


class TestDefaults:
    """Test initial state."""

    def test_initial_values(self):
        state = RegisterViewState()
        assert state.entity is None
        assert state.status == StatusFilter.ALL
        assert state.high_risk_only is False
        assert state.sort_order == SortOrder.DESC
        assert state.page == 1
        assert state.page_size == settings.default_page_size

    def test_page_size_clamped(self):
        assert RegisterViewState(page_size=100_000).page_size == settings.max_page_size


class TestPageResets:
    """Test that filter changes send the user back to page 1."""

    @pytest.mark.parametrize("change", [
        lambda s: s.set_entity(Entity.CONGO),
        lambda s: s.set_status(StatusFilter.UNDER_REVIEW),
        lambda s: s.set_high_risk_only(True),
        lambda s: s.set_search("crane"),
        lambda s: s.set_page_size(50),
        lambda s: s.select_kpi(KpiCard.HIGH_RISK),
        lambda s: s.select_status_slice(ContractStatus.APPROVED),
    ])
    def test_filter_change_resets_page(self, change):
        state = _on_page_three()
        change(state)
        assert state.page == 1

    def test_sort_toggle_keeps_page(self):
        state = _on_page_three()
        assert state.toggle_sort() == SortOrder.ASC
        assert state.page == 3


class TestSelections:
    """Test entity toggling and dashboard drill-downs."""

    def test_selecting_same_entity_clears_filter(self):
        state = RegisterViewState()
        state.set_entity(Entity.BRAZIL)
        assert state.entity == Entity.BRAZIL
        state.set_entity(Entity.BRAZIL)
        assert state.entity is None

    def test_selecting_other_entity_switches(self):
        state = RegisterViewState()
        state.set_entity(Entity.BRAZIL)
        state.set_entity(Entity.LONDON)
        assert state.entity == Entity.LONDON

    def test_under_review_kpi(self):
        state = RegisterViewState()
        state.set_high_risk_only(True)
        state.select_kpi(KpiCard.UNDER_REVIEW)
        assert state.status == StatusFilter.UNDER_REVIEW
        assert state.high_risk_only is False

    def test_high_risk_kpi(self):
        state = RegisterViewState()
        state.set_status(ContractStatus.DRAFT)
        state.select_kpi(KpiCard.HIGH_RISK)
        assert state.status == StatusFilter.ALL
        assert state.high_risk_only is True

    @pytest.mark.parametrize("card", [KpiCard.TOTAL_VALUE, KpiCard.AVG_REVIEW_TIME])
    def test_other_kpis_reset(self, card):
        state = RegisterViewState()
        state.select_kpi(KpiCard.HIGH_RISK)
        state.select_kpi(card)
        assert state.status == StatusFilter.ALL
        assert state.high_risk_only is False

    def test_status_slice_clears_high_risk(self):
        state = RegisterViewState()
        state.set_high_risk_only(True)
        state.select_status_slice(ContractStatus.REJECTED)
        assert state.status == ContractStatus.REJECTED
        assert state.high_risk_only is False


class TestPaging:
    """Test next/previous navigation."""

    def test_prev_clamped_at_first(self):
        state = RegisterViewState()
        state.total_pages = 3
        assert state.prev_page() == 1

    def test_next_clamped_at_last(self):
        state = RegisterViewState()
        state.total_pages = 2
        state.next_page()
        assert state.next_page() == 2

    def test_observe_view(self):
        contracts = seed_contracts(NOW)
        state = RegisterViewState(page_size=10)
        state.page = 9
        view = derive_view(contracts, state.query())
        state.observe(view)
        assert state.total_pages == 3
        assert state.page == 3
        assert state.next_page() == 3

    def test_query_reflects_state(self):
        state = RegisterViewState()
        state.set_entity(Entity.CONGO)
        state.set_search("diesel")
        query = state.query()
        assert query.entity == Entity.CONGO
        assert query.search == "diesel"
        assert query.page == 1
