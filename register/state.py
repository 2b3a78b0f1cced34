"""Interactive register state with the dashboard's page-reset rules."""

from typing import Optional, Union

from contracts import (
    ContractStatus,
    Entity,
    KpiCard,
    RegisterQuery,
    RegisterView,
    SortOrder,
    StatusFilter,
)
from config import settings


class RegisterViewState:
    """Mutable filter/sort/page selection for the contract register.

    Changing any filter or the page size sends the user back to page 1;
    flipping the sort order keeps the current page.
    """

    def __init__(self, page_size: Optional[int] = None):
        self.entity: Optional[Entity] = None
        self.status: Union[StatusFilter, ContractStatus] = StatusFilter.ALL
        self.high_risk_only: bool = False
        self.search: str = ""
        self.sort_order: SortOrder = SortOrder.DESC
        self.page: int = 1
        self.page_size: int = settings.clamp_page_size(page_size or settings.default_page_size)
        self.total_pages: int = 0

    # --- filters ---

    def set_entity(self, entity: Optional[Entity]) -> None:
        """Select an entity; selecting the active one again clears the filter."""
        self.entity = None if entity == self.entity else entity
        self.page = 1

    def set_status(self, status: Union[StatusFilter, ContractStatus]) -> None:
        self.status = status
        self.page = 1

    def set_high_risk_only(self, enabled: bool) -> None:
        self.high_risk_only = enabled
        self.page = 1

    def set_search(self, text: str) -> None:
        self.search = text
        self.page = 1

    def set_page_size(self, page_size: int) -> None:
        self.page_size = settings.clamp_page_size(page_size)
        self.page = 1

    def toggle_sort(self) -> SortOrder:
        self.sort_order = self.sort_order.toggled()
        return self.sort_order

    def select_kpi(self, card: KpiCard) -> None:
        """Apply the filters behind a KPI card."""
        if card == KpiCard.UNDER_REVIEW:
            self.status = StatusFilter.UNDER_REVIEW
            self.high_risk_only = False
        elif card == KpiCard.HIGH_RISK:
            self.status = StatusFilter.ALL
            self.high_risk_only = True
        else:
            self.status = StatusFilter.ALL
            self.high_risk_only = False
        self.page = 1

    def select_status_slice(self, status: ContractStatus) -> None:
        """Drill into one slice of the status chart."""
        self.status = status
        self.high_risk_only = False
        self.page = 1

    # --- paging ---

    def go_to(self, page: int) -> int:
        self.page = max(1, min(page, max(self.total_pages, 1)))
        return self.page

    def next_page(self) -> int:
        return self.go_to(self.page + 1)

    def prev_page(self) -> int:
        return self.go_to(self.page - 1)

    # --- derivation ---

    def query(self) -> RegisterQuery:
        return RegisterQuery(
            entity=self.entity,
            status=self.status,
            high_risk_only=self.high_risk_only,
            search=self.search,
            sort_order=self.sort_order,
            page=self.page,
            page_size=self.page_size,
        )

    def observe(self, view: RegisterView) -> None:
        """Record the paging facts of the last derived view."""
        self.total_pages = view.total_pages
        self.page = view.page
