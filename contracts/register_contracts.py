"""Register contracts: query parameters, page results and dashboard metrics."""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Union
from enum import Enum

from .organisation_contracts import Entity
from .workflow_contracts import ContractStatus
from .contract import Contract


class StatusFilter(str, Enum):
    """Composite status filters on top of the concrete statuses."""
    ALL = "ALL"
    UNDER_REVIEW = "REVIEW"  # Submitted or Pending CEO


class SortOrder(str, Enum):
    """Sort direction on submission date."""
    ASC = "asc"
    DESC = "desc"

    def toggled(self) -> "SortOrder":
        return SortOrder.ASC if self == SortOrder.DESC else SortOrder.DESC


class KpiCard(str, Enum):
    """Dashboard KPI cards; selecting one adjusts the register filters."""
    UNDER_REVIEW = "under_review"
    TOTAL_VALUE = "total_value"
    HIGH_RISK = "high_risk"
    AVG_REVIEW_TIME = "avg_review_time"


class RegisterQuery(BaseModel):
    """Filter, sort and paging parameters for one register view."""
    entity: Optional[Entity] = Field(default=None, description="None means all entities")
    status: Union[StatusFilter, ContractStatus] = Field(default=StatusFilter.ALL)
    high_risk_only: bool = False
    search: str = ""
    sort_order: SortOrder = SortOrder.DESC
    page: int = Field(default=1, description="1-based; clamped on derivation")
    page_size: int = Field(default=25, description="Clamped on derivation")


class StatusCount(BaseModel):
    """One bucket of the status distribution."""
    status: ContractStatus
    count: int = Field(..., ge=0)


class EntitySpend(BaseModel):
    """Total contract value for one entity."""
    entity: Entity
    value: float = Field(..., ge=0)


class DashboardMetrics(BaseModel):
    """KPI figures over the entity-filtered base."""
    under_review: int = 0
    total_value: float = 0.0
    high_risk: int = 0
    avg_review_days: float = 0.0
    status_distribution: List[StatusCount] = Field(default_factory=list)
    spend_by_entity: List[EntitySpend] = Field(default_factory=list)

    def spend_map(self) -> Dict[Entity, float]:
        return {s.entity: s.value for s in self.spend_by_entity}


class RegisterView(BaseModel):
    """One derived page of the register plus metrics."""
    items: List[Contract] = Field(default_factory=list, description="Contracts on the current page")
    total_matches: int = 0
    page: int = 1
    page_size: int = 25
    total_pages: int = 0
    metrics: DashboardMetrics = Field(default_factory=DashboardMetrics)

    @property
    def first_row(self) -> int:
        """1-based index of the first row shown (0 when empty)."""
        return min((self.page - 1) * self.page_size + 1, self.total_matches)

    @property
    def last_row(self) -> int:
        return min(self.page * self.page_size, self.total_matches)
