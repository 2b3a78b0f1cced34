"""Contract register: derived views, metrics and interactive state."""

from .view import (
    average_review_days,
    compute_metrics,
    derive_view,
    filter_by_entity,
    filter_contracts,
    paginate,
    sort_contracts,
)
from .state import RegisterViewState

__all__ = [
    "average_review_days",
    "compute_metrics",
    "derive_view",
    "filter_by_entity",
    "filter_contracts",
    "paginate",
    "sort_contracts",
    "RegisterViewState",
]
