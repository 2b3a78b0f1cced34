"""Register derivation: filter, sort, paginate and compute dashboard metrics.

Every function here is pure. `derive_view` is called once per render with
the current collection and query; nothing is cached between calls.
"""

import math
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence, Tuple

from loguru import logger

from contracts import (
    Contract,
    ContractStatus,
    DashboardMetrics,
    Entity,
    EntitySpend,
    RegisterQuery,
    RegisterView,
    SortOrder,
    StatusCount,
    StatusFilter,
)
from config import settings


# Stand-in for contracts that were never submitted
_OLDEST = datetime.min.replace(tzinfo=timezone.utc)

_SECONDS_PER_DAY = 86_400


def _matches_status(contract: Contract, status) -> bool:
    if status == StatusFilter.ALL:
        return True
    if status == StatusFilter.UNDER_REVIEW:
        return contract.status.is_under_review()
    return contract.status == status


def _matches_search(contract: Contract, needle: str) -> bool:
    if not needle:
        return True
    haystacks = (contract.contractor_name, contract.id, contract.scope_of_work)
    return any(needle in (h or "").lower() for h in haystacks)


def filter_by_entity(contracts: Iterable[Contract], entity: Optional[Entity]) -> List[Contract]:
    """Contracts for one entity, or all of them when entity is None."""
    if entity is None:
        return list(contracts)
    return [c for c in contracts if c.entity == entity]


def filter_contracts(contracts: Iterable[Contract], query: RegisterQuery) -> List[Contract]:
    """Apply the entity, status, high-risk and search filters of a query."""
    needle = query.search.strip().lower()
    return [
        c for c in filter_by_entity(contracts, query.entity)
        if _matches_status(c, query.status)
        and (not query.high_risk_only or c.is_high_risk)
        and _matches_search(c, needle)
    ]


def _submission_key(contract: Contract) -> datetime:
    when = contract.submission_date
    if when is None:
        return _OLDEST
    if when.tzinfo is None:
        return when.replace(tzinfo=timezone.utc)
    return when


def sort_contracts(contracts: Sequence[Contract], order: SortOrder = SortOrder.DESC) -> List[Contract]:
    """Sort by submission timestamp, never-submitted contracts counting as oldest.

    Stable in both directions: contracts with equal timestamps keep their
    relative order.
    """
    return sorted(contracts, key=_submission_key, reverse=(order == SortOrder.DESC))


def paginate(items: Sequence[Contract], page: int, page_size: int) -> Tuple[List[Contract], int, int, int]:
    """Slice one page out of items.

    Returns:
        (page_items, page, page_size, total_pages) with page and page_size
        clamped to valid values
    """
    page_size = settings.clamp_page_size(page_size)
    total_pages = math.ceil(len(items) / page_size)
    page = max(1, min(int(page), max(total_pages, 1)))
    start = (page - 1) * page_size
    return list(items[start:start + page_size]), page, page_size, total_pages


def average_review_days(contracts: Iterable[Contract]) -> float:
    """Mean days from submission to final decision over decided contracts."""
    durations = []
    for contract in contracts:
        decided = contract.decided_at()
        if decided is None or contract.submission_date is None:
            continue
        elapsed = (decided - contract.submission_date).total_seconds()
        durations.append(max(elapsed, 0.0) / _SECONDS_PER_DAY)
    if not durations:
        return 0.0
    return round(sum(durations) / len(durations), 1)


def compute_metrics(contracts: Iterable[Contract]) -> DashboardMetrics:
    """KPI figures over an already entity-filtered base."""
    base = list(contracts)

    counts = {status: 0 for status in ContractStatus}
    spend = {entity: 0.0 for entity in Entity}
    for contract in base:
        counts[contract.status] += 1
        spend[contract.entity] += contract.amount

    return DashboardMetrics(
        under_review=sum(1 for c in base if c.status.is_under_review()),
        total_value=sum(c.amount for c in base),
        high_risk=sum(1 for c in base if c.is_high_risk),
        avg_review_days=average_review_days(base),
        status_distribution=[
            StatusCount(status=status, count=count)
            for status, count in counts.items() if count > 0
        ],
        spend_by_entity=[EntitySpend(entity=e, value=v) for e, v in spend.items()],
    )


def derive_view(contracts: Iterable[Contract], query: Optional[RegisterQuery] = None) -> RegisterView:
    """Build the register page and its metrics for a query.

    Metrics are computed over the entity-filtered base only; the status,
    high-risk and search filters narrow the table but not the KPIs.
    """
    query = query or RegisterQuery()
    collection = list(contracts)

    matches = sort_contracts(filter_contracts(collection, query), query.sort_order)
    items, page, page_size, total_pages = paginate(matches, query.page, query.page_size)
    metrics = compute_metrics(filter_by_entity(collection, query.entity))

    logger.debug(
        f"Register view: {len(matches)}/{len(collection)} matches, "
        f"page {page}/{total_pages} (size {page_size})"
    )
    return RegisterView(
        items=items,
        total_matches=len(matches),
        page=page,
        page_size=page_size,
        total_pages=total_pages,
        metrics=metrics,
    )
