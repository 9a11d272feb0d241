"""Allocation breakdowns of open holdings by a categorical dimension."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .models import OTHER, AllocationDimension, AllocationItem, Holding

ZERO = Decimal("0")

SORT_KEYS = ("value", "pnl", "percentage", "pnl_percentage")


def dimension_value(holding: Holding, dimension: AllocationDimension) -> str:
    """Bucket name of a holding for the given dimension ("Other" if blank)."""
    if dimension == AllocationDimension.SECTOR:
        name = holding.sector
    elif dimension == AllocationDimension.ASSET_TYPE:
        name = holding.asset_type
    elif dimension == AllocationDimension.BROKER:
        name = holding.broker
    else:
        name = holding.company_name or holding.symbol
    return (name or "").strip() or OTHER


@dataclass
class _Bucket:
    value: Decimal = ZERO
    cost: Decimal = ZERO
    quantity: Decimal = ZERO
    symbol: Optional[str] = None
    logo: Optional[str] = None


def allocation_by(holdings: list[Holding], dimension: AllocationDimension) -> list[AllocationItem]:
    """Group holdings into one bucket per distinct dimension value.

    Percentages are shares of the summed current value and add up to 100
    across the returned buckets. Only company buckets carry a representative
    symbol and logo. No holdings gives an empty list.

    Args:
        holdings: Output of build_holdings (open positions only).
        dimension: Sector, company name, asset type or broker.

    Returns:
        Buckets in first-seen order; use sort_allocation for a display order.
    """
    groups: dict[str, _Bucket] = {}
    for h in holdings:
        bucket = groups.setdefault(dimension_value(h, dimension), _Bucket())
        bucket.value += h.current_value
        bucket.cost += h.invested_value
        bucket.quantity += h.quantity
        if bucket.symbol is None:
            bucket.symbol = h.symbol
            bucket.logo = h.logo

    total = sum((b.value for b in groups.values()), ZERO)
    is_company = dimension == AllocationDimension.COMPANY

    items = []
    for name, b in groups.items():
        pnl = b.value - b.cost
        items.append(AllocationItem(
            name=name,
            value=b.value,
            total_cost=b.cost,
            pnl=pnl,
            pnl_percentage=pnl / b.cost * 100 if b.cost > 0 else ZERO,
            percentage=b.value / total * 100 if total > 0 else ZERO,
            quantity=b.quantity,
            symbol=b.symbol if is_company else None,
            logo=b.logo if is_company else None,
        ))
    return items


def sort_allocation(
    items: list[AllocationItem], by: str = "value", descending: bool = True
) -> list[AllocationItem]:
    """Order buckets by a numeric field, ties alphabetical by name."""
    if by not in SORT_KEYS:
        raise ValueError(f"Cannot sort allocation by {by!r}. Choose from: {', '.join(SORT_KEYS)}")
    ordered = sorted(items, key=lambda i: i.name)
    return sorted(ordered, key=lambda i: getattr(i, by), reverse=descending)
