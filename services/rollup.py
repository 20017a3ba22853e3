"""
Portfolio rollup - aggregates per-investment summaries by asset type.
Feeds the allocation chart and the dashboard totals.
"""

from typing import Dict, Iterable, List, Sequence, Tuple
from dataclasses import dataclass

from models import AssetType
from services.metrics import InvestmentSummary


@dataclass
class CategoryBucket:
    """Summed value and profit of one asset-type category."""
    name: str
    value: float = 0.0
    profit: float = 0.0


@dataclass
class PortfolioTotals:
    """Grand totals across all categories."""
    total_value: float
    total_profit: float
    investment_count: int
    profit_percentage: float


def _category_name(asset_type) -> str:
    return asset_type.value if isinstance(asset_type, AssetType) else str(asset_type)


def rollup_by_asset_type(entries: Iterable[Tuple[object, InvestmentSummary]]) -> List[CategoryBucket]:
    """
    Sum each investment's value and profit into the bucket of its asset type.

    Only categories present in the input appear, in first-seen order.

    Args:
        entries: (investment, summary) pairs; investment needs an asset_type

    Returns:
        List of CategoryBucket
    """
    buckets: Dict[str, CategoryBucket] = {}
    for investment, summary in entries:
        name = _category_name(investment.asset_type)
        bucket = buckets.get(name)
        if bucket is None:
            bucket = CategoryBucket(name=name)
            buckets[name] = bucket
        bucket.value += summary.total_value
        bucket.profit += summary.total_profit
    return list(buckets.values())


def portfolio_totals(buckets: Sequence[CategoryBucket], investment_count: int = 0) -> PortfolioTotals:
    """Reduce category buckets to dashboard totals and the profit percentage."""
    total_value = sum(b.value for b in buckets)
    total_profit = sum(b.profit for b in buckets)
    profit_percentage = (total_profit / total_value * 100) if total_value > 0 else 0.0
    return PortfolioTotals(
        total_value=total_value,
        total_profit=total_profit,
        investment_count=investment_count,
        profit_percentage=profit_percentage,
    )


def distribution(buckets: Sequence[CategoryBucket]) -> Dict[str, float]:
    """Share of total value (0-1) per category, 0 for every category when the total is 0."""
    total_value = sum(b.value for b in buckets)
    if total_value <= 0:
        return {b.name: 0.0 for b in buckets}
    return {b.name: b.value / total_value for b in buckets}


def group_by_asset_type(
    entries: Iterable[Tuple[object, InvestmentSummary]]
) -> Dict[AssetType, List[Tuple[object, InvestmentSummary]]]:
    """
    Group (investment, summary) pairs under the fixed asset-type enumeration.

    Every category is present, in display order, even when it has no investments.
    """
    grouped = {asset_type: [] for asset_type in AssetType}
    for investment, summary in entries:
        grouped[AssetType(investment.asset_type)].append((investment, summary))
    return grouped
