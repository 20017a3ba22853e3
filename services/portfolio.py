"""
Portfolio service for composing the dashboard and investment detail views.
Fetches records for the current user, validates them at the boundary and
runs them through the metrics engine. Derived figures are recomputed on
every call and never stored.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field

from sqlalchemy.exc import SQLAlchemyError

from config import get_settings
from models import AssetType, Country, InvestmentRead, TransactionRead
from repositories import InvestmentRepository, TransactionRepository
from services.context import UserContext
from services.errors import InvestmentNotFoundError, StoreFetchError
from services.metrics import (
    FiscalYearSummary,
    InvestmentMetrics,
    InvestmentSummary,
    TransactionMetrics,
    aggregate_transactions,
    calculate_transaction_metrics,
    summarize_fiscal_years,
    summarize_investment,
)
from services.records import validate_investments, validate_transactions
from services.rollup import (
    CategoryBucket,
    PortfolioTotals,
    distribution,
    group_by_asset_type,
    portfolio_totals,
    rollup_by_asset_type,
)

logger = logging.getLogger(__name__)


@dataclass
class DashboardData:
    """Everything the dashboard renders."""
    investments: List[Tuple[InvestmentRead, InvestmentSummary]] = field(default_factory=list)
    buckets: List[CategoryBucket] = field(default_factory=list)
    totals: PortfolioTotals = field(
        default_factory=lambda: PortfolioTotals(0.0, 0.0, 0, 0.0)
    )
    by_asset_type: Dict[AssetType, List[Tuple[InvestmentRead, InvestmentSummary]]] = field(
        default_factory=lambda: {asset_type: [] for asset_type in AssetType}
    )
    allocation: Dict[str, float] = field(default_factory=dict)


@dataclass
class TransactionRow:
    """A transaction paired with its derived metrics."""
    transaction: TransactionRead
    metrics: TransactionMetrics


@dataclass
class InvestmentDetail:
    """Everything the investment detail view renders."""
    investment: InvestmentRead
    metrics: InvestmentMetrics
    rows: List[TransactionRow]
    fiscal_years: List[FiscalYearSummary]


@dataclass
class InvestmentPrefill:
    """Values copied into the transaction form for an existing investment."""
    investment_id: int
    name: str
    asset_type: AssetType
    country: Country


class PortfolioService:
    """
    Service for portfolio read models.
    All reads are scoped to the user in the supplied context.
    """

    @staticmethod
    def _fetch_investments(user_id: str, order_by_name: bool = False) -> List[InvestmentRead]:
        try:
            rows = InvestmentRepository.get_all(user_id, order_by_name=order_by_name)
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch investments: {e}")
            raise StoreFetchError(str(e)) from e
        return validate_investments(rows)

    @staticmethod
    def _fetch_transactions(user_id: str, investment_id: Optional[int] = None) -> List[TransactionRead]:
        try:
            if investment_id is None:
                rows = TransactionRepository.get_all(user_id)
            else:
                rows = TransactionRepository.get_by_investment(investment_id, user_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch transactions: {e}")
            raise StoreFetchError(str(e)) from e
        return validate_transactions(rows)

    @staticmethod
    def load_dashboard(ctx: UserContext) -> DashboardData:
        """
        Build the dashboard: per-investment summaries, category rollup and totals.

        Investments are fetched first (newest first), then transactions.

        Args:
            ctx: User context

        Returns:
            DashboardData (empty when no identity is resolved)

        Raises:
            StoreFetchError: the store failed or returned an invalid record
        """
        if not ctx.is_authenticated:
            logger.warning("Dashboard requested without a user identity")
            return DashboardData()

        investments = PortfolioService._fetch_investments(ctx.user_id)
        transactions = PortfolioService._fetch_transactions(ctx.user_id)

        by_investment = defaultdict(list)
        for tx in transactions:
            by_investment[tx.investment_id].append(tx)

        entries = [
            (investment, summarize_investment(by_investment.get(investment.id, [])))
            for investment in investments
        ]
        buckets = rollup_by_asset_type(entries)

        return DashboardData(
            investments=entries,
            buckets=buckets,
            totals=portfolio_totals(buckets, investment_count=len(investments)),
            by_asset_type=group_by_asset_type(entries),
            allocation=distribution(buckets),
        )

    @staticmethod
    def load_investment_detail(ctx: UserContext, investment_id: int) -> InvestmentDetail:
        """
        Build the detail view of one investment.

        Args:
            ctx: User context (its as_of is the evaluation time)
            investment_id: Investment to show

        Returns:
            InvestmentDetail with transactions newest first

        Raises:
            InvestmentNotFoundError: unknown id, other user's investment, or no identity
            StoreFetchError: the store failed or returned an invalid record
        """
        if not ctx.is_authenticated:
            raise InvestmentNotFoundError(investment_id)

        try:
            investment = InvestmentRepository.get_by_id(investment_id, ctx.user_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch investment {investment_id}: {e}")
            raise StoreFetchError(str(e)) from e
        if investment is None:
            raise InvestmentNotFoundError(investment_id)

        investment = validate_investments([investment])[0]
        transactions = PortfolioService._fetch_transactions(ctx.user_id, investment_id)

        settings = get_settings()
        rows = [
            TransactionRow(
                transaction=tx,
                metrics=calculate_transaction_metrics(
                    tx,
                    as_of=ctx.as_of,
                    long_term_threshold_days=settings.long_term_threshold_days,
                    fiscal_year_start_month=settings.fiscal_year_start_month,
                ),
            )
            for tx in transactions
        ]

        return InvestmentDetail(
            investment=investment,
            metrics=aggregate_transactions(transactions),
            rows=rows,
            fiscal_years=summarize_fiscal_years(
                transactions,
                as_of=ctx.as_of,
                long_term_threshold_days=settings.long_term_threshold_days,
                fiscal_year_start_month=settings.fiscal_year_start_month,
            ),
        )

    @staticmethod
    def list_investment_choices(ctx: UserContext) -> List[InvestmentRead]:
        """Investments ordered by name, for the transaction form dropdown."""
        if not ctx.is_authenticated:
            return []
        return PortfolioService._fetch_investments(ctx.user_id, order_by_name=True)

    @staticmethod
    def get_prefill(ctx: UserContext, investment_id: int) -> Optional[InvestmentPrefill]:
        """
        Form values of an existing investment.

        Returns:
            InvestmentPrefill or None if the investment is not visible to the user
        """
        if not ctx.is_authenticated:
            return None
        try:
            investment = InvestmentRepository.get_by_id(investment_id, ctx.user_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch investment {investment_id}: {e}")
            raise StoreFetchError(str(e)) from e
        if investment is None:
            return None
        return InvestmentPrefill(
            investment_id=investment.id,
            name=investment.name,
            asset_type=AssetType(investment.asset_type),
            country=Country(investment.country),
        )
