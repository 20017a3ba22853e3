"""
Services package for InvestTrack.
Provides core business logic separated from presentation and data layers.
"""

from services.context import UserContext, require_user, context_from_settings
from services.errors import (
    InvestTrackError,
    NotAuthenticatedError,
    StoreError,
    StoreFetchError,
    StoreWriteError,
    RecordValidationError,
    InvestmentNotFoundError,
)
from services.metrics import (
    InvestmentMetrics,
    InvestmentSummary,
    TransactionMetrics,
    FiscalYearSummary,
    aggregate_transactions,
    summarize_investment,
    calculate_transaction_metrics,
    summarize_fiscal_years,
    holding_period_days,
    classify_term,
    fiscal_year_label,
)
from services.rollup import (
    CategoryBucket,
    PortfolioTotals,
    rollup_by_asset_type,
    portfolio_totals,
    distribution,
    group_by_asset_type,
)
from services.records import TransactionForm, validate_investments, validate_transactions
from services.portfolio import PortfolioService, DashboardData, InvestmentDetail, InvestmentPrefill
from services.transactions import TransactionService

__all__ = [
    # Context and errors
    'UserContext',
    'require_user',
    'context_from_settings',
    'InvestTrackError',
    'NotAuthenticatedError',
    'StoreError',
    'StoreFetchError',
    'StoreWriteError',
    'RecordValidationError',
    'InvestmentNotFoundError',
    # Metrics engine
    'InvestmentMetrics',
    'InvestmentSummary',
    'TransactionMetrics',
    'FiscalYearSummary',
    'aggregate_transactions',
    'summarize_investment',
    'calculate_transaction_metrics',
    'summarize_fiscal_years',
    'holding_period_days',
    'classify_term',
    'fiscal_year_label',
    # Rollup
    'CategoryBucket',
    'PortfolioTotals',
    'rollup_by_asset_type',
    'portfolio_totals',
    'distribution',
    'group_by_asset_type',
    # Boundary validation
    'TransactionForm',
    'validate_investments',
    'validate_transactions',
    # Services
    'PortfolioService',
    'DashboardData',
    'InvestmentDetail',
    'InvestmentPrefill',
    'TransactionService',
]
