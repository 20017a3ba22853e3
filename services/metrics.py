"""
Portfolio metrics engine.
Pure functions turning transaction lists into valuation, profit/loss and
tax/term figures. Nothing here touches the database or the session state;
callers pass in already validated records and the evaluation time.
"""

import math
from typing import Iterable, List, Optional, Union
from datetime import date, datetime, time
from dataclasses import dataclass

from models import TransactionType


LONG_TERM = "Long Term"
SHORT_TERM = "Short Term"

DEFAULT_LONG_TERM_THRESHOLD_DAYS = 365
DEFAULT_FISCAL_YEAR_START_MONTH = 4  # April

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass
class InvestmentMetrics:
    """Per-investment totals shown on the detail view."""
    current_qty: float = 0.0
    avg_buy_price: float = 0.0
    total_buy_value: float = 0.0
    total_sell_value: float = 0.0
    total_profit: float = 0.0
    total_buy_qty: float = 0.0
    total_sell_qty: float = 0.0


@dataclass
class InvestmentSummary:
    """Per-investment figures used by the dashboard lists and rollup."""
    total_value: float = 0.0
    total_profit: float = 0.0
    total_quantity: float = 0.0


@dataclass
class TransactionMetrics:
    """Derived figures for a single transaction. Never persisted."""
    amount: float
    broker_fee: float
    tax_amount: float
    holding_period_days: int
    term: str
    fiscal_year: str
    profit: float
    profit_after_tax: float


@dataclass
class FiscalYearSummary:
    """Realized sell figures for one fiscal year and term."""
    fiscal_year: str
    term: str
    sell_count: int = 0
    realized_profit: float = 0.0
    tax_amount: float = 0.0
    profit_after_tax: float = 0.0


def _is_buy(tx) -> bool:
    return tx.transaction_type == TransactionType.BUY


def aggregate_transactions(transactions: Iterable) -> InvestmentMetrics:
    """
    Fold the transactions of one investment into buy/sell totals.

    Buys add price*quantity plus misc costs to the buy value, sells add
    price*quantity minus misc costs to the sell value. The net quantity may
    go negative when sells exceed the recorded buys.

    Args:
        transactions: Transactions of a single investment, in any order

    Returns:
        InvestmentMetrics for the investment
    """
    total_buy_value = 0.0
    total_buy_qty = 0.0
    total_sell_value = 0.0
    total_sell_qty = 0.0

    for tx in transactions:
        amount = tx.price * tx.quantity
        if _is_buy(tx):
            total_buy_value += amount + tx.misc_costs
            total_buy_qty += tx.quantity
        else:
            total_sell_value += amount - tx.misc_costs
            total_sell_qty += tx.quantity

    avg_buy_price = total_buy_value / total_buy_qty if total_buy_qty > 0 else 0.0

    return InvestmentMetrics(
        current_qty=total_buy_qty - total_sell_qty,
        avg_buy_price=avg_buy_price,
        total_buy_value=total_buy_value,
        total_sell_value=total_sell_value,
        total_profit=total_sell_value - total_buy_value,
        total_buy_qty=total_buy_qty,
        total_sell_qty=total_sell_qty,
    )


def summarize_investment(transactions: Iterable) -> InvestmentSummary:
    """
    Dashboard-level summary of one investment.

    The profit starts from the sell proceeds (net of misc costs) and is then
    reduced by the total buy value, which gives the same result as
    aggregate_transactions().total_profit.
    """
    total_value = 0.0
    total_profit = 0.0
    total_quantity = 0.0

    for tx in transactions:
        amount = tx.price * tx.quantity
        if _is_buy(tx):
            total_value += amount + tx.misc_costs
            total_quantity += tx.quantity
        else:
            total_profit += amount - tx.misc_costs
            total_quantity -= tx.quantity

    total_profit -= total_value

    return InvestmentSummary(
        total_value=total_value,
        total_profit=total_profit,
        total_quantity=total_quantity,
    )


def _as_datetime(value: Union[date, datetime]) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def holding_period_days(
    transaction_date: Union[date, datetime],
    as_of: Optional[Union[date, datetime]] = None
) -> int:
    """Whole days elapsed between the transaction date and the evaluation time (floored)."""
    now = datetime.now() if as_of is None else _as_datetime(as_of)
    elapsed = now - _as_datetime(transaction_date)
    return math.floor(elapsed.total_seconds() / SECONDS_PER_DAY)


def classify_term(days: int, threshold_days: int = DEFAULT_LONG_TERM_THRESHOLD_DAYS) -> str:
    """Long Term strictly above the threshold, Short Term otherwise."""
    return LONG_TERM if days > threshold_days else SHORT_TERM


def fiscal_year_label(
    transaction_date: Union[date, datetime],
    start_month: int = DEFAULT_FISCAL_YEAR_START_MONTH
) -> str:
    """
    Fiscal year label for an April-March year (start month configurable).

    2024-03-15 -> "FY 2023-2024", 2024-04-01 -> "FY 2024-2025".
    """
    year = transaction_date.year
    if transaction_date.month >= start_month:
        return f"FY {year}-{year + 1}"
    return f"FY {year - 1}-{year}"


def calculate_transaction_metrics(
    tx,
    as_of: Optional[Union[date, datetime]] = None,
    long_term_threshold_days: int = DEFAULT_LONG_TERM_THRESHOLD_DAYS,
    fiscal_year_start_month: int = DEFAULT_FISCAL_YEAR_START_MONTH
) -> TransactionMetrics:
    """
    Derive fee, tax, holding period, term, fiscal year and profit for one transaction.

    Buys carry no profit. For sells the profit is the amount less misc costs,
    broker fee and tax; profit_after_tax then deducts the tax amount once more.

    Args:
        tx: Transaction record
        as_of: Evaluation time (default: now)
        long_term_threshold_days: Holding period above which a position is Long Term
        fiscal_year_start_month: First month (1-12) of the fiscal year

    Returns:
        TransactionMetrics for the transaction
    """
    amount = tx.price * tx.quantity
    broker_fee = amount * tx.broker_fee_percent / 100
    tax_amount = amount * tx.tax_percent / 100
    days = holding_period_days(tx.transaction_date, as_of)

    profit = 0.0
    if not _is_buy(tx):
        profit = amount - tx.misc_costs - broker_fee - tax_amount

    # TODO: confirm whether sells should deduct the tax amount a second time here.
    profit_after_tax = profit - tax_amount

    return TransactionMetrics(
        amount=amount,
        broker_fee=broker_fee,
        tax_amount=tax_amount,
        holding_period_days=days,
        term=classify_term(days, long_term_threshold_days),
        fiscal_year=fiscal_year_label(tx.transaction_date, fiscal_year_start_month),
        profit=profit,
        profit_after_tax=profit_after_tax,
    )


def summarize_fiscal_years(
    transactions: Iterable,
    as_of: Optional[Union[date, datetime]] = None,
    long_term_threshold_days: int = DEFAULT_LONG_TERM_THRESHOLD_DAYS,
    fiscal_year_start_month: int = DEFAULT_FISCAL_YEAR_START_MONTH
) -> List[FiscalYearSummary]:
    """
    Group realized sell figures by fiscal year and term.

    Buckets appear in first-seen order of the input; buys are ignored.
    """
    buckets = {}
    for tx in transactions:
        if _is_buy(tx):
            continue
        metrics = calculate_transaction_metrics(
            tx, as_of, long_term_threshold_days, fiscal_year_start_month
        )
        key = (metrics.fiscal_year, metrics.term)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = FiscalYearSummary(fiscal_year=metrics.fiscal_year, term=metrics.term)
            buckets[key] = bucket
        bucket.sell_count += 1
        bucket.realized_profit += metrics.profit
        bucket.tax_amount += metrics.tax_amount
        bucket.profit_after_tax += metrics.profit_after_tax

    return list(buckets.values())
