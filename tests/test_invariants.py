"""
Property-based tests for the aggregation invariants.

1. The detail-view and dashboard aggregations agree on profit and quantity.
2. Without sells, profit is minus the buy value and the average is value / quantity.
3. The order of transactions does not change the result.
"""

import pytest
from hypothesis import given, settings, strategies as st

from models import TransactionType
from services.metrics import aggregate_transactions, summarize_investment

from conftest import build_transaction

amount_strategy = st.floats(min_value=0, max_value=1_000_000, allow_nan=False, allow_infinity=False)
quantity_strategy = st.floats(min_value=0, max_value=10_000, allow_nan=False, allow_infinity=False)

transaction_strategy = st.builds(
    build_transaction,
    transaction_type=st.sampled_from(list(TransactionType)),
    price=amount_strategy,
    quantity=quantity_strategy,
    misc_costs=st.floats(min_value=0, max_value=10_000, allow_nan=False, allow_infinity=False),
)

buy_strategy = st.builds(
    build_transaction,
    transaction_type=st.just(TransactionType.BUY),
    price=amount_strategy,
    quantity=quantity_strategy,
    misc_costs=st.floats(min_value=0, max_value=10_000, allow_nan=False, allow_infinity=False),
)


@given(transactions=st.lists(transaction_strategy, max_size=30))
@settings(max_examples=200)
def test_aggregations_agree(transactions):
    metrics = aggregate_transactions(transactions)
    summary = summarize_investment(transactions)

    assert summary.total_profit == metrics.total_profit
    assert summary.total_value == metrics.total_buy_value
    assert summary.total_quantity == pytest.approx(metrics.current_qty, abs=1e-6)


@given(transactions=st.lists(buy_strategy, min_size=1, max_size=30))
@settings(max_examples=100)
def test_buys_only(transactions):
    metrics = aggregate_transactions(transactions)

    assert metrics.total_profit == -metrics.total_buy_value
    assert summarize_investment(transactions).total_profit == -metrics.total_buy_value
    if metrics.total_buy_qty > 0:
        assert metrics.avg_buy_price == metrics.total_buy_value / metrics.total_buy_qty
    else:
        assert metrics.avg_buy_price == 0


@given(transactions=st.lists(transaction_strategy, max_size=30), data=st.data())
@settings(max_examples=100)
def test_order_does_not_matter(transactions, data):
    shuffled = data.draw(st.permutations(transactions))

    original = aggregate_transactions(transactions)
    reordered = aggregate_transactions(shuffled)

    assert reordered.total_buy_value == pytest.approx(original.total_buy_value, rel=1e-9, abs=1e-6)
    assert reordered.total_sell_value == pytest.approx(original.total_sell_value, rel=1e-9, abs=1e-6)
    assert reordered.current_qty == pytest.approx(original.current_qty, rel=1e-9, abs=1e-6)
