"""
Shared fixtures: an in-memory database bound to db_engine, and a factory
for unsaved Transaction records used by the pure metrics tests.
"""

from datetime import date

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

import db_engine
from models import Investment, Transaction, TransactionType  # noqa: F401  (registers tables)


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database for each test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    db_engine.set_engine(engine)  # before the first connection, so foreign keys are enforced
    SQLModel.metadata.create_all(engine)
    yield engine
    db_engine.reset_engine()


def build_transaction(
    transaction_type=TransactionType.BUY,
    price=100.0,
    quantity=1.0,
    misc_costs=0.0,
    broker_fee_percent=0.0,
    tax_percent=0.0,
    transaction_date=date(2024, 1, 1),
    investment_id=1,
    user_id="user-1",
):
    """Unsaved Transaction record with sensible defaults."""
    return Transaction(
        user_id=user_id,
        investment_id=investment_id,
        transaction_type=transaction_type,
        transaction_date=transaction_date,
        price=price,
        quantity=quantity,
        misc_costs=misc_costs,
        broker_fee_percent=broker_fee_percent,
        tax_percent=tax_percent,
    )


@pytest.fixture
def make_transaction():
    """Factory fixture for unsaved Transaction records."""
    return build_transaction
