"""
Transaction model - represents a buy/sell transaction for an investment.
"""

from typing import Optional
from datetime import date, datetime, timezone
from sqlmodel import SQLModel, Field

from models.enums import TransactionType


class TransactionBase(SQLModel):
    """Fields shared by the table and the validated schemas."""
    investment_id: int = Field(foreign_key="investment.id", index=True)
    transaction_type: TransactionType
    transaction_date: date = Field(index=True)
    price: float = Field(ge=0)  # Price per unit at transaction time
    quantity: float = Field(ge=0)
    misc_costs: float = Field(default=0.0, ge=0)
    broker_fee_percent: float = Field(default=0.0, ge=0, le=100)
    tax_percent: float = Field(default=0.0, ge=0, le=100)
    notes: Optional[str] = Field(default=None)


class Transaction(TransactionBase, table=True):
    """Represents a recorded transaction. Immutable once created."""
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class TransactionCreate(TransactionBase):
    """Validated payload for a new transaction."""
    pass


class TransactionRead(TransactionBase):
    """Validated transaction row as read back from the store."""
    id: int
    user_id: str
