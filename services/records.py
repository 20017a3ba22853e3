"""
Boundary validation between the store, the form and the metrics engine.
Store rows are re-validated into the *Read schemas before any metric is
computed; raw form values are parsed into a TransactionForm before any write.
"""

import logging
from typing import Iterable, List, Optional
from datetime import date

from pydantic import BaseModel, Field, ValidationError, ValidationInfo, field_validator, model_validator

from config import get_settings
from models import (
    AssetType, Country, TransactionType,
    InvestmentCreate, InvestmentRead, TransactionCreate, TransactionRead
)
from services.errors import RecordValidationError

logger = logging.getLogger(__name__)


def validate_investments(rows: Iterable) -> List[InvestmentRead]:
    """Validate investment rows (ORM objects or dicts) read from the store."""
    try:
        return [InvestmentRead.model_validate(row) for row in rows]
    except ValidationError as e:
        logger.error(f"Invalid investment record from store: {e}")
        raise RecordValidationError(str(e)) from e


def validate_transactions(rows: Iterable) -> List[TransactionRead]:
    """Validate transaction rows (ORM objects or dicts) read from the store."""
    try:
        return [TransactionRead.model_validate(row) for row in rows]
    except ValidationError as e:
        logger.error(f"Invalid transaction record from store: {e}")
        raise RecordValidationError(str(e)) from e


class TransactionForm(BaseModel):
    """
    Values submitted from the transaction form.

    Either investment_id names an existing investment, or name, asset_type
    and country describe a new one. Blank optional numbers fall back to
    their defaults.
    """
    investment_id: Optional[int] = None
    asset_type: Optional[AssetType] = None
    country: Optional[Country] = None
    name: Optional[str] = None
    transaction_type: TransactionType = TransactionType.BUY
    transaction_date: date
    price: float = Field(ge=0)
    quantity: float = Field(ge=0)
    misc_costs: float = Field(default=0.0, ge=0)
    broker_fee_percent: float = Field(
        default_factory=lambda: get_settings().default_broker_fee_percent, ge=0, le=100
    )
    tax_percent: float = Field(default_factory=lambda: get_settings().default_tax_percent, ge=0, le=100)
    notes: Optional[str] = None

    @field_validator("investment_id", "asset_type", "country", "name", "notes", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("misc_costs", "broker_fee_percent", "tax_percent", mode="before")
    @classmethod
    def _blank_to_default(cls, value, info: ValidationInfo):
        if value is None or (isinstance(value, str) and not value.strip()):
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return value

    @model_validator(mode="after")
    def _require_new_investment_fields(self) -> "TransactionForm":
        if self.investment_id is None:
            if not self.name or not self.name.strip():
                raise ValueError("Name is required")
            if self.asset_type is None:
                raise ValueError("Asset type is required")
            if self.country is None:
                raise ValueError("Country is required")
        return self

    def to_investment_create(self) -> InvestmentCreate:
        return InvestmentCreate(name=self.name, asset_type=self.asset_type, country=self.country)

    def to_transaction_create(self, investment_id: int) -> TransactionCreate:
        return TransactionCreate(
            investment_id=investment_id,
            transaction_type=self.transaction_type,
            transaction_date=self.transaction_date,
            price=self.price,
            quantity=self.quantity,
            misc_costs=self.misc_costs,
            broker_fee_percent=self.broker_fee_percent,
            tax_percent=self.tax_percent,
            notes=self.notes,
        )
