"""
Investment model - a named holding owned by one user.
"""

from typing import Optional
from datetime import datetime, timezone

from pydantic import field_validator
from sqlmodel import SQLModel, Field

from models.enums import AssetType, Country


class InvestmentBase(SQLModel):
    """Fields shared by the table and the validated schemas."""
    name: str = Field(index=True, min_length=1)
    asset_type: AssetType
    country: Country

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value


class Investment(InvestmentBase, table=True):
    """Represents an investment in the portfolio. Immutable once created."""
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)


class InvestmentCreate(InvestmentBase):
    """Validated payload for a new investment."""
    pass


class InvestmentRead(InvestmentBase):
    """Validated investment row as read back from the store."""
    id: int
    user_id: str
    created_at: datetime
