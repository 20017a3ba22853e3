"""
Database models for InvestTrack.
All SQLModel table definitions and their validated schemas are centralized here.
"""

from models.enums import AssetType, Country, TransactionType
from models.investment import Investment, InvestmentCreate, InvestmentRead
from models.transaction import Transaction, TransactionCreate, TransactionRead

__all__ = [
    'AssetType',
    'Country',
    'TransactionType',
    'Investment',
    'InvestmentCreate',
    'InvestmentRead',
    'Transaction',
    'TransactionCreate',
    'TransactionRead',
]
