"""
Repositories package for InvestTrack.
Provides data access layer for all database operations.
"""

from repositories.investment_repository import InvestmentRepository
from repositories.transaction_repository import TransactionRepository

__all__ = [
    'InvestmentRepository',
    'TransactionRepository',
]
