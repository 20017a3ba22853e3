"""
Transaction Repository - data access layer for Transaction model.
Optimized with optional session parameter for transaction reuse.
Transactions are insert-only; reads are scoped to the owning user.
"""

from typing import Optional, List
from datetime import date
from sqlmodel import Session, select

from db_engine import get_engine
from models import Transaction, TransactionType


class TransactionRepository:
    """Repository for Transaction create/read operations."""

    @staticmethod
    def add(
        user_id: str,
        investment_id: int,
        transaction_type: TransactionType,
        transaction_date: date,
        price: float,
        quantity: float,
        misc_costs: float = 0.0,
        broker_fee_percent: float = 0.0,
        tax_percent: float = 0.0,
        notes: Optional[str] = None,
        session: Optional[Session] = None
    ) -> Transaction:
        """
        Add a new transaction to the database.

        Args:
            user_id: Owning user
            investment_id: Investment the transaction belongs to
            transaction_type: 'buy' or 'sell'
            transaction_date: Date of the transaction
            price: Price per unit
            quantity: Number of units
            misc_costs: Flat costs (stamp duty, exchange charges, ...)
            broker_fee_percent: Broker fee as a percentage of the amount
            tax_percent: Tax as a percentage of the amount
            notes: Optional free text
            session: Optional existing session; the caller then owns the commit

        Returns:
            Created Transaction object
        """
        def _create_transaction(sess: Session, commit: bool) -> Transaction:
            transaction = Transaction(
                user_id=user_id,
                investment_id=investment_id,
                transaction_type=transaction_type,
                transaction_date=transaction_date,
                price=price,
                quantity=quantity,
                misc_costs=misc_costs,
                broker_fee_percent=broker_fee_percent,
                tax_percent=tax_percent,
                notes=notes
            )
            sess.add(transaction)
            if commit:
                sess.commit()
            else:
                sess.flush()
            sess.refresh(transaction)
            return transaction

        if session is not None:
            return _create_transaction(session, commit=False)
        else:
            with Session(get_engine()) as session:
                return _create_transaction(session, commit=True)

    @staticmethod
    def get_by_investment(
        investment_id: int,
        user_id: str,
        session: Optional[Session] = None
    ) -> List[Transaction]:
        """
        Retrieve all transactions for a specific investment, newest first.

        Args:
            investment_id: Investment ID to look up
            user_id: Owning user
            session: Optional existing session for transaction reuse

        Returns:
            List of Transaction objects
        """
        def _get_by_investment(sess: Session) -> List[Transaction]:
            statement = (
                select(Transaction)
                .where(Transaction.investment_id == investment_id, Transaction.user_id == user_id)
                .order_by(Transaction.transaction_date.desc(), Transaction.id.desc())
            )
            results = sess.exec(statement)
            return list(results.all())

        if session is not None:
            return _get_by_investment(session)
        else:
            with Session(get_engine()) as session:
                return _get_by_investment(session)

    @staticmethod
    def get_all(user_id: str, session: Optional[Session] = None) -> List[Transaction]:
        """
        Retrieve all transactions of a user, newest first.

        Args:
            user_id: Owning user
            session: Optional existing session for transaction reuse

        Returns:
            List of all Transaction objects
        """
        def _get_all(sess: Session) -> List[Transaction]:
            statement = (
                select(Transaction)
                .where(Transaction.user_id == user_id)
                .order_by(Transaction.transaction_date.desc(), Transaction.id.desc())
            )
            results = sess.exec(statement)
            return list(results.all())

        if session is not None:
            return _get_all(session)
        else:
            with Session(get_engine()) as session:
                return _get_all(session)
