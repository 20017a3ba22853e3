"""
Investment Repository - data access layer for Investment model.
Optimized with optional session parameter for transaction reuse.
All reads are scoped to the owning user.
"""

from typing import Optional, List
from sqlmodel import Session, select

from db_engine import get_engine
from models import Investment, AssetType, Country


class InvestmentRepository:
    """Repository for Investment create/read operations."""

    @staticmethod
    def add(
        user_id: str,
        name: str,
        asset_type: AssetType,
        country: Country,
        session: Optional[Session] = None
    ) -> Investment:
        """
        Add a new investment to the database.

        Args:
            user_id: Owning user
            name: Display name
            asset_type: Asset-type category
            country: India or US
            session: Optional existing session; the caller then owns the commit

        Returns:
            Created Investment object (with its id assigned)
        """
        def _create_investment(sess: Session, commit: bool) -> Investment:
            investment = Investment(
                user_id=user_id,
                name=name,
                asset_type=asset_type,
                country=country
            )
            sess.add(investment)
            if commit:
                sess.commit()
            else:
                sess.flush()
            sess.refresh(investment)
            return investment

        if session is not None:
            return _create_investment(session, commit=False)
        else:
            with Session(get_engine()) as session:
                return _create_investment(session, commit=True)

    @staticmethod
    def get_all(
        user_id: str,
        order_by_name: bool = False,
        session: Optional[Session] = None
    ) -> List[Investment]:
        """
        Retrieve all investments of a user.

        Args:
            user_id: Owning user
            order_by_name: Sort by name instead of newest first
            session: Optional existing session for transaction reuse

        Returns:
            List of Investment objects
        """
        def _get_all(sess: Session) -> List[Investment]:
            statement = select(Investment).where(Investment.user_id == user_id)
            if order_by_name:
                statement = statement.order_by(Investment.name)
            else:
                statement = statement.order_by(Investment.created_at.desc(), Investment.id.desc())
            results = sess.exec(statement)
            return list(results.all())

        if session is not None:
            return _get_all(session)
        else:
            with Session(get_engine()) as session:
                return _get_all(session)

    @staticmethod
    def get_by_id(
        investment_id: int,
        user_id: str,
        session: Optional[Session] = None
    ) -> Optional[Investment]:
        """
        Retrieve an investment by its ID.

        Returns:
            Investment object or None if not found or owned by someone else
        """
        def _get_by_id(sess: Session) -> Optional[Investment]:
            statement = select(Investment).where(
                Investment.id == investment_id,
                Investment.user_id == user_id
            )
            return sess.exec(statement).first()

        if session is not None:
            return _get_by_id(session)
        else:
            with Session(get_engine()) as session:
                return _get_by_id(session)
