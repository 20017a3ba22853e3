"""
Transaction entry service.
Creates a transaction, and its investment when the form names a new one,
inside a single database transaction so no orphaned investment is left
behind when the second insert fails.
"""

import logging
from typing import Any, Dict, Union

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from db_engine import get_engine
from models import Transaction
from repositories import InvestmentRepository, TransactionRepository
from services.context import UserContext, require_user
from services.errors import InvestmentNotFoundError, StoreWriteError
from services.records import TransactionForm

logger = logging.getLogger(__name__)


class TransactionService:
    """Service for recording new transactions."""

    @staticmethod
    def submit(ctx: UserContext, form: Union[TransactionForm, Dict[str, Any]]) -> Transaction:
        """
        Record a transaction, creating the investment first when needed.

        Both inserts share one session and are committed together; any store
        failure rolls both back.

        Args:
            ctx: User context; an identity is required
            form: TransactionForm or raw form values

        Returns:
            The created Transaction

        Raises:
            NotAuthenticatedError: no identity resolved
            pydantic.ValidationError: the form values are invalid
            InvestmentNotFoundError: investment_id is unknown or owned by another user
            StoreWriteError: the store rejected the write
        """
        user_id = require_user(ctx)
        if not isinstance(form, TransactionForm):
            form = TransactionForm.model_validate(form)

        with Session(get_engine()) as session:
            try:
                if form.investment_id is None:
                    new_investment = form.to_investment_create()
                    investment = InvestmentRepository.add(
                        user_id=user_id,
                        name=new_investment.name,
                        asset_type=new_investment.asset_type,
                        country=new_investment.country,
                        session=session
                    )
                    logger.info(f"Created investment {investment.id} ({investment.name}) for {user_id}")
                else:
                    investment = InvestmentRepository.get_by_id(form.investment_id, user_id, session=session)
                    if investment is None:
                        raise InvestmentNotFoundError(form.investment_id)

                payload = form.to_transaction_create(investment.id)
                transaction = TransactionRepository.add(
                    user_id=user_id,
                    investment_id=payload.investment_id,
                    transaction_type=payload.transaction_type,
                    transaction_date=payload.transaction_date,
                    price=payload.price,
                    quantity=payload.quantity,
                    misc_costs=payload.misc_costs,
                    broker_fee_percent=payload.broker_fee_percent,
                    tax_percent=payload.tax_percent,
                    notes=payload.notes,
                    session=session
                )
                session.commit()
                session.refresh(transaction)
            except SQLAlchemyError as e:
                session.rollback()
                logger.error(f"Failed to add transaction: {e}")
                raise StoreWriteError(str(e)) from e
            except (InvestmentNotFoundError, ValidationError):
                session.rollback()
                raise

        logger.info(
            f"Recorded {transaction.transaction_type.value} of {transaction.quantity} "
            f"@ {transaction.price} for investment {transaction.investment_id}"
        )
        return transaction
