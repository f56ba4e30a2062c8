"""TransactionRepository for synced ledger entries."""

from datetime import date
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from finfamily_sync.models.transaction import Transaction


class TransactionRepository:
    """Repository for transaction duplicate checks and inserts."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy database session.
        """
        self._session = session

    def find_duplicate_id(
        self,
        user_id: str,
        account_id: int,
        amount: Decimal,
        txn_date: date,
        description: str,
    ) -> int | None:
        """Find an existing transaction with the same identity tuple.

        Returns:
            The id of a matching transaction, or None.
        """
        stmt = (
            select(Transaction.id)
            .where(
                Transaction.user_id == user_id,
                Transaction.account_id == account_id,
                Transaction.amount == amount,
                Transaction.date == txn_date,
                Transaction.description == description,
            )
            .limit(1)
        )
        return self._session.execute(stmt).scalar_one_or_none()

    def create(
        self,
        user_id: str,
        account_id: int,
        amount: Decimal,
        type: str,
        description: str,
        txn_date: date,
        status: str = "completed",
        category_id: int | None = None,
        source: str = "bank_sync",
        original_currency: str = "ILS",
        memo: str | None = None,
    ) -> Transaction:
        """Insert a transaction.

        Returns:
            The created Transaction.
        """
        transaction = Transaction(
            user_id=user_id,
            account_id=account_id,
            amount=amount,
            type=type,
            description=description,
            date=txn_date,
            status=status,
            category_id=category_id,
            source=source,
            original_currency=original_currency,
            memo=memo,
        )
        self._session.add(transaction)
        self._session.flush()
        return transaction

    def list_for_account(self, account_id: int) -> list[Transaction]:
        """Get an account's transactions, oldest first."""
        stmt = (
            select(Transaction)
            .where(Transaction.account_id == account_id)
            .order_by(Transaction.date, Transaction.id)
        )
        return list(self._session.execute(stmt).scalars().all())

    def count_for_user(self, user_id: str) -> int:
        stmt = select(func.count(Transaction.id)).where(Transaction.user_id == user_id)
        return int(self._session.execute(stmt).scalar_one())
