"""AccountRepository for synced bank and credit-card accounts."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from finfamily_sync.models.account import Account


class AccountRepository:
    """Repository for account lookup and writes."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy database session.
        """
        self._session = session

    def find_by_number(self, user_id: str, account_number: str) -> Account | None:
        """Find the account for a (user, account number) pair.

        Args:
            user_id: Owning tenant.
            account_number: External account number (or provider id fallback).

        Returns:
            The Account, or None if there is none.

        Raises:
            sqlalchemy.exc.MultipleResultsFound: If more than one row matches.
        """
        stmt = select(Account).where(
            Account.user_id == user_id,
            Account.account_number == account_number,
        )
        return self._session.execute(stmt).scalar_one_or_none()

    def list_for_user(self, user_id: str) -> list[Account]:
        """Get all accounts of a user ordered by name."""
        stmt = select(Account).where(Account.user_id == user_id).order_by(Account.name)
        return list(self._session.execute(stmt).scalars().all())

    def create(
        self,
        user_id: str,
        name: str,
        account_number: str,
        balance: Decimal,
        last_sync: datetime,
        currency: str = "ILS",
        account_type: str = "checking",
    ) -> Account:
        """Create a new account.

        Returns:
            The created Account with its id assigned.
        """
        account = Account(
            user_id=user_id,
            name=name,
            account_number=account_number,
            balance=balance,
            currency=currency,
            account_type=account_type,
            last_sync=last_sync,
        )
        self._session.add(account)
        self._session.flush()
        return account

    def update_balance(
        self, account: Account, balance: Decimal, last_sync: datetime
    ) -> Account:
        """Set an account's balance and last sync time."""
        account.balance = balance
        account.last_sync = last_sync
        self._session.flush()
        return account
