"""AccountReconciler: find-or-create the stored account for a provider snapshot."""

import logging
from collections.abc import Callable
from datetime import datetime
from decimal import Decimal

from sqlalchemy.exc import IntegrityError, MultipleResultsFound, SQLAlchemyError
from sqlalchemy.orm import Session

from finfamily_sync.db.base import utc_now
from finfamily_sync.exceptions import IntegrityFault, PersistenceFailure
from finfamily_sync.models.account import Account
from finfamily_sync.repositories.account_repository import AccountRepository
from finfamily_sync.scrapers.base import ScrapedAccount

logger = logging.getLogger(__name__)

DEFAULT_ACCOUNT_LABEL = "ראשי"
DEFAULT_CURRENCY = "ILS"
DEFAULT_ACCOUNT_TYPE = "checking"


def account_key(snapshot: ScrapedAccount, provider_label: str) -> str:
    """Account number used as the lookup key, falling back to the provider."""
    return snapshot.account_number or provider_label


def account_display_name(snapshot: ScrapedAccount, provider_label: str) -> str:
    return f"{provider_label} - {snapshot.account_number or DEFAULT_ACCOUNT_LABEL}"


class AccountReconciler:
    """Merges provider account snapshots into stored accounts.

    Accounts are unique per (user, account number). An existing account gets
    its balance and last sync time refreshed; a missing one is created. Each
    call commits its own write.
    """

    def __init__(
        self,
        session: Session,
        account_repository: AccountRepository | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the reconciler.

        Args:
            session: Database session; committed after each account.
            account_repository: Repository override (defaults to one on session).
            clock: Source of the last sync timestamp.
        """
        self._session = session
        self._accounts = account_repository or AccountRepository(session)
        self._clock = clock

    def reconcile_account(
        self, tenant_id: str, snapshot: ScrapedAccount, provider_label: str
    ) -> int | None:
        """Find or create the account for a snapshot and refresh its balance.

        Args:
            tenant_id: Owning user.
            snapshot: Account as reported by the provider.
            provider_label: Provider id, used in the name and as fallback key.

        Returns:
            The account id, or None if the store did not return one. Callers
            must skip the snapshot's transactions when None is returned.

        Raises:
            IntegrityFault: If more than one account matches the key.
            PersistenceFailure: If the store read or write fails.
        """
        key = account_key(snapshot, provider_label)
        balance = snapshot.balance if snapshot.balance is not None else Decimal("0")

        existing = self._find(tenant_id, key)
        try:
            if existing is not None:
                self._accounts.update_balance(existing, balance, self._clock())
                account_id = existing.id
            else:
                account_id = self._create(tenant_id, snapshot, provider_label, key, balance)
            self._session.commit()
        except SQLAlchemyError as e:
            self._session.rollback()
            raise PersistenceFailure(f"Could not save account {key}: {e}") from e

        if account_id is None:
            logger.warning(
                "Store returned no id for account %s of user %s", key, tenant_id
            )
        return account_id

    def _find(self, tenant_id: str, key: str) -> Account | None:
        try:
            return self._accounts.find_by_number(tenant_id, key)
        except MultipleResultsFound as e:
            raise IntegrityFault(
                f"Multiple accounts stored for user {tenant_id} and number {key}"
            ) from e
        except SQLAlchemyError as e:
            self._session.rollback()
            raise PersistenceFailure(f"Could not look up account {key}: {e}") from e

    def _create(
        self,
        tenant_id: str,
        snapshot: ScrapedAccount,
        provider_label: str,
        key: str,
        balance: Decimal,
    ) -> int | None:
        try:
            account = self._accounts.create(
                user_id=tenant_id,
                name=account_display_name(snapshot, provider_label),
                account_number=key,
                balance=balance,
                last_sync=self._clock(),
                currency=DEFAULT_CURRENCY,
                account_type=DEFAULT_ACCOUNT_TYPE,
            )
        except IntegrityError:
            # Another sync created the account after our lookup.
            self._session.rollback()
            existing = self._find(tenant_id, key)
            if existing is None:
                raise
            self._accounts.update_balance(existing, balance, self._clock())
            return existing.id

        logger.info("Created account %s for user %s", key, tenant_id)
        return account.id
