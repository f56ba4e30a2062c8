"""SyncOrchestrator: one provider sync for one user, end to end."""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finfamily_sync.db.base import utc_now
from finfamily_sync.exceptions import (
    IntegrityFault,
    PersistenceFailure,
    ScrapeFailure,
    SyncError,
)
from finfamily_sync.models.bank_connection import BankConnection
from finfamily_sync.repositories.bank_connection_repository import (
    STATUS_ERROR,
    STATUS_SUCCESS,
    BankConnectionRepository,
)
from finfamily_sync.scrapers.base import DEFAULT_LOOKBACK_DAYS, ScrapedAccount, ScrapeOptions
from finfamily_sync.scrapers.registry import ProviderRegistry
from finfamily_sync.services.account_reconciler import AccountReconciler
from finfamily_sync.services.categorization_service import CategoryRuleEngine
from finfamily_sync.services.credentials import decode_credentials
from finfamily_sync.services.transaction_reconciler import (
    ReconcileCounts,
    TransactionReconciler,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConnectionRef:
    """What the batch needs to sync one connection."""

    tenant_id: str
    provider_id: str
    encoded_credentials: str | None

    @classmethod
    def from_model(cls, connection: BankConnection) -> "ConnectionRef":
        return cls(
            tenant_id=connection.user_id,
            provider_id=connection.provider,
            encoded_credentials=connection.encrypted_credentials,
        )


@dataclass
class AccountFailure:
    """An account whose reconciliation was abandoned."""

    account_number: str | None
    error: str


@dataclass
class SyncResult:
    """Totals of a successful sync."""

    accounts_count: int
    saved_count: int = 0
    skipped_count: int = 0
    invalid_count: int = 0
    failed_accounts: list[AccountFailure] = field(default_factory=list)

    def add(self, counts: ReconcileCounts) -> None:
        """Fold one account's transaction counts into the totals."""
        self.saved_count += counts.saved
        self.skipped_count += counts.skipped
        self.invalid_count += counts.invalid


class ConnectionLocks:
    """One lock per (user, provider), so two triggers never sync it at once."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[tuple[str, str], threading.Lock] = {}

    def for_connection(self, tenant_id: str, provider_id: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault((tenant_id, provider_id), threading.Lock())


connection_locks = ConnectionLocks()


class SyncOrchestrator:
    """Runs a sync attempt: scrape, reconcile accounts and transactions, record status.

    Flow per attempt:
    1. Resolve the provider (unknown id fails before any scrape)
    2. Scrape with a fixed lookback window
    3. Reconcile each returned account, then its transactions
    4. Upsert the connection status exactly once

    A fault in one account is logged and the remaining accounts are still
    reconciled. The attempt only fails on provider, credential or scrape
    errors, or when every returned account failed.
    """

    def __init__(
        self,
        session: Session,
        registry: ProviderRegistry,
        category_engine: CategoryRuleEngine | None = None,
        lookback_days: int = DEFAULT_LOOKBACK_DAYS,
        clock: Callable[[], datetime] = utc_now,
        locks: ConnectionLocks = connection_locks,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            session: Database session shared by the reconcilers and status writes.
            registry: Provider registry resolving ids to scrape strategies.
            category_engine: Rule engine for new transactions.
            lookback_days: Days of history requested from the provider.
            clock: Naive-UTC clock for timestamps and the lookback start.
            locks: Per-connection locks.
        """
        self._session = session
        self._registry = registry
        self._lookback_days = lookback_days
        self._clock = clock
        self._locks = locks
        self._connections = BankConnectionRepository(session)
        self._account_reconciler = AccountReconciler(session, clock=clock)
        self._transaction_reconciler = TransactionReconciler(
            session, category_engine=category_engine
        )

    def sync_one(
        self, tenant_id: str, provider_id: str, credentials: dict[str, Any]
    ) -> SyncResult:
        """Sync one provider for one user with plain credentials.

        Returns:
            SyncResult with account, saved and skipped counts.

        Raises:
            UnsupportedProvider: If the provider id is not registered.
            ScrapeFailure: If the provider scrape failed.
            IntegrityFault, PersistenceFailure: If every account failed.
        """
        return self._attempt(tenant_id, provider_id, lambda: credentials)

    def sync_connection(self, connection: ConnectionRef) -> SyncResult:
        """Sync a stored connection, decoding its credentials first.

        Raises:
            CredentialDecodeFailure: If the stored blob cannot be decoded.
            Anything ``sync_one`` raises.
        """
        return self._attempt(
            connection.tenant_id,
            connection.provider_id,
            lambda: decode_credentials(connection.encoded_credentials),
        )

    def _attempt(
        self,
        tenant_id: str,
        provider_id: str,
        load_credentials: Callable[[], dict[str, Any]],
    ) -> SyncResult:
        with self._locks.for_connection(tenant_id, provider_id):
            logger.info("Syncing %s for user %s", provider_id, tenant_id)
            try:
                result = self._run(tenant_id, provider_id, load_credentials)
            except Exception as e:
                if isinstance(e, SyncError):
                    logger.error(
                        "Sync of %s for user %s failed: %s", provider_id, tenant_id, e
                    )
                else:
                    logger.exception(
                        "Sync of %s for user %s crashed", provider_id, tenant_id
                    )
                self._record_status(
                    tenant_id,
                    provider_id,
                    STATUS_ERROR,
                    error_message=str(e) or type(e).__name__,
                )
                raise

            self._record_status(
                tenant_id,
                provider_id,
                STATUS_SUCCESS,
                accounts_count=result.accounts_count,
            )
            logger.info(
                "Synced %s for user %s: %d accounts, %d saved, %d skipped",
                provider_id,
                tenant_id,
                result.accounts_count,
                result.saved_count,
                result.skipped_count,
            )
            return result

    def _run(
        self,
        tenant_id: str,
        provider_id: str,
        load_credentials: Callable[[], dict[str, Any]],
    ) -> SyncResult:
        provider = self._registry.resolve(provider_id)
        credentials = load_credentials()

        options = ScrapeOptions.for_lookback(
            provider.company_id, self._clock(), self._lookback_days
        )
        scrape_result = provider.scraper.scrape(options, credentials)
        if not scrape_result.success:
            raise ScrapeFailure(scrape_result.error_message or "Scraping failed")

        return self._reconcile(tenant_id, provider_id, scrape_result.accounts)

    def _reconcile(
        self, tenant_id: str, provider_id: str, accounts: list[ScrapedAccount]
    ) -> SyncResult:
        result = SyncResult(accounts_count=len(accounts))
        first_error: SyncError | None = None

        for snapshot in accounts:
            try:
                account_id = self._account_reconciler.reconcile_account(
                    tenant_id, snapshot, provider_id
                )
                if account_id is None:
                    continue
                counts = self._transaction_reconciler.reconcile_transactions(
                    tenant_id, account_id, snapshot.txns
                )
            except (IntegrityFault, PersistenceFailure) as e:
                logger.error(
                    "Account %s of user %s abandoned: %s",
                    snapshot.account_number or provider_id,
                    tenant_id,
                    e,
                )
                result.failed_accounts.append(
                    AccountFailure(account_number=snapshot.account_number, error=str(e))
                )
                first_error = first_error or e
                if isinstance(e, PersistenceFailure) and e.counts is not None:
                    result.add(e.counts)
                continue

            result.add(counts)

        if first_error is not None and len(result.failed_accounts) == len(accounts):
            raise first_error
        return result

    def _record_status(
        self,
        tenant_id: str,
        provider_id: str,
        status: str,
        accounts_count: int | None = None,
        error_message: str | None = None,
    ) -> None:
        """Upsert the connection status. Never raises.

        Uncommitted work of a failed attempt is discarded first.
        """
        try:
            if status == STATUS_ERROR:
                self._session.rollback()
            self._connections.upsert_status(
                user_id=tenant_id,
                provider=provider_id,
                status=status,
                last_sync=self._clock(),
                accounts_count=accounts_count,
                error_message=error_message,
            )
            self._session.commit()
        except SQLAlchemyError:
            logger.exception(
                "Could not record %s status for %s of user %s",
                status,
                provider_id,
                tenant_id,
            )
            try:
                self._session.rollback()
            except SQLAlchemyError:
                logger.exception("Rollback after failed status write also failed")
