"""TransactionReconciler: insert new provider transactions, skip duplicates."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import Decimal

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from finfamily_sync.exceptions import PersistenceFailure
from finfamily_sync.repositories.transaction_repository import TransactionRepository
from finfamily_sync.scrapers.base import ScrapedTransaction
from finfamily_sync.services.categorization_service import CategoryRuleEngine

logger = logging.getLogger(__name__)

DEFAULT_DESCRIPTION = "עסקה"
DEFAULT_STATUS = "completed"
DEFAULT_CURRENCY = "ILS"
SOURCE_BANK_SYNC = "bank_sync"

TYPE_INCOME = "income"
TYPE_EXPENSE = "expense"


@dataclass
class ReconcileCounts:
    """Per-account outcome of transaction reconciliation."""

    saved: int = 0
    skipped: int = 0
    invalid: int = 0


@dataclass(frozen=True)
class NormalizedTransaction:
    """A provider transaction reduced to the stored fields."""

    amount: Decimal
    type: str
    date: date
    description: str
    status: str
    original_currency: str
    memo: str | None


def normalize_date(value: str | date | datetime | None) -> date:
    """Reduce a provider timestamp to its UTC calendar day.

    Raises:
        ValueError: If the value is missing or not an ISO-8601 date/time.
    """
    if value is None or value == "":
        raise ValueError("missing date")
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        return value
    else:
        moment = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))

    if moment.tzinfo is not None:
        moment = moment.astimezone(UTC)
    return moment.date()


def normalize_transaction(txn: ScrapedTransaction) -> NormalizedTransaction:
    """Derive the stored amount, type, day and defaults of a transaction.

    The charged amount wins over the original amount; its sign gives the type.

    Raises:
        ValueError: If the transaction has no amount or no usable date.
    """
    signed = txn.charged_amount if txn.charged_amount is not None else txn.original_amount
    if signed is None:
        raise ValueError("missing amount")

    return NormalizedTransaction(
        amount=abs(signed),
        type=TYPE_INCOME if signed >= 0 else TYPE_EXPENSE,
        date=normalize_date(txn.date),
        description=txn.description or DEFAULT_DESCRIPTION,
        status=txn.status or DEFAULT_STATUS,
        original_currency=txn.original_currency or DEFAULT_CURRENCY,
        memo=txn.memo or None,
    )


class TransactionReconciler:
    """Stores an account's provider transactions exactly once.

    A transaction is a duplicate when a stored row has the same user, account,
    amount, day and description. Transactions are handled in source order and
    each insert is committed on its own, so a failure part-way through keeps
    the rows already saved.
    """

    def __init__(
        self,
        session: Session,
        category_engine: CategoryRuleEngine | None = None,
        transaction_repository: TransactionRepository | None = None,
    ) -> None:
        """Initialize the reconciler.

        Args:
            session: Database session; committed after each insert.
            category_engine: Rule engine for new transactions.
            transaction_repository: Repository override (defaults to one on session).
        """
        self._session = session
        self._engine = category_engine or CategoryRuleEngine()
        self._transactions = transaction_repository or TransactionRepository(session)

    def reconcile_transactions(
        self,
        tenant_id: str,
        account_id: int,
        txns: Iterable[ScrapedTransaction],
    ) -> ReconcileCounts:
        """Insert the transactions that are not stored yet.

        Args:
            tenant_id: Owning user.
            account_id: Stored account the transactions belong to.
            txns: Provider transactions in source order.

        Returns:
            ReconcileCounts with saved, skipped (duplicates) and invalid counts.

        Raises:
            PersistenceFailure: If a lookup or insert fails. Remaining
                transactions of the account are not processed; the error's
                ``counts`` covers the ones handled before the failure.
        """
        counts = ReconcileCounts()

        for txn in txns:
            try:
                self._reconcile_one(tenant_id, account_id, txn, counts)
            except PersistenceFailure as e:
                e.counts = counts
                raise

        logger.debug(
            "Account %d: %d saved, %d skipped, %d invalid",
            account_id,
            counts.saved,
            counts.skipped,
            counts.invalid,
        )
        return counts

    def _reconcile_one(
        self,
        tenant_id: str,
        account_id: int,
        txn: ScrapedTransaction,
        counts: ReconcileCounts,
    ) -> None:
        try:
            normalized = normalize_transaction(txn)
        except ValueError as e:
            logger.warning(
                "Skipping malformed transaction on account %d: %s", account_id, e
            )
            counts.invalid += 1
            return

        if self._is_duplicate(tenant_id, account_id, normalized):
            counts.skipped += 1
        elif self._insert(tenant_id, account_id, normalized):
            counts.saved += 1
        else:
            counts.skipped += 1

    def _is_duplicate(
        self, tenant_id: str, account_id: int, txn: NormalizedTransaction
    ) -> bool:
        try:
            existing_id = self._transactions.find_duplicate_id(
                user_id=tenant_id,
                account_id=account_id,
                amount=txn.amount,
                txn_date=txn.date,
                description=txn.description,
            )
        except SQLAlchemyError as e:
            self._session.rollback()
            raise PersistenceFailure(
                f"Duplicate check failed on account {account_id}: {e}"
            ) from e
        return existing_id is not None

    def _insert(self, tenant_id: str, account_id: int, txn: NormalizedTransaction) -> bool:
        """Insert and commit one transaction.

        Returns:
            True if inserted, False if a concurrent sync stored it first.
        """
        try:
            self._transactions.create(
                user_id=tenant_id,
                account_id=account_id,
                amount=txn.amount,
                type=txn.type,
                description=txn.description,
                txn_date=txn.date,
                status=txn.status,
                category_id=self._engine.categorize(txn.description),
                source=SOURCE_BANK_SYNC,
                original_currency=txn.original_currency,
                memo=txn.memo,
            )
            self._session.commit()
            return True
        except IntegrityError as e:
            self._session.rollback()
            if self._is_duplicate(tenant_id, account_id, txn):
                return False
            raise PersistenceFailure(
                f"Could not save transaction on account {account_id}: {e}"
            ) from e
        except SQLAlchemyError as e:
            self._session.rollback()
            raise PersistenceFailure(
                f"Could not save transaction on account {account_id}: {e}"
            ) from e
