"""Integration tests for the sync pipeline against PostgreSQL."""

from datetime import date, datetime
from decimal import Decimal

import pytest
from sqlalchemy.orm import Session

from finfamily_sync.repositories.account_repository import AccountRepository
from finfamily_sync.repositories.bank_connection_repository import (
    BankConnectionRepository,
)
from finfamily_sync.repositories.transaction_repository import TransactionRepository
from finfamily_sync.scrapers.base import ScrapeResult
from finfamily_sync.scrapers.registry import build_default_registry
from finfamily_sync.services.batch_scheduler import run_batch
from finfamily_sync.services.credentials import encode_credentials
from finfamily_sync.services.sync_orchestrator import ConnectionLocks, SyncOrchestrator

NOW = datetime(2024, 1, 10, 12, 0, 0)


def make_orchestrator(session: Session, scraper) -> SyncOrchestrator:  # type: ignore[no-untyped-def]
    return SyncOrchestrator(
        session, build_default_registry(scraper), clock=lambda: NOW, locks=ConnectionLocks()
    )


@pytest.mark.integration
class TestSyncPipelineIntegration:
    """End-to-end sync with a real store."""

    def test_sync_twice_is_idempotent(
        self, postgres_session: Session, scraper_factory, account_factory, txn_factory
    ) -> None:
        scraper = scraper_factory(
            ScrapeResult(
                success=True,
                accounts=[
                    account_factory(
                        "12-345",
                        balance="2500.10",
                        txns=[
                            txn_factory("2024-01-05T00:00:00.000Z", "SuperMarket", -120),
                            txn_factory("2024-01-05T00:00:00.000Z", "Cafe Landwer", -120),
                            txn_factory("2024-01-01T00:00:00.000Z", "משכורת", "12000.00"),
                        ],
                    )
                ],
            )
        )
        orchestrator = make_orchestrator(postgres_session, scraper)

        first = orchestrator.sync_one("pg-user", "leumi", {"username": "u"})
        second = orchestrator.sync_one("pg-user", "leumi", {"username": "u"})

        assert (first.saved_count, first.skipped_count) == (3, 0)
        assert (second.saved_count, second.skipped_count) == (0, 3)

        (account,) = AccountRepository(postgres_session).list_for_user("pg-user")
        assert account.balance == Decimal("2500.1000")
        stored = TransactionRepository(postgres_session).list_for_account(account.id)
        by_description = {t.description: t for t in stored}
        assert by_description["SuperMarket"].category_id == 1
        assert by_description["SuperMarket"].date == date(2024, 1, 5)
        assert by_description["Cafe Landwer"].category_id == 4
        assert by_description["משכורת"].type == "income"

    def test_batch_records_status(self, postgres_session: Session, fake_scraper) -> None:
        repo = BankConnectionRepository(postgres_session)
        repo.create(
            "pg-user",
            "max",
            encrypted_credentials=encode_credentials({"username": "u"}),
            auto_sync=True,
        )
        postgres_session.commit()

        (outcome,) = run_batch(postgres_session, make_orchestrator(postgres_session, fake_scraper))

        assert outcome.success is True
        connection = repo.get("pg-user", "max")
        assert connection.status == "success"
        assert connection.accounts_count == 1
