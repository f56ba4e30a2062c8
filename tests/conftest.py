"""Pytest configuration and fixtures."""

import os
from collections.abc import Generator
from datetime import datetime
from decimal import Decimal
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker

from finfamily_sync.db.base import Base, import_models
from finfamily_sync.main import app
from finfamily_sync.scrapers.base import (
    ScrapedAccount,
    ScrapedTransaction,
    ScrapeOptions,
    ScrapeResult,
)
from finfamily_sync.scrapers.registry import ProviderRegistry, build_default_registry
from finfamily_sync.scripts.seed_categories import seed_categories

FIXED_NOW = datetime(2024, 1, 10, 12, 0, 0)

# ============================================================================
# Helper functions
# ============================================================================


def get_test_database_url() -> str | None:
    """Get database URL from environment for integration tests.

    Returns None if DATABASE_URL is not set, indicating PostgreSQL is not available.
    """
    return os.environ.get("DATABASE_URL")


def make_txn(
    date: str = "2024-01-05T00:00:00.000Z",
    description: str | None = "SuperMarket",
    charged: str | int | None = -120,
    original: str | int | None = None,
    **kwargs: Any,
) -> ScrapedTransaction:
    """Build a provider transaction."""
    return ScrapedTransaction(
        date=date,
        description=description,
        charged_amount=Decimal(str(charged)) if charged is not None else None,
        original_amount=Decimal(str(original)) if original is not None else None,
        **kwargs,
    )


def make_account(
    account_number: str | None = "12-345-678",
    balance: str | int | None = 1000,
    txns: list[ScrapedTransaction] | None = None,
) -> ScrapedAccount:
    """Build a provider account snapshot."""
    return ScrapedAccount(
        account_number=account_number,
        balance=Decimal(str(balance)) if balance is not None else None,
        txns=txns or [],
    )


class FakeScraper:
    """Scrape capability double returning canned results and recording calls."""

    def __init__(self, result: ScrapeResult | None = None) -> None:
        self.result = result or ScrapeResult(success=True, accounts=[])
        self.calls: list[tuple[ScrapeOptions, dict[str, Any]]] = []
        self.error: Exception | None = None

    def scrape(
        self, options: ScrapeOptions, credentials: dict[str, Any]
    ) -> ScrapeResult:
        self.calls.append((options, credentials))
        if self.error is not None:
            raise self.error
        return self.result


# ============================================================================
# FastAPI test client
# ============================================================================


@pytest.fixture
def client() -> TestClient:
    """Create a test client."""
    return TestClient(app)


# ============================================================================
# Unit test fixtures (SQLite in-memory)
# ============================================================================


@pytest.fixture
def in_memory_db() -> Generator[Session, None, None]:
    """Create an in-memory SQLite database for unit testing.

    This fixture is fast and doesn't require external dependencies.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def setup_sqlite(dbapi_connection, connection_record):  # type: ignore[no-untyped-def]
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    import_models()
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(in_memory_db: Session) -> Session:
    """In-memory session with the rule-table categories seeded."""
    seed_categories(in_memory_db)
    return in_memory_db


# ============================================================================
# Scrape capability doubles
# ============================================================================


@pytest.fixture
def txn_factory():  # type: ignore[no-untyped-def]
    """Factory for provider transactions."""
    return make_txn


@pytest.fixture
def account_factory():  # type: ignore[no-untyped-def]
    """Factory for provider account snapshots."""
    return make_account


@pytest.fixture
def scraper_factory() -> type[FakeScraper]:
    """Factory for scrape capability doubles."""
    return FakeScraper


@pytest.fixture
def fake_scraper() -> FakeScraper:
    """A scraper returning one account with one grocery expense."""
    return FakeScraper(
        ScrapeResult(success=True, accounts=[make_account(txns=[make_txn()])])
    )


@pytest.fixture
def registry(fake_scraper: FakeScraper) -> ProviderRegistry:
    """Registry of all supported providers backed by the fake scraper."""
    return build_default_registry(fake_scraper)


# ============================================================================
# Integration test fixtures (PostgreSQL)
# ============================================================================


@pytest.fixture(scope="session")
def postgres_engine():
    """Create a PostgreSQL engine for integration tests."""
    url = get_test_database_url()
    if not url:
        pytest.skip("DATABASE_URL not set - skipping PostgreSQL integration tests")

    engine = create_engine(url)

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception as e:
        pytest.skip(f"Could not connect to PostgreSQL: {e}")

    import_models()
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture
def postgres_session(postgres_engine) -> Generator[Session, None, None]:
    """PostgreSQL session; sync tables are emptied after each test."""
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=postgres_engine
    )
    session = TestingSessionLocal()
    seed_categories(session)

    try:
        yield session
    finally:
        session.rollback()
        session.close()

        with postgres_engine.connect() as conn:
            conn.execute(text("DELETE FROM transactions"))
            conn.execute(text("DELETE FROM accounts"))
            conn.execute(text("DELETE FROM bank_connections"))
            conn.commit()


# ============================================================================
# Skip markers for conditional test execution
# ============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list) -> None:
    """Automatically mark tests based on their location."""
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "models" in str(item.fspath) or "repositories" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
