"""SQLAlchemy declarative base."""

from datetime import UTC, datetime

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def utc_now() -> datetime:
    """Current UTC time as a naive datetime, the form DateTime columns store."""
    return datetime.now(UTC).replace(tzinfo=None)


# Import all models here for Alembic to discover them
def import_models() -> None:
    """Import all models to register them with SQLAlchemy metadata."""
    from finfamily_sync.models import (  # noqa: F401
        Account,
        BankConnection,
        Category,
        Transaction,
    )
