"""Transaction model for storing synced ledger entries."""

from datetime import date as date_type
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finfamily_sync.db.base import Base, utc_now


class Transaction(Base):
    """Stores financial transactions imported from providers.

    (user_id, account_id, amount, date, description) identifies a transaction;
    a second row with the same tuple is a duplicate.
    """

    __tablename__ = "transactions"
    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "account_id",
            "amount",
            "date",
            "description",
            name="UQ_transactions_identity",
        ),
        Index("IX_transactions_date", "date"),
        Index("IX_transactions_account", "account_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    account_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("accounts.id"), nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(19, 4), nullable=False)
    type: Mapped[str] = mapped_column(String(10), nullable=False)  # expense, income
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    date: Mapped[date_type] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="completed")
    category_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("categories.id"), nullable=True
    )  # NULL = awaiting manual classification
    source: Mapped[str] = mapped_column(String(20), nullable=False, default="bank_sync")
    original_currency: Mapped[str] = mapped_column(
        String(3), nullable=False, default="ILS"
    )
    memo: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utc_now
    )

    # Relationships
    account: Mapped["Account"] = relationship("Account", back_populates="transactions")
    category: Mapped["Category | None"] = relationship(
        "Category", back_populates="transactions"
    )

    def __repr__(self) -> str:
        return (
            f"<Transaction(id={self.id}, date={self.date}, amount={self.amount}, "
            f"type='{self.type}')>"
        )


# Import at bottom to avoid circular imports
from finfamily_sync.models.account import Account  # noqa: E402
from finfamily_sync.models.category import Category  # noqa: E402
