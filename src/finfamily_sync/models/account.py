"""Account model for a tenant's bank or credit-card account."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Index, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from finfamily_sync.db.base import Base, utc_now


class Account(Base):
    """Stores accounts discovered by bank sync, one per (user, account number)."""

    __tablename__ = "accounts"
    __table_args__ = (
        UniqueConstraint("user_id", "account_number", name="UQ_accounts_user_number"),
        Index("IX_accounts_user", "user_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    account_number: Mapped[str] = mapped_column(String(100), nullable=False)
    balance: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="ILS")
    account_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="checking"
    )
    last_sync: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utc_now, onupdate=utc_now
    )

    # Relationships
    transactions: Mapped[list["Transaction"]] = relationship(
        "Transaction",
        back_populates="account",
    )

    def __repr__(self) -> str:
        return (
            f"<Account(id={self.id}, user_id='{self.user_id}', "
            f"account_number='{self.account_number}')>"
        )


# Import at bottom to avoid circular imports
from finfamily_sync.models.transaction import Transaction  # noqa: E402
