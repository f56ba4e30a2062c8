"""BankConnection model for a tenant's link to one provider."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from finfamily_sync.db.base import Base, utc_now


class BankConnection(Base):
    """Stores provider credentials and the outcome of the latest sync."""

    __tablename__ = "bank_connections"
    __table_args__ = (
        UniqueConstraint("user_id", "provider", name="UQ_bank_connections_user_provider"),
        Index("IX_bank_connections_auto_sync", "auto_sync"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    provider: Mapped[str] = mapped_column(String(50), nullable=False)
    encrypted_credentials: Mapped[str | None] = mapped_column(
        Text, nullable=True
    )  # base64-encoded JSON
    auto_sync: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    last_sync: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending"
    )  # success, error, pending
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    accounts_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utc_now, onupdate=utc_now
    )

    def __repr__(self) -> str:
        return (
            f"<BankConnection(id={self.id}, user_id='{self.user_id}', "
            f"provider='{self.provider}', status='{self.status}')>"
        )
