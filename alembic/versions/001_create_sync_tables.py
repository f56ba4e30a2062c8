"""Create categories, accounts, transactions and bank_connections tables.

Revision ID: 001_create_sync_tables
Revises:
Create Date: 2026-10-17

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_create_sync_tables"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# (id, name, description) of the categories the keyword rules refer to
RULE_CATEGORIES: list[tuple[int, str, str]] = [
    (1, "Groceries", "סופרמרקט ומזון"),
    (2, "Fuel", "דלק"),
    (3, "Parking", "חניה"),
    (4, "Restaurants & Cafes", "מסעדות ובתי קפה"),
    (5, "Utilities & Home", "חשבונות הבית"),
    (6, "Communications", "תקשורת"),
    (7, "Insurance", "ביטוח"),
    (8, "Health", "בריאות"),
    (9, "Entertainment & Subscriptions", "בילוי ומנויים"),
    (10, "Salary & Income", "משכורת והכנסות"),
]


def upgrade() -> None:
    """Create all sync tables."""
    # Create categories table (ids fixed by the keyword rule table)
    categories = op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.bulk_insert(
        categories,
        [
            {"id": category_id, "name": name, "description": description}
            for category_id, name, description in RULE_CATEGORIES
        ],
    )

    # Create accounts table
    op.create_table(
        "accounts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("account_number", sa.String(100), nullable=False),
        sa.Column("balance", sa.Numeric(19, 4), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(3), nullable=False, server_default="ILS"),
        sa.Column(
            "account_type", sa.String(20), nullable=False, server_default="checking"
        ),
        sa.Column("last_sync", sa.DateTime(), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id", "account_number", name="UQ_accounts_user_number"
        ),
    )
    op.create_index("IX_accounts_user", "accounts", ["user_id"])

    # Create transactions table
    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("account_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Numeric(19, 4), nullable=False),
        sa.Column("type", sa.String(10), nullable=False),
        sa.Column("description", sa.String(500), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column(
            "status", sa.String(20), nullable=False, server_default="completed"
        ),
        sa.Column("category_id", sa.Integer(), nullable=True),
        sa.Column("source", sa.String(20), nullable=False, server_default="bank_sync"),
        sa.Column(
            "original_currency", sa.String(3), nullable=False, server_default="ILS"
        ),
        sa.Column("memo", sa.Text(), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"]),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"]),
        sa.UniqueConstraint(
            "user_id",
            "account_id",
            "amount",
            "date",
            "description",
            name="UQ_transactions_identity",
        ),
    )
    op.create_index("IX_transactions_date", "transactions", ["date"])
    op.create_index("IX_transactions_account", "transactions", ["account_id"])

    # Create bank_connections table
    op.create_table(
        "bank_connections",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("provider", sa.String(50), nullable=False),
        sa.Column("encrypted_credentials", sa.Text(), nullable=True),
        sa.Column("auto_sync", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("last_sync", sa.DateTime(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("accounts_count", sa.Integer(), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id", "provider", name="UQ_bank_connections_user_provider"
        ),
    )
    op.create_index(
        "IX_bank_connections_auto_sync", "bank_connections", ["auto_sync"]
    )


def downgrade() -> None:
    """Drop all sync tables."""
    op.drop_index("IX_bank_connections_auto_sync", table_name="bank_connections")
    op.drop_table("bank_connections")
    op.drop_index("IX_transactions_account", table_name="transactions")
    op.drop_index("IX_transactions_date", table_name="transactions")
    op.drop_table("transactions")
    op.drop_index("IX_accounts_user", table_name="accounts")
    op.drop_table("accounts")
    op.drop_table("categories")
