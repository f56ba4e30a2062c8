"""Repository layer for data access patterns."""

from finfamily_sync.repositories.account_repository import AccountRepository
from finfamily_sync.repositories.bank_connection_repository import (
    BankConnectionNotFoundError,
    BankConnectionRepository,
)
from finfamily_sync.repositories.category_repository import (
    CategoryNotFoundError,
    CategoryRepository,
)
from finfamily_sync.repositories.transaction_repository import TransactionRepository

__all__ = [
    "AccountRepository",
    "BankConnectionNotFoundError",
    "BankConnectionRepository",
    "CategoryNotFoundError",
    "CategoryRepository",
    "TransactionRepository",
]
