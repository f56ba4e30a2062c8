"""SQLAlchemy models for the FinFamily sync service."""

from finfamily_sync.models.account import Account
from finfamily_sync.models.bank_connection import BankConnection
from finfamily_sync.models.category import Category
from finfamily_sync.models.transaction import Transaction

__all__ = [
    "Account",
    "BankConnection",
    "Category",
    "Transaction",
]
