"""FinFamily bank and credit-card sync service."""

__version__ = "0.1.0"
