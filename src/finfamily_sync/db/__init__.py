"""Database module for FinFamily Sync."""

from finfamily_sync.db.base import Base
from finfamily_sync.db.engine import engine
from finfamily_sync.db.session import SessionLocal, get_db

__all__ = ["Base", "engine", "SessionLocal", "get_db"]
