"""SQLAlchemy engine configuration."""

from typing import Any

from sqlalchemy import Engine, create_engine

from finfamily_sync.core.config import Settings, settings


def build_engine(config: Settings) -> Engine:
    """Create the engine for the configured store.

    SQLite (local runs) gets a thread-tolerant connection; server databases
    get a pre-pinged pool sized from settings.
    """
    if config.database_url.startswith("sqlite"):
        return create_engine(
            config.database_url, connect_args={"check_same_thread": False}
        )

    options: dict[str, Any] = {
        "pool_pre_ping": True,
        "pool_size": config.db_pool_size,
        "max_overflow": config.db_max_overflow,
    }
    return create_engine(config.database_url, **options)


engine = build_engine(settings)
