"""Construction of the sync pipeline from application settings."""

from functools import lru_cache

from sqlalchemy.orm import Session

from finfamily_sync.core.config import Settings, settings
from finfamily_sync.scrapers.node_scraper import NodeBankScraper
from finfamily_sync.scrapers.registry import ProviderRegistry, build_default_registry
from finfamily_sync.services.sync_orchestrator import SyncOrchestrator


def build_registry(config: Settings) -> ProviderRegistry:
    """Registry of all supported providers backed by the Node scraper runner."""
    scraper = NodeBankScraper(
        config.scraper_command, timeout_seconds=config.scraper_timeout_seconds
    )
    return build_default_registry(scraper)


@lru_cache(maxsize=1)
def get_registry() -> ProviderRegistry:
    """Process-wide registry built from the module settings."""
    return build_registry(settings)


def build_orchestrator(
    session: Session,
    registry: ProviderRegistry | None = None,
    config: Settings = settings,
) -> SyncOrchestrator:
    """Orchestrator bound to a session."""
    return SyncOrchestrator(
        session,
        registry or get_registry(),
        lookback_days=config.sync_lookback_days,
    )
