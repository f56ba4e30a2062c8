"""Scrape capability: provider payload types, backends and registry."""

from finfamily_sync.scrapers.base import (
    BankScraper,
    ScrapedAccount,
    ScrapedTransaction,
    ScrapeOptions,
    ScrapeResult,
)
from finfamily_sync.scrapers.node_scraper import NodeBankScraper
from finfamily_sync.scrapers.registry import (
    Provider,
    ProviderRegistry,
    build_default_registry,
)

__all__ = [
    "BankScraper",
    "NodeBankScraper",
    "Provider",
    "ProviderRegistry",
    "ScrapeOptions",
    "ScrapeResult",
    "ScrapedAccount",
    "ScrapedTransaction",
    "build_default_registry",
]
