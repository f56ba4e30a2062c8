"""Registry of supported providers and the scraper strategy for each."""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from finfamily_sync.exceptions import UnsupportedProvider
from finfamily_sync.scrapers.base import BankScraper

BANK = "bank"
CREDIT = "credit"

_LOGOS = {BANK: "🏦", CREDIT: "💳"}


@dataclass(frozen=True)
class Provider:
    """A registered provider."""

    id: str
    company_id: str  # israeli-bank-scrapers CompanyTypes value
    name: str
    kind: str  # bank, credit
    scraper: BankScraper

    def to_catalog_entry(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "logo": _LOGOS[self.kind], "type": self.kind}


# (provider id, company id, display name, kind)
SUPPORTED_PROVIDERS: tuple[tuple[str, str, str, str], ...] = (
    ("hapoalim", "hapoalim", "בנק הפועלים", BANK),
    ("leumi", "leumi", "בנק לאומי", BANK),
    ("discount", "discount", "בנק דיסקונט", BANK),
    ("mizrahi", "mizrahi", "מזרחי טפחות", BANK),
    ("otsarHahayal", "otsarHahayal", "אוצר החייל", BANK),
    ("beinleumi", "beinleumi", "הבינלאומי", BANK),
    ("union", "union", "יובנק", BANK),
    ("massad", "massad", "בנק מסד", BANK),
    ("isracard", "isracard", "ישראכרט", CREDIT),
    ("cal", "visaCal", "כאל", CREDIT),
    ("max", "max", "מקס (לאומי קארד)", CREDIT),
    ("visaCal", "visaCal", "ויזה כאל", CREDIT),
    ("diners", "diners", "דיינרס", CREDIT),
    ("amex", "amex", "אמריקן אקספרס", CREDIT),
)


class ProviderRegistry:
    """Maps provider ids to their scrape strategy.

    New providers are added with ``register``; the orchestrator only ever
    calls ``resolve``.
    """

    def __init__(self, default_scraper: BankScraper | None = None) -> None:
        """Initialize an empty registry.

        Args:
            default_scraper: Strategy used when ``register`` is not given one.
        """
        self._default_scraper = default_scraper
        self._providers: dict[str, Provider] = {}

    def register(
        self,
        provider_id: str,
        company_id: str,
        name: str,
        kind: str,
        scraper: BankScraper | None = None,
    ) -> Provider:
        """Register (or replace) a provider.

        Raises:
            ValueError: If no scraper is given and the registry has no default.
        """
        strategy = scraper or self._default_scraper
        if strategy is None:
            raise ValueError(f"No scraper available for provider {provider_id}")
        if kind not in _LOGOS:
            raise ValueError(f"Unknown provider kind: {kind}")

        provider = Provider(
            id=provider_id, company_id=company_id, name=name, kind=kind, scraper=strategy
        )
        self._providers[provider_id] = provider
        return provider

    def resolve(self, provider_id: str) -> Provider:
        """Get a provider by id.

        Raises:
            UnsupportedProvider: If the id is not registered.
        """
        provider = self._providers.get(provider_id)
        if provider is None:
            raise UnsupportedProvider(provider_id)
        return provider

    def is_supported(self, provider_id: str) -> bool:
        return provider_id in self._providers

    def __iter__(self) -> Iterator[Provider]:
        return iter(self._providers.values())

    def __len__(self) -> int:
        return len(self._providers)

    def catalog(self) -> dict[str, list[dict[str, Any]]]:
        """Provider listing grouped for display."""
        return {
            "banks": [p.to_catalog_entry() for p in self if p.kind == BANK],
            "creditCards": [p.to_catalog_entry() for p in self if p.kind == CREDIT],
        }


def build_default_registry(scraper: BankScraper) -> ProviderRegistry:
    """Create a registry with every supported provider using one scraper."""
    registry = ProviderRegistry(default_scraper=scraper)
    for provider_id, company_id, name, kind in SUPPORTED_PROVIDERS:
        registry.register(provider_id, company_id, name, kind)
    return registry
