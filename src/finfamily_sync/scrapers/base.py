"""Provider payload types and the scrape capability protocol."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Protocol

DEFAULT_LOOKBACK_DAYS = 90

# Flags for the headless browser the scraper runner launches.
HARDENED_BROWSER_ARGS: tuple[str, ...] = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
)


def _to_decimal(value: Any) -> Decimal | None:
    if value is None or value == "":
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return None


@dataclass(frozen=True)
class ScrapeOptions:
    """Options passed to the scrape capability for one run."""

    company_id: str
    start_date: datetime
    combine_installments: bool = False
    show_browser: bool = False
    browser_args: tuple[str, ...] = HARDENED_BROWSER_ARGS

    @classmethod
    def for_lookback(
        cls,
        company_id: str,
        now: datetime,
        lookback_days: int = DEFAULT_LOOKBACK_DAYS,
    ) -> "ScrapeOptions":
        """Build options covering ``lookback_days`` before ``now``."""
        return cls(company_id=company_id, start_date=now - timedelta(days=lookback_days))

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JSON shape the scraper runner expects."""
        return {
            "companyId": self.company_id,
            "startDate": self.start_date.isoformat(),
            "combineInstallments": self.combine_installments,
            "showBrowser": self.show_browser,
            "args": list(self.browser_args),
        }


@dataclass
class ScrapedTransaction:
    """One transaction as reported by a provider."""

    date: str | date | datetime | None
    description: str | None = None
    charged_amount: Decimal | None = None
    original_amount: Decimal | None = None
    original_currency: str | None = None
    status: str | None = None
    memo: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScrapedTransaction":
        return cls(
            date=data.get("date"),
            description=data.get("description"),
            charged_amount=_to_decimal(data.get("chargedAmount")),
            original_amount=_to_decimal(data.get("originalAmount")),
            original_currency=data.get("originalCurrency"),
            status=data.get("status"),
            memo=data.get("memo"),
        )


@dataclass
class ScrapedAccount:
    """One account snapshot with its recent transactions."""

    account_number: str | None = None
    balance: Decimal | None = None
    txns: list[ScrapedTransaction] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScrapedAccount":
        account_number = data.get("accountNumber")
        return cls(
            account_number=str(account_number) if account_number else None,
            balance=_to_decimal(data.get("balance")),
            txns=[ScrapedTransaction.from_dict(t) for t in data.get("txns") or []],
        )


@dataclass
class ScrapeResult:
    """Outcome of one scrape. Failure is reported in-band, not raised."""

    success: bool
    accounts: list[ScrapedAccount] = field(default_factory=list)
    error_type: str | None = None
    error_message: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScrapeResult":
        return cls(
            success=bool(data.get("success")),
            accounts=[ScrapedAccount.from_dict(a) for a in data.get("accounts") or []],
            error_type=data.get("errorType"),
            error_message=data.get("errorMessage"),
        )


class BankScraper(Protocol):
    """Scrape capability for one or more providers."""

    def scrape(
        self, options: ScrapeOptions, credentials: dict[str, Any]
    ) -> ScrapeResult:
        """Log in to the provider and return its accounts and transactions.

        Args:
            options: Company id, lookback start and browser flags.
            credentials: Provider-specific login fields.

        Returns:
            ScrapeResult. ``success`` is False when the provider rejected the
            login or the scrape broke; ``error_message`` says why.
        """
        ...
