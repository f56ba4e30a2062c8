"""Exceptions raised by the sync pipeline.

Account-level faults (``IntegrityFault``, ``PersistenceFailure`` raised while
reconciling one account) stop only that account. Connection-level faults
(``UnsupportedProvider``, ``CredentialDecodeFailure``, ``ScrapeFailure``)
stop the connection and are recorded as its sync status. The batch loop
catches everything.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from finfamily_sync.services.transaction_reconciler import ReconcileCounts


class SyncError(Exception):
    """Base class for all sync pipeline errors."""

    pass


class UnsupportedProvider(SyncError):
    """Raised when a provider id has no registered scrape capability."""

    def __init__(self, provider_id: str) -> None:
        self.provider_id = provider_id
        super().__init__(f"Unsupported provider: {provider_id}")


class ScrapeFailure(SyncError):
    """Raised when the scrape capability reports failure."""

    pass


class PersistenceFailure(SyncError):
    """Raised when a store read or write fails.

    When raised part-way through an account's transactions, ``counts`` holds
    what was already reconciled (and committed) on that account.
    """

    counts: "ReconcileCounts | None" = None


class IntegrityFault(SyncError):
    """Raised when a composite-key lookup returns more than one row."""

    pass


class CredentialDecodeFailure(SyncError):
    """Raised when an encoded credential blob cannot be decoded."""

    pass
