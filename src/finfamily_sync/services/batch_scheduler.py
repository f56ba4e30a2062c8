"""Batch sync over all eligible connections, on demand or nightly."""

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, time, timedelta
from typing import Any
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from finfamily_sync.db.session import session_scope
from finfamily_sync.repositories.bank_connection_repository import (
    BankConnectionRepository,
)
from finfamily_sync.services.sync_orchestrator import ConnectionRef, SyncOrchestrator

logger = logging.getLogger(__name__)


@dataclass
class SyncOutcome:
    """Result of syncing one connection within a batch."""

    provider: str
    tenant_id: str
    success: bool
    accounts_count: int | None = None
    saved_count: int | None = None
    skipped_count: int | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize in the shape the HTTP trigger reports."""
        data: dict[str, Any] = {
            "provider": self.provider,
            "userId": self.tenant_id,
            "success": self.success,
        }
        if self.success:
            data["accountsCount"] = self.accounts_count
            data["totalSaved"] = self.saved_count
            data["totalSkipped"] = self.skipped_count
        else:
            data["error"] = self.error
        return data


class BatchScheduler:
    """Syncs connections one after another.

    A failing connection is recorded in the outcome list and the batch moves
    on; no exception from a single connection leaves ``sync_all``.
    """

    def __init__(self, orchestrator: SyncOrchestrator) -> None:
        """Initialize the scheduler.

        Args:
            orchestrator: Orchestrator used for every connection.
        """
        self._orchestrator = orchestrator

    def sync_all(self, connections: Iterable[ConnectionRef]) -> list[SyncOutcome]:
        """Sync every connection sequentially.

        Args:
            connections: Connections to sync, in order.

        Returns:
            One SyncOutcome per connection, in the same order.
        """
        outcomes: list[SyncOutcome] = []
        for connection in connections:
            outcomes.append(self._sync_connection(connection))
        return outcomes

    def _sync_connection(self, connection: ConnectionRef) -> SyncOutcome:
        try:
            result = self._orchestrator.sync_connection(connection)
        except Exception as e:
            return SyncOutcome(
                provider=connection.provider_id,
                tenant_id=connection.tenant_id,
                success=False,
                error=str(e) or type(e).__name__,
            )
        return SyncOutcome(
            provider=connection.provider_id,
            tenant_id=connection.tenant_id,
            success=True,
            accounts_count=result.accounts_count,
            saved_count=result.saved_count,
            skipped_count=result.skipped_count,
        )


def load_eligible_connections(session: Session) -> list[ConnectionRef]:
    """Connections with auto sync enabled and stored credentials."""
    repo = BankConnectionRepository(session)
    return [ConnectionRef.from_model(c) for c in repo.get_auto_sync()]


def run_batch(session: Session, orchestrator: SyncOrchestrator) -> list[SyncOutcome]:
    """Load eligible connections and sync them all."""
    connections = load_eligible_connections(session)
    logger.info("Starting batch sync of %d connections", len(connections))
    outcomes = BatchScheduler(orchestrator).sync_all(connections)
    log_batch_summary(outcomes)
    return outcomes


def log_batch_summary(outcomes: list[SyncOutcome]) -> None:
    failed = [o for o in outcomes if not o.success]
    for outcome in failed:
        logger.warning(
            "Batch: %s for user %s failed: %s",
            outcome.provider,
            outcome.tenant_id,
            outcome.error,
        )
    logger.info(
        "Batch sync complete: %d succeeded, %d failed",
        len(outcomes) - len(failed),
        len(failed),
    )


# --- Nightly trigger ---


def next_run_after(now: datetime, run_at: time, tz: ZoneInfo) -> datetime:
    """Next local wall-clock ``run_at`` strictly after ``now``.

    Args:
        now: Timezone-aware current time.
        run_at: Local time of day to fire.
        tz: Zone the time of day is expressed in.

    Returns:
        Timezone-aware datetime in ``tz``.
    """
    local_now = now.astimezone(tz)
    candidate = datetime.combine(local_now.date(), run_at, tzinfo=tz)
    if candidate <= local_now:
        candidate = datetime.combine(local_now.date() + timedelta(days=1), run_at, tzinfo=tz)
    return candidate


class NightlyScheduler:
    """Background thread that runs a job once a day at a fixed local time.

    The job's return value is discarded. A failing run is logged and the
    next night's run still happens.
    """

    def __init__(
        self,
        job: Callable[[], object],
        hour: int = 2,
        minute: int = 0,
        timezone: str = "Asia/Jerusalem",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            job: Callable run at each firing.
            hour: Local hour to fire.
            minute: Local minute to fire.
            timezone: IANA zone of the firing time.
            clock: Timezone-aware clock (defaults to UTC now).
        """
        self._job = job
        self._run_at = time(hour=hour, minute=minute)
        self._tz = ZoneInfo(timezone)
        self._clock = clock or (lambda: datetime.now(UTC))
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def next_run(self) -> datetime:
        return next_run_after(self._clock(), self._run_at, self._tz)

    def run_once(self) -> bool:
        """Run the job now (public for testing).

        Returns:
            True if the job completed, False if it raised.
        """
        logger.info("Starting nightly auto-sync")
        try:
            self._job()
        except Exception:
            logger.exception("Nightly auto-sync failed")
            return False
        logger.info("Nightly auto-sync complete")
        return True

    def start(self) -> None:
        """Start the scheduler thread."""
        if self._thread is not None and self._thread.is_alive():
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run_loop,
            name="nightly-sync",
            daemon=True,
        )
        self._thread.start()
        logger.info(
            "Nightly sync scheduled at %s %s (next run %s)",
            self._run_at.strftime("%H:%M"),
            self._tz.key,
            self.next_run().isoformat(),
        )

    def stop(self, timeout: float = 30.0) -> None:
        """Signal stop and wait for the thread to finish."""
        self._stop_event.set()
        if self._thread is not None and self._thread.is_alive():
            self._thread.join(timeout=timeout)

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run_loop(self) -> None:
        while not self._stop_event.is_set():
            delay = (self.next_run() - self._clock()).total_seconds()
            if self._stop_event.wait(timeout=max(delay, 0)):
                break
            self.run_once()


def nightly_sync_job(
    session_factory: Callable[[], Session],
    orchestrator_factory: Callable[[Session], SyncOrchestrator],
) -> Callable[[], list[SyncOutcome]]:
    """Build the job the nightly scheduler runs: a fresh session per run."""

    def job() -> list[SyncOutcome]:
        with session_scope(session_factory) as session:
            return run_batch(session, orchestrator_factory(session))

    return job
