"""Business logic services."""

from finfamily_sync.services.account_reconciler import AccountReconciler
from finfamily_sync.services.batch_scheduler import (
    BatchScheduler,
    NightlyScheduler,
    SyncOutcome,
    run_batch,
)
from finfamily_sync.services.categorization_service import (
    CategoryRule,
    CategoryRuleEngine,
    categorize,
)
from finfamily_sync.services.credentials import decode_credentials, encode_credentials
from finfamily_sync.services.sync_orchestrator import (
    ConnectionRef,
    SyncOrchestrator,
    SyncResult,
)
from finfamily_sync.services.transaction_reconciler import (
    ReconcileCounts,
    TransactionReconciler,
)

__all__ = [
    # Categorization
    "CategoryRule",
    "CategoryRuleEngine",
    "categorize",
    # Credentials
    "decode_credentials",
    "encode_credentials",
    # Reconciliation
    "AccountReconciler",
    "ReconcileCounts",
    "TransactionReconciler",
    # Orchestration
    "ConnectionRef",
    "SyncOrchestrator",
    "SyncResult",
    # Batch
    "BatchScheduler",
    "NightlyScheduler",
    "SyncOutcome",
    "run_batch",
]
