"""Run the all-connections sync from the command line."""

import argparse
import sys

from finfamily_sync.core.config import settings
from finfamily_sync.core.logging_config import configure_logging
from finfamily_sync.db.session import session_scope
from finfamily_sync.services.batch_scheduler import (
    SyncOutcome,
    load_eligible_connections,
    run_batch,
)
from finfamily_sync.services.factory import build_orchestrator


def print_outcomes(outcomes: list[SyncOutcome]) -> None:
    """Print a per-connection outcome table."""
    print()
    print("=" * 60)
    print("=== Bank Sync Report ===")
    print()
    for outcome in outcomes:
        if outcome.success:
            print(
                f"  OK    {outcome.provider:<14} {outcome.tenant_id}: "
                f"{outcome.accounts_count} accounts, {outcome.saved_count} saved, "
                f"{outcome.skipped_count} skipped"
            )
        else:
            print(f"  FAIL  {outcome.provider:<14} {outcome.tenant_id}: {outcome.error}")

    failed = sum(1 for o in outcomes if not o.success)
    print()
    print(f"Connections: {len(outcomes)}  Succeeded: {len(outcomes) - failed}  Failed: {failed}")


def main() -> int:
    """CLI entrypoint for the batch sync script."""
    parser = argparse.ArgumentParser(
        description="Sync every connection with auto sync enabled."
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List eligible connections without syncing",
    )

    args = parser.parse_args()
    configure_logging(settings.log_level)

    try:
        with session_scope() as db:
            if args.dry_run:
                connections = load_eligible_connections(db)
                print(f"{len(connections)} eligible connections:")
                for connection in connections:
                    print(f"  {connection.provider_id:<14} {connection.tenant_id}")
                return 0

            outcomes = run_batch(db, build_orchestrator(db))
    except Exception as e:
        print(f"Error: {e}")
        return 1

    print_outcomes(outcomes)
    return 0 if all(o.success for o in outcomes) else 2


if __name__ == "__main__":
    sys.exit(main())
