"""Seed the categories referenced by the keyword rule table."""

import argparse
import sys

from sqlalchemy.orm import Session

from finfamily_sync.core.config import settings
from finfamily_sync.core.logging_config import configure_logging
from finfamily_sync.db.session import session_scope
from finfamily_sync.repositories.category_repository import CategoryRepository
from finfamily_sync.services.categorization_service import CATEGORY_NAMES

# Hebrew labels shown to users, keyed by category id
CATEGORY_DESCRIPTIONS: dict[int, str] = {
    1: "סופרמרקט ומזון",
    2: "דלק",
    3: "חניה",
    4: "מסעדות ובתי קפה",
    5: "חשבונות הבית",
    6: "תקשורת",
    7: "ביטוח",
    8: "בריאות",
    9: "בילוי ומנויים",
    10: "משכורת והכנסות",
}


def seed_categories(db: Session, verbose: bool = False) -> int:
    """Create every rule-table category that is missing.

    Existing rows keep their id and are renamed to match.

    Args:
        db: Database session; committed on success.
        verbose: Print one line per category.

    Returns:
        Number of categories created.
    """
    repo = CategoryRepository(db)
    created_count = 0

    for category_id, name in sorted(CATEGORY_NAMES.items()):
        _, created = repo.ensure(
            category_id, name, description=CATEGORY_DESCRIPTIONS.get(category_id)
        )
        if created:
            created_count += 1
        if verbose:
            action = "Created" if created else "Exists"
            print(f"  {action}: {category_id} {name}")

    db.commit()
    return created_count


def main() -> int:
    """CLI entrypoint for seed categories script."""
    parser = argparse.ArgumentParser(
        description="Seed the database with the transaction categories."
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only print the summary line",
    )

    args = parser.parse_args()
    configure_logging(settings.log_level)

    try:
        with session_scope() as db:
            created = seed_categories(db, verbose=not args.quiet)
    except Exception as e:
        print(f"Error: {e}")
        return 1

    print(f"\nTotal categories created: {created}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
