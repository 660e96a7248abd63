from __future__ import annotations

"""Create the profile tables in the ORM database (explicit DDL).

Only ``users`` and ``customer_profiles`` are touched; other tables that share
the database are neither created nor inspected.

Usage:
  python scripts/create_orm_tables.py --i-understand
  python scripts/create_orm_tables.py --check
"""

import argparse
import sys
from pathlib import Path


def _bootstrap_import_path() -> None:
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


_bootstrap_import_path()

from sqlalchemy import inspect  # noqa: E402

from customer_profiles.config import build_sqlalchemy_db_url, settings  # noqa: E402
from customer_profiles.database import Base, create_orm_engine, mask_db_url  # noqa: E402
from customer_profiles.models import CustomerProfile, User  # noqa: E402

# users first: customer_profiles.user_id references it.
PROFILE_TABLES = (User.__table__, CustomerProfile.__table__)


def missing_tables(engine) -> list[str]:
    existing = set(inspect(engine).get_table_names())
    return [table.name for table in PROFILE_TABLES if table.name not in existing]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Create the users/customer_profiles tables in the configured ORM DB (EXPLICIT action)."
    )
    parser.add_argument(
        "--db-url",
        default=None,
        help="Target DB URL (defaults to build_sqlalchemy_db_url(settings) from .env/env vars).",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only report which profile tables are missing; no DDL is run.",
    )
    parser.add_argument(
        "--i-understand",
        action="store_true",
        help="Required safety flag for DDL. Prevents accidental writes to shared DBs.",
    )
    args = parser.parse_args(argv)

    url = args.db_url or build_sqlalchemy_db_url(settings)
    print("orm_db_url:", mask_db_url(url))

    engine = create_orm_engine(url)
    try:
        missing = missing_tables(engine)
        present = [table.name for table in PROFILE_TABLES if table.name not in missing]
        print("present:", present)
        print("missing:", missing)

        if args.check:
            return 1 if missing else 0
        if not args.i_understand:
            print("Refusing to run DDL without --i-understand (safety).")
            return 2
        if not missing:
            print("nothing to create")
            return 0

        Base.metadata.create_all(bind=engine, tables=list(PROFILE_TABLES))
        print("created:", missing)
        return 0
    finally:
        engine.dispose()


if __name__ == "__main__":
    raise SystemExit(main())
