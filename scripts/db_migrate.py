from __future__ import annotations

import argparse
import os
from pathlib import Path

import psycopg

from vidpipe.config import Settings
from vidpipe.exceptions import ConfigurationError
from vidpipe.repositories.migrations import (
    applied_migrations,
    apply_migrations,
    load_migrations,
    pending_migrations,
)

_DEFAULT_DIR = Path(__file__).resolve().parents[1] / "infra" / "migrations"


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create or upgrade the VidPipe asset catalog schema.")
    parser.add_argument(
        "--migrations-dir",
        default=str(_DEFAULT_DIR),
        help="Directory containing *.sql migrations (default: infra/migrations in the repo)",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="Override database url (otherwise DATABASE_URL or POSTGRES_* settings)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List pending migrations without applying them",
    )
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    try:
        migrations = load_migrations(args.migrations_dir)
    except ConfigurationError as exc:
        raise SystemExit(exc.message) from None

    database_url = args.database_url or os.environ.get("DATABASE_URL") or Settings().database_url
    # autocommit: each migration commits in its own `conn.transaction()` block.
    with psycopg.connect(database_url, autocommit=True) as conn:
        try:
            pending = pending_migrations(migrations, applied_migrations(conn))
        except ConfigurationError as exc:
            raise SystemExit(exc.message) from None
        if not pending:
            print("asset catalog schema is up to date")
            return
        if args.dry_run:
            for migration in pending:
                print(f"pending {migration.name}")
            return
        for name in apply_migrations(conn, pending):
            print(f"applied {name}")


if __name__ == "__main__":
    main()
