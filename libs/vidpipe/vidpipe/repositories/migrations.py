"""Schema migrations for the asset catalog.

Migrations are `*.sql` files applied in file-name order. Each applied file is
recorded with a checksum of its contents; editing a file after it was applied
is reported instead of silently ignored.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

import psycopg

from vidpipe.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_CREATE_LEDGER = """
CREATE TABLE IF NOT EXISTS schema_migrations (
  name TEXT PRIMARY KEY,
  checksum TEXT NOT NULL,
  applied_at TIMESTAMPTZ NOT NULL
)
"""


@dataclass(frozen=True)
class Migration:
    name: str
    sql: str

    @property
    def checksum(self) -> str:
        return hashlib.sha256(self.sql.encode("utf-8")).hexdigest()


def load_migrations(directory: str | Path) -> list[Migration]:
    root = Path(directory)
    if not root.is_dir():
        raise ConfigurationError(f"migrations dir not found: {root}")
    files = sorted(p for p in root.glob("*.sql") if p.is_file())
    if not files:
        raise ConfigurationError(f"no .sql migrations found in {root}")
    return [Migration(name=p.name, sql=p.read_text(encoding="utf-8")) for p in files]


def pending_migrations(migrations: list[Migration], applied: dict[str, str]) -> list[Migration]:
    """Return migrations not yet applied, failing on edited ones."""
    changed = [m.name for m in migrations if m.name in applied and applied[m.name] != m.checksum]
    if changed:
        raise ConfigurationError(f"applied migrations were modified: {', '.join(changed)}")
    return [m for m in migrations if m.name not in applied]


def applied_migrations(conn: psycopg.Connection) -> dict[str, str]:
    conn.execute(_CREATE_LEDGER)
    rows = conn.execute("SELECT name, checksum FROM schema_migrations").fetchall()
    return {str(name): str(checksum) for name, checksum in rows}


def apply_migrations(conn: psycopg.Connection, migrations: list[Migration]) -> list[str]:
    """Apply `migrations`, each in its own transaction. Returns applied names."""
    done: list[str] = []
    for migration in migrations:
        with conn.transaction():
            conn.execute(migration.sql)
            conn.execute(
                "INSERT INTO schema_migrations (name, checksum, applied_at) VALUES (%s, %s, %s)",
                (migration.name, migration.checksum, datetime.now(tz=timezone.utc)),
            )
        logger.info("applied migration %s", migration.name)
        done.append(migration.name)
    return done
