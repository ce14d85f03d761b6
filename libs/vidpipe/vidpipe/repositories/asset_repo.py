from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import uuid4

from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from vidpipe.models.asset import Asset, AssetKind
from vidpipe.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class AssetRepository(BaseRepository):
    """Append-only asset catalog."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        super().__init__(pool)

    @staticmethod
    def _from_row(row: dict[str, object]) -> Asset:
        raw_created_at = row.get("created_at")
        created_at = raw_created_at if isinstance(raw_created_at, datetime) else _utcnow()
        return Asset(
            id=str(row["id"]),
            location=str(row["location"]),
            kind=AssetKind(str(row["kind"])),
            created_at=created_at,
        )

    async def insert(self, location: str, kind: AssetKind) -> Asset:
        asset_id = uuid4().hex
        async with self.connection() as conn:
            async with conn.cursor(row_factory=dict_row) as cur:
                await cur.execute(
                    """
                    INSERT INTO assets (id, location, kind, created_at)
                    VALUES (%s,%s,%s,%s)
                    RETURNING id, location, kind, created_at
                    """,
                    (asset_id, str(location), AssetKind(kind).value, _utcnow()),
                )
                row = await cur.fetchone()
            await conn.commit()
        if row is None:
            raise RuntimeError(f"asset insert returned no row for {location}")
        logger.debug("asset inserted id=%s kind=%s location=%s", asset_id, AssetKind(kind).value, location)
        return self._from_row(row)
