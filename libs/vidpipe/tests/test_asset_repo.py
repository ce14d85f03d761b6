from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone

import pytest

from vidpipe.models.asset import AssetKind
from vidpipe.repositories import AssetRepository


class _FakeCursor:
    def __init__(self, conn: "_FakeConn") -> None:
        self._conn = conn

    async def execute(self, sql: str, params: tuple[object, ...] | None = None) -> None:
        self._conn.executed.append((sql, params))

    async def fetchone(self) -> dict[str, object] | None:
        if not self._conn.executed:
            return None
        _sql, params = self._conn.executed[-1]
        assert params is not None
        asset_id, location, kind, created_at = params
        return {"id": asset_id, "location": location, "kind": kind, "created_at": created_at}


class _FakeConn:
    def __init__(self) -> None:
        self.executed: list[tuple[str, tuple[object, ...] | None]] = []
        self.commits = 0

    @asynccontextmanager
    async def cursor(self, *args, **kwargs):  # noqa: ANN001
        yield _FakeCursor(self)

    async def commit(self) -> None:
        self.commits += 1


class _FakePool:
    def __init__(self) -> None:
        self.conn = _FakeConn()

    @asynccontextmanager
    async def connection(self):
        yield self.conn


@pytest.mark.asyncio
async def test_insert_writes_one_row_and_commits() -> None:
    pool = _FakePool()
    repo = AssetRepository(pool)

    asset = await repo.insert("/data/videos/trimmed_1.mp4", AssetKind.TRIMMED)

    assert asset.location == "/data/videos/trimmed_1.mp4"
    assert asset.kind == AssetKind.TRIMMED
    assert asset.created_at.tzinfo is not None
    assert len(asset.id) == 32
    assert pool.conn.commits == 1
    sql, params = pool.conn.executed[0]
    assert "INSERT INTO assets" in sql
    assert params is not None and params[2] == "trimmed"


@pytest.mark.asyncio
async def test_insert_generates_distinct_ids() -> None:
    repo = AssetRepository(_FakePool())
    a = await repo.insert("/a.mp4", AssetKind.UPLOADED)
    b = await repo.insert("/b.mp4", AssetKind.UPLOADED)
    assert a.id != b.id


def test_from_row_tolerates_missing_timestamp() -> None:
    asset = AssetRepository._from_row({"id": "x", "location": "/a.mp4", "kind": "merged"})
    assert asset.kind == AssetKind.MERGED
    assert asset.created_at <= datetime.now(tz=timezone.utc)
