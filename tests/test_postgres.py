"""Tests for the PostgreSQL link store.

Error translation is checked against a stand-in connection. The tests in
TestPostgresIntegration need a real server and run only when
LINKGATE_TEST_DATABASE_URL is set.
"""

import asyncio
import os
import random
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import asyncpg
import pytest

from linkgate.allocator import CodeAllocator
from linkgate.database.postgres import PostgresLinkStore
from linkgate.errors import (
    CodeConflict,
    DuplicateCodeError,
    NotFound,
    StoreError,
    StoreTimeout,
    StoreUnavailable,
)
from linkgate.resolver import RedirectResolver
from linkgate.service import LinkService

TEST_DATABASE_URL = os.getenv("LINKGATE_TEST_DATABASE_URL")

ROW = {
    "code": "abc123",
    "target_url": "https://example.com",
    "clicks": 3,
    "last_accessed": datetime(2024, 1, 2, tzinfo=timezone.utc),
    "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
}


class FakeConnection:
    """Records queries and returns a canned row or raises."""

    def __init__(self, row=None, error=None):
        self.row = row
        self.error = error
        self.queries = []

    async def _answer(self, query, args, result):
        self.queries.append((query, args))
        if self.error:
            raise self.error
        return result

    async def fetchrow(self, query, *args):
        return await self._answer(query, args, self.row)

    async def fetchval(self, query, *args):
        return await self._answer(query, args, self.row["target_url"] if self.row else None)

    async def fetch(self, query, *args):
        return await self._answer(query, args, [self.row] if self.row else [])

    async def execute(self, query, *args):
        return await self._answer(query, args, "OK")


class FakePool:
    """Hands out one connection and tracks whether it was returned."""

    def __init__(self, conn, schema_error=None):
        self.conn = conn
        self.schema_error = schema_error
        self.released = 0
        self.closed = False

    async def acquire(self, timeout=None):
        return self.conn

    async def release(self, conn):
        self.released += 1

    async def execute(self, query, *args):
        if self.schema_error:
            raise self.schema_error
        return "OK"

    async def close(self):
        self.closed = True


def make_store(conn, logger):
    store = PostgresLinkStore(dsn="postgresql://u:p@localhost/test", logger=logger)
    store._get_pool = AsyncMock(return_value=FakePool(conn))
    return store


def unique_violation(constraint):
    error = asyncpg.UniqueViolationError("duplicate key value violates unique constraint")
    error.constraint_name = constraint
    return error


@pytest.mark.asyncio
class TestPostgresErrorTranslation:
    """Driver errors become the core's error kinds."""

    async def test_insert_returns_link(self, logger):
        conn = FakeConnection(row=ROW)
        store = make_store(conn, logger)

        link = await store.insert_link("abc123", "https://example.com", ROW["created_at"])

        assert link.code == "abc123"
        assert link.clicks == 3
        query, args = conn.queries[0]
        assert "INSERT INTO links" in query
        assert args[:2] == ("abc123", "https://example.com")

    async def test_naive_created_at_is_treated_as_utc(self, logger):
        conn = FakeConnection(row=ROW)
        store = make_store(conn, logger)

        await store.insert_link("abc123", "https://example.com", datetime(2024, 1, 1))

        assert conn.queries[0][1][2].tzinfo == timezone.utc

    async def test_code_unique_violation_is_duplicate(self, logger):
        store = make_store(FakeConnection(error=unique_violation("links_code_key")), logger)

        with pytest.raises(DuplicateCodeError) as exc_info:
            await store.insert_link("abc123", "https://example.com", ROW["created_at"])

        assert exc_info.value.code == "abc123"

    async def test_other_unique_violation_is_store_error(self, logger):
        store = make_store(FakeConnection(error=unique_violation("links_pkey")), logger)

        with pytest.raises(StoreError) as exc_info:
            await store.insert_link("abc123", "https://example.com", ROW["created_at"])

        assert not isinstance(exc_info.value, DuplicateCodeError)

    async def test_timeout_is_store_timeout(self, logger):
        store = make_store(FakeConnection(error=asyncio.TimeoutError()), logger)

        with pytest.raises(StoreTimeout):
            await store.record_visit("abc123", datetime.now(timezone.utc))

    async def test_connection_failure_is_store_error(self, logger):
        store = make_store(FakeConnection(error=ConnectionRefusedError("refused")), logger)

        with pytest.raises(StoreError) as exc_info:
            await store.get_target_url("abc123")

        assert not isinstance(exc_info.value, StoreUnavailable)

    async def test_pool_creation_failure_is_unavailable(self, logger):
        store = PostgresLinkStore(dsn="postgresql://u:p@localhost/test", logger=logger)
        store._get_pool = AsyncMock(side_effect=OSError("no route to host"))

        with pytest.raises(StoreUnavailable):
            await store.code_exists("abc123")

    async def test_acquire_timeout_is_unavailable(self, logger):
        conn = FakeConnection(row=ROW)
        store = make_store(conn, logger)
        pool = store._get_pool.return_value
        pool.acquire = AsyncMock(side_effect=asyncio.TimeoutError())

        with pytest.raises(StoreUnavailable):
            await store.record_visit("abc123", datetime.now(timezone.utc))

        assert conn.queries == []
        assert pool.released == 0

    async def test_connection_released_after_error(self, logger):
        store = make_store(FakeConnection(error=asyncio.TimeoutError()), logger)

        with pytest.raises(StoreTimeout):
            await store.get_link("abc123")

        assert store._get_pool.return_value.released == 1

    async def test_record_visit_is_single_atomic_update(self, logger):
        conn = FakeConnection(row=ROW)
        store = make_store(conn, logger)

        link = await store.record_visit("abc123", datetime.now(timezone.utc))

        assert link.clicks == 3
        assert len(conn.queries) == 1
        query = conn.queries[0][0]
        assert "UPDATE links" in query
        assert "clicks = clicks + 1" in query

    async def test_record_visit_unknown_code(self, logger):
        store = make_store(FakeConnection(row=None), logger)

        assert await store.record_visit("zzzzzz", datetime.now(timezone.utc)) is None

    async def test_delete(self, logger):
        assert await make_store(FakeConnection(row={"code": "abc123"}), logger).delete_link("abc123")
        assert not await make_store(FakeConnection(row=None), logger).delete_link("abc123")

    async def test_list_links(self, logger):
        conn = FakeConnection(row=ROW)
        store = make_store(conn, logger)

        links = await store.list_links()

        assert [link.code for link in links] == ["abc123"]
        assert "ORDER BY created_at DESC" in conn.queries[0][0]
        assert conn.queries[0][1] == (None,)

    async def test_health_check_failure(self, logger):
        store = make_store(FakeConnection(error=OSError("down")), logger)

        assert await store.health_check() is False


@pytest.mark.asyncio
class TestPoolSetup:
    """Pools are created lazily and never left open when setup fails."""

    async def test_schema_failure_closes_pool(self, logger, monkeypatch):
        pools = []

        async def create_pool(**kwargs):
            pool = FakePool(
                FakeConnection(row=ROW),
                schema_error=asyncpg.InsufficientPrivilegeError("permission denied for schema public"),
            )
            pools.append(pool)
            return pool

        monkeypatch.setattr(asyncpg, "create_pool", create_pool)
        store = PostgresLinkStore(
            dsn="postgresql://u:p@localhost/test", create_tables=True, logger=logger
        )

        for _ in range(3):
            with pytest.raises(StoreUnavailable):
                await store.get_link("abc123")

        assert len(pools) == 3
        assert all(pool.closed for pool in pools)
        assert store._pools == {}

    async def test_pool_is_reused(self, logger, monkeypatch):
        pools = []

        async def create_pool(**kwargs):
            pool = FakePool(FakeConnection(row=ROW))
            pools.append(pool)
            return pool

        monkeypatch.setattr(asyncpg, "create_pool", create_pool)
        store = PostgresLinkStore(
            dsn="postgresql://u:p@localhost/test", create_tables=True, logger=logger
        )

        await store.get_link("abc123")
        await store.get_link("abc123")

        assert len(pools) == 1
        assert not pools[0].closed

        await store.close()
        assert pools[0].closed


@pytest.fixture
async def pg_store(logger):
    if not TEST_DATABASE_URL:
        pytest.skip("LINKGATE_TEST_DATABASE_URL not set")
    store = PostgresLinkStore(dsn=TEST_DATABASE_URL, create_tables=True, logger=logger)
    created = []

    yield store, created

    for code in created:
        await store.delete_link(code)
    await store.close()


def random_code():
    return "t" + "".join(random.choices("abcdefghijklmnopqrstuvwxyz0123456789", k=7))


@pytest.mark.asyncio
class TestPostgresIntegration:
    """Guarantees that rest on the database itself."""

    async def test_racing_requested_code(self, pg_store, logger):
        store, created = pg_store
        code = random_code()
        created.append(code)
        allocator = CodeAllocator(store=store, logger=logger)

        results = await asyncio.gather(
            *[allocator.allocate(f"https://example.com/{i}", code) for i in range(10)],
            return_exceptions=True,
        )

        assert sum(not isinstance(r, Exception) for r in results) == 1
        assert sum(isinstance(r, CodeConflict) for r in results) == 9

    async def test_concurrent_visits(self, pg_store, logger):
        store, created = pg_store
        code = random_code()
        created.append(code)
        await store.insert_link(code, "https://example.com/pg", datetime.now(timezone.utc))
        resolver = RedirectResolver(store=store, logger=logger)

        await asyncio.gather(*[resolver.resolve(code) for _ in range(50)])

        link = await store.get_link(code)
        assert link.clicks == 50
        assert link.last_accessed is not None

    async def test_lifecycle(self, pg_store, logger):
        store, created = pg_store
        service = LinkService(store=store, logger=logger)

        link = await service.create_link("https://example.com/path")
        created.append(link.code)
        assert await service.redirect(link.code) == "https://example.com/path"
        assert (await service.get_link(link.code)).clicks == 1

        assert await service.remove(link.code)
        with pytest.raises(NotFound):
            await service.redirect(link.code)
