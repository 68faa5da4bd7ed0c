"""Tests for podcast_digest.store.postgres error handling, with a fake asyncpg pool."""

import asyncio
from contextlib import asynccontextmanager

import asyncpg
import pytest

from podcast_digest.errors import StoreError
from podcast_digest.models import SummarizationResult
from podcast_digest.store.postgres import SCHEMA, PostgresSummaryStore


def run(coro):
    return asyncio.run(coro)


class _Conn:
    def __init__(self, error: BaseException):
        self.error = error
        self.executed: list[str] = []

    async def execute(self, query, *args):
        if query == SCHEMA:
            self.executed.append(query)
            return "CREATE TABLE"
        raise self.error

    async def fetch(self, query, *args):
        raise self.error

    async def fetchrow(self, query, *args):
        raise self.error


class _Pool:
    def __init__(self, conn: _Conn):
        self.conn = conn
        self.released = 0

    @asynccontextmanager
    async def acquire(self):
        try:
            yield self.conn
        finally:
            self.released += 1


class _Db:
    def __init__(self, pool=None, error: BaseException | None = None):
        self._pool = pool
        self.error = error

    async def pool(self):
        if self.error is not None:
            raise self.error
        return self._pool

    async def close(self) -> None:
        return None


def _store(error: BaseException) -> tuple[PostgresSummaryStore, _Pool]:
    pool = _Pool(_Conn(error))
    return PostgresSummaryStore(_Db(pool)), pool


class TestQueryFailures:
    def test_dropped_connection_on_list(self) -> None:
        store, pool = _store(ConnectionResetError("reset by peer"))
        with pytest.raises(StoreError, match="Failed to list summaries"):
            run(store.list_for_user("u1"))
        assert pool.released == 2  # schema bootstrap and the query

    def test_interface_error_on_lookup(self) -> None:
        store, _ = _store(asyncpg.InterfaceError("connection is closed"))
        with pytest.raises(StoreError, match="Failed to look up summary"):
            run(store.find_by_episode("e1", user_id="u1"))

    def test_postgres_error_on_delete(self) -> None:
        store, _ = _store(asyncpg.PostgresError("server closed the connection"))
        with pytest.raises(StoreError):
            run(store.delete_one("u1", "s1"))
        with pytest.raises(StoreError):
            run(store.delete_all_for_user("u1"))

    def test_insert_failure_through_create(self) -> None:
        store, _ = _store(OSError("network unreachable"))
        with pytest.raises(StoreError):
            run(store.create("u1", "e1", SummarizationResult(summary="S")))

    def test_pool_creation_failure(self) -> None:
        store = PostgresSummaryStore(_Db(error=OSError("connection refused")))
        with pytest.raises(StoreError, match="unavailable"):
            run(store.list_for_user("u1"))
