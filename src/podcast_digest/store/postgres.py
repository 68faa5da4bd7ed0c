from __future__ import annotations

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from typing import Any

import asyncpg

from podcast_digest.errors import StoreError
from podcast_digest.models import SavedSummary

from .base import SummaryStore

logger = logging.getLogger(__name__)

_DB_ERRORS = (OSError, asyncpg.PostgresError, asyncpg.InterfaceError)

SCHEMA = """
CREATE TABLE IF NOT EXISTS saved_summaries (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    episode_id TEXT NOT NULL,
    podcast_id TEXT,
    podcast_title TEXT,
    title TEXT,
    description TEXT,
    pub_date TEXT,
    audio TEXT,
    episode_image TEXT,
    content TEXT NOT NULL,
    key_points JSONB NOT NULL DEFAULT '[]'::jsonb,
    tags TEXT[] NOT NULL DEFAULT '{}',
    sentiment TEXT NOT NULL DEFAULT 'neutral'
        CHECK (sentiment IN ('positive', 'neutral', 'negative')),
    summary_type TEXT NOT NULL DEFAULT 'auto'
        CHECK (summary_type IN ('auto', 'manual')),
    status TEXT NOT NULL DEFAULT 'pending'
        CHECK (status IN ('pending', 'completed', 'failed')),
    created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
);

CREATE UNIQUE INDEX IF NOT EXISTS saved_summaries_user_episode_uq
    ON saved_summaries (user_id, episode_id);
CREATE INDEX IF NOT EXISTS saved_summaries_user_idx ON saved_summaries (user_id);
CREATE INDEX IF NOT EXISTS saved_summaries_status_idx ON saved_summaries (status);
CREATE INDEX IF NOT EXISTS saved_summaries_created_idx ON saved_summaries (created_at DESC);
"""

_COLUMNS = (
    "id, user_id, episode_id, podcast_id, podcast_title, title, description, pub_date, "
    "audio, episode_image, content, key_points::text AS key_points, tags, sentiment, "
    "summary_type, status, created_at, updated_at"
)


class Database:
    """Lazily created asyncpg pool.

    The pool is created on first use and reused afterwards. If creation
    fails nothing is cached, so the next call tries again. Close it once on
    shutdown.
    """

    def __init__(self, dsn: str, min_size: int = 1, max_size: int = 10):
        self.dsn = dsn
        self.min_size = min_size
        self.max_size = max_size
        self._pool: asyncpg.Pool | None = None
        self._lock = asyncio.Lock()

    async def pool(self) -> asyncpg.Pool:
        if self._pool is not None:
            return self._pool
        async with self._lock:
            if self._pool is None:
                logger.info("Connecting to summary database")
                self._pool = await asyncpg.create_pool(
                    dsn=self.dsn, min_size=self.min_size, max_size=self.max_size
                )
        return self._pool

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None


def _row_to_summary(row: Any) -> SavedSummary:
    return SavedSummary(
        id=row["id"],
        user_id=row["user_id"],
        episode_id=row["episode_id"],
        podcast_id=row["podcast_id"],
        podcast_title=row["podcast_title"],
        title=row["title"],
        description=row["description"],
        pub_date=row["pub_date"],
        audio=row["audio"],
        episode_image=row["episode_image"],
        content=row["content"],
        key_points=json.loads(row["key_points"] or "[]"),
        tags=list(row["tags"] or []),
        sentiment=row["sentiment"],
        summary_type=row["summary_type"],
        status=row["status"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class PostgresSummaryStore(SummaryStore):
    def __init__(self, db: Database):
        self.db = db
        self._schema_ready = False

    async def _pool(self) -> asyncpg.Pool:
        try:
            pool = await self.db.pool()
            if not self._schema_ready:
                async with pool.acquire() as con:
                    await con.execute(SCHEMA)
                self._schema_ready = True
            return pool
        except _DB_ERRORS as e:
            raise StoreError(f"Summary database unavailable: {e}") from e

    @asynccontextmanager
    async def _connection(self, action: str):
        pool = await self._pool()
        try:
            async with pool.acquire() as con:
                yield con
        except _DB_ERRORS as e:
            logger.warning("Summary store failed to %s: %s", action, e)
            raise StoreError(f"Failed to {action}: {e}") from e

    async def find_by_episode(self, episode_id: str, user_id: str | None = None) -> SavedSummary | None:
        if user_id is None:
            q = f"SELECT {_COLUMNS} FROM saved_summaries WHERE episode_id=$1 ORDER BY created_at DESC LIMIT 1"
            args: tuple = (episode_id,)
        else:
            q = f"SELECT {_COLUMNS} FROM saved_summaries WHERE episode_id=$1 AND user_id=$2"
            args = (episode_id, user_id)
        async with self._connection("look up summary") as con:
            row = await con.fetchrow(q, *args)
        return _row_to_summary(row) if row else None

    async def _insert(self, summary: SavedSummary) -> SavedSummary:
        q = f"""
        INSERT INTO saved_summaries(
            id, user_id, episode_id, podcast_id, podcast_title, title, description,
            pub_date, audio, episode_image, content, key_points, tags, sentiment,
            summary_type, status, created_at, updated_at
        )
        VALUES($1,$2,$3,$4,$5,$6,$7,$8,$9,$10,$11,$12::jsonb,$13,$14,$15,$16,$17,$18)
        RETURNING {_COLUMNS}
        """
        async with self._connection("save summary") as con:
            try:
                row = await con.fetchrow(
                    q,
                    summary.id,
                    summary.user_id,
                    summary.episode_id,
                    summary.podcast_id,
                    summary.podcast_title,
                    summary.title,
                    summary.description,
                    summary.pub_date,
                    summary.audio,
                    summary.episode_image,
                    summary.content,
                    json.dumps(summary.key_points, ensure_ascii=False),
                    summary.tags,
                    summary.sentiment,
                    summary.summary_type,
                    summary.status,
                    summary.created_at,
                    summary.updated_at,
                )
            except asyncpg.exceptions.UniqueViolationError as e:
                # lost the race against a concurrent save of the same episode
                logger.warning("Concurrent save for episode %s rejected by unique index", summary.episode_id)
                raise StoreError("Failed to save summary") from e
        return _row_to_summary(row)

    async def delete_one(self, user_id: str, summary_id: str) -> bool:
        async with self._connection("delete summary") as con:
            status = await con.execute(
                "DELETE FROM saved_summaries WHERE id=$1 AND user_id=$2", summary_id, user_id
            )
        # asyncpg returns the command tag, e.g. "DELETE 1"
        return status.split()[-1] == "1"

    async def delete_all_for_user(self, user_id: str) -> int:
        async with self._connection("delete summaries") as con:
            status = await con.execute("DELETE FROM saved_summaries WHERE user_id=$1", user_id)
        return int(status.split()[-1])

    async def list_for_user(self, user_id: str) -> list[SavedSummary]:
        async with self._connection("list summaries") as con:
            rows = await con.fetch(
                f"SELECT {_COLUMNS} FROM saved_summaries WHERE user_id=$1 ORDER BY created_at DESC",
                user_id,
            )
        return [_row_to_summary(r) for r in rows]

    async def aclose(self) -> None:
        await self.db.close()
