"""Session backends that load and persist whole sessions around a request."""

from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Dict, Optional

import asyncpg

from ..utils.time import utc_now
from .store import MappingSessionStore

logger = logging.getLogger(__name__)

CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS nocsrf_sessions (
    session_id TEXT PRIMARY KEY,
    data JSONB NOT NULL DEFAULT '{}'::jsonb,
    updated_at TIMESTAMPTZ NOT NULL
)
"""

UPSERT_SQL = """
INSERT INTO nocsrf_sessions (session_id, data, updated_at)
VALUES ($1, $2::jsonb, $3)
ON CONFLICT (session_id) DO UPDATE SET data = EXCLUDED.data, updated_at = EXCLUDED.updated_at
"""


class SessionBackend(ABC):
    """Abstract persistence for session data keyed by session id."""

    @abstractmethod
    async def load(self, session_id: str) -> MappingSessionStore:
        """Return a store over the session's data; unknown ids start empty."""

    @abstractmethod
    async def save(self, session_id: str, store: MappingSessionStore) -> None:
        """Persist the store's current data."""

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        """Drop the session."""

    async def close(self) -> None:
        """Close backend resources if needed."""


class InMemorySessionBackend(SessionBackend):
    """In-memory session backend fallback."""

    def __init__(self) -> None:
        self.sessions: Dict[str, Dict[str, str]] = {}

    async def load(self, session_id: str) -> MappingSessionStore:
        return MappingSessionStore(dict(self.sessions.get(session_id, {})))

    async def save(self, session_id: str, store: MappingSessionStore) -> None:
        self.sessions[session_id] = dict(store.data)

    async def delete(self, session_id: str) -> None:
        self.sessions.pop(session_id, None)


class PostgresSessionBackend(SessionBackend):
    """Postgres-backed session backend using asyncpg."""

    def __init__(
        self,
        dsn: Optional[str] = None,
        *,
        pool: Optional[asyncpg.Pool] = None,
        min_size: int = 1,
        max_size: int = 4,
    ) -> None:
        self.dsn = dsn
        self.pool = pool
        self._min_size = min_size
        self._max_size = max_size
        self._schema_ready = False

    async def connect(self) -> None:
        """Create the pool if one was not supplied and make sure the table exists."""
        if self.pool is None:
            if not self.dsn:
                raise ValueError("Either `dsn` or `pool` must be provided for PostgresSessionBackend.")
            self.pool = await asyncpg.create_pool(dsn=self.dsn, min_size=self._min_size, max_size=self._max_size)
        if not self._schema_ready:
            await self.ensure_schema()

    async def close(self) -> None:
        if self.pool is not None:
            await self.pool.close()
            self.pool = None
            self._schema_ready = False

    async def ensure_schema(self) -> None:
        if self.pool is None:
            # connect() creates the pool and then comes back here.
            await self.connect()
            return
        async with self.pool.acquire() as conn:
            await conn.execute(CREATE_TABLE_SQL)
        self._schema_ready = True

    async def load(self, session_id: str) -> MappingSessionStore:
        await self.connect()
        assert self.pool is not None
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow("SELECT data FROM nocsrf_sessions WHERE session_id=$1", session_id)
        if row is None:
            return MappingSessionStore({})
        data = row["data"]
        # asyncpg returns jsonb as text unless a codec is registered on the pool.
        if isinstance(data, str):
            data = json.loads(data)
        return MappingSessionStore(dict(data))

    async def save(self, session_id: str, store: MappingSessionStore) -> None:
        await self.connect()
        assert self.pool is not None
        payload = json.dumps(dict(store.data), sort_keys=True, separators=(",", ":"))
        async with self.pool.acquire() as conn:
            await conn.execute(UPSERT_SQL, session_id, payload, utc_now())

    async def delete(self, session_id: str) -> None:
        await self.connect()
        assert self.pool is not None
        async with self.pool.acquire() as conn:
            await conn.execute("DELETE FROM nocsrf_sessions WHERE session_id=$1", session_id)


def create_session_backend_from_env() -> SessionBackend:
    """Create Postgres backend if env configured, otherwise in-memory."""
    dsn = os.getenv("NOCSRF_PG_DSN") or os.getenv("DATABASE_URL")
    if dsn:
        logger.info("Using Postgres session backend")
        return PostgresSessionBackend(dsn=dsn)
    logger.info("Using in-memory session backend")
    return InMemorySessionBackend()
