"""Supabase Postgres access with RLS context.

Every call gets a connection inside a transaction where the JWT claims that
``auth.uid()`` reads are set via ``set_config(..., true)`` and the role is
switched to ``authenticated``, so Row-Level Security policies on
``cycle_entries`` see the requesting user.

Uses ``asyncpg`` for direct database access; the transaction-local settings
disappear when the connection is returned to the pool.
"""

from __future__ import annotations

import json
import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

import asyncpg

from cyclecast.config import Settings, get_settings

logger = logging.getLogger("cyclecast.db")

# Module-level connection pool, initialized once at app startup
_pool: asyncpg.Pool | None = None


async def init_pool(settings: Settings | None = None) -> asyncpg.Pool:
    """Create the asyncpg connection pool. Call once at app startup."""
    global _pool
    s = settings or get_settings()
    _pool = await asyncpg.create_pool(
        s.supabase_db_url,
        min_size=2,
        max_size=10,
        command_timeout=30,
    )
    logger.info("Database pool initialized (min=2, max=10)")
    return _pool


async def close_pool() -> None:
    """Drain the pool. Call at app shutdown."""
    global _pool
    if _pool:
        await _pool.close()
        _pool = None
        logger.info("Database pool closed")


def get_pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("Database pool not initialized; call init_pool() first")
    return _pool


@asynccontextmanager
async def get_connection(
    user_id: uuid.UUID | None = None,
) -> AsyncGenerator[asyncpg.Connection, None]:
    """Acquire a connection with the RLS identity set.

    Usage::

        async with get_connection(user_id=user.user_id) as conn:
            rows = await conn.fetch("SELECT * FROM cycle_entries")
    """
    pool = get_pool()
    async with pool.acquire() as conn:
        async with conn.transaction():
            if user_id:
                claims = json.dumps({"sub": str(user_id), "role": "authenticated"})
                await conn.execute(
                    "SELECT set_config('request.jwt.claims', $1, true)", claims
                )
                await conn.execute("SET LOCAL ROLE authenticated")
            yield conn


async def execute(query: str, *args: Any, user_id: uuid.UUID | None = None) -> str:
    """Execute a single statement with RLS context and return status."""
    async with get_connection(user_id=user_id) as conn:
        return await conn.execute(query, *args)


async def fetch(
    query: str, *args: Any, user_id: uuid.UUID | None = None
) -> list[asyncpg.Record]:
    """Fetch rows with RLS context."""
    async with get_connection(user_id=user_id) as conn:
        return await conn.fetch(query, *args)


async def fetchrow(
    query: str, *args: Any, user_id: uuid.UUID | None = None
) -> asyncpg.Record | None:
    """Fetch a single row with RLS context."""
    async with get_connection(user_id=user_id) as conn:
        return await conn.fetchrow(query, *args)
