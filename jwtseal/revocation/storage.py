"""Persistent revocation store backed by PostgreSQL."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Any, Optional, Union

import asyncpg

from ..utils.time import Clock, Duration, from_timestamp, system_clock, to_seconds
from .blocklist import Blocklist
from .identifiers import IdentifierStrategy, entry_expiry, token_identifier

logger = logging.getLogger(__name__)

CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS revoked_tokens (
    token_id TEXT PRIMARY KEY,
    expires_at TIMESTAMPTZ NOT NULL
)
"""

CREATE_INDEX_SQL = "CREATE INDEX IF NOT EXISTS revoked_tokens_expires_at_idx ON revoked_tokens (expires_at)"


def _affected_rows(status: str) -> int:
    """Parse the row count from an asyncpg command status such as ``DELETE 3``."""
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (ValueError, AttributeError):
        return 0


class PostgresBlocklist:
    """Asynchronous blocklist using ``asyncpg``.

    Mirrors :class:`Blocklist`; every operation except :meth:`identify` is a
    coroutine. Use it with :meth:`TokenVerifier.verify_async`.
    """

    def __init__(
        self,
        dsn: Optional[str] = None,
        *,
        pool: Optional[asyncpg.Pool] = None,
        strategy: IdentifierStrategy = IdentifierStrategy.SIGNATURE,
        clock: Clock = system_clock,
        min_size: int = 1,
        max_size: int = 4,
        grace: Duration = 0,
    ) -> None:
        self.dsn = dsn
        self.pool = pool
        self.strategy = IdentifierStrategy(strategy)
        self.clock = clock
        self.grace = to_seconds(grace)
        if self.grace < 0:
            raise ValueError("grace must not be negative")
        self._min_size = min_size
        self._max_size = max_size

    async def connect(self) -> None:
        """Initialize a connection pool if one was not supplied."""
        if self.pool is not None:
            return
        if not self.dsn:
            raise ValueError("Either `dsn` or `pool` must be provided for PostgresBlocklist.")
        self.pool = await asyncpg.create_pool(dsn=self.dsn, min_size=self._min_size, max_size=self._max_size)

    async def close(self) -> None:
        if self.pool is not None:
            await self.pool.close()
            self.pool = None

    async def ensure_schema(self) -> None:
        await self.connect()
        assert self.pool is not None
        async with self.pool.acquire() as conn:
            await conn.execute(CREATE_TABLE_SQL)
            await conn.execute(CREATE_INDEX_SQL)

    def identify(self, token: Any) -> str:
        return token_identifier(token, self.strategy)

    def _now(self) -> datetime:
        return from_timestamp(self.clock())

    async def invalidate(self, token_id: str, expiry: int) -> None:
        await self.connect()
        assert self.pool is not None
        async with self.pool.acquire() as conn:
            await conn.execute(
                """
                INSERT INTO revoked_tokens (token_id, expires_at)
                VALUES ($1, $2)
                ON CONFLICT (token_id) DO UPDATE SET expires_at = EXCLUDED.expires_at
                """,
                token_id,
                from_timestamp(expiry),
            )
        logger.debug("invalidated %s until %s", token_id, expiry)

    async def invalidate_token(self, token: Any, expiry: Optional[int] = None) -> str:
        token_id = self.identify(token)
        await self.invalidate(token_id, entry_expiry(token, expiry, self.grace))
        return token_id

    async def is_blocked(self, token_id: str) -> bool:
        await self.connect()
        assert self.pool is not None
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT 1 FROM revoked_tokens WHERE token_id=$1 AND expires_at > $2",
                token_id,
                self._now(),
            )
            return row is not None

    async def remove(self, token_id: str) -> bool:
        await self.connect()
        assert self.pool is not None
        async with self.pool.acquire() as conn:
            status = await conn.execute("DELETE FROM revoked_tokens WHERE token_id=$1", token_id)
            return _affected_rows(status) > 0

    async def sweep(self) -> int:
        await self.connect()
        assert self.pool is not None
        async with self.pool.acquire() as conn:
            status = await conn.execute("DELETE FROM revoked_tokens WHERE expires_at <= $1", self._now())
            return _affected_rows(status)

    async def count(self) -> int:
        await self.connect()
        assert self.pool is not None
        async with self.pool.acquire() as conn:
            return int(await conn.fetchval("SELECT count(*) FROM revoked_tokens"))

    async def clear(self) -> None:
        await self.connect()
        assert self.pool is not None
        async with self.pool.acquire() as conn:
            await conn.execute("DELETE FROM revoked_tokens")


def create_blocklist_from_env(**kwargs: Any) -> Union[Blocklist, PostgresBlocklist]:
    """Create a Postgres-backed blocklist if a DSN is configured, otherwise in-memory.

    ``JWTSEAL_REVOCATION_GRACE_SECONDS`` sets ``grace`` unless passed explicitly.
    """
    grace = os.getenv("JWTSEAL_REVOCATION_GRACE_SECONDS")
    if grace and "grace" not in kwargs:
        kwargs["grace"] = int(grace)
    dsn = os.getenv("JWTSEAL_PG_DSN") or os.getenv("DATABASE_URL")
    if dsn:
        return PostgresBlocklist(dsn=dsn, **kwargs)
    return Blocklist(**kwargs)
