# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""PostgreSQL async driver using psycopg3 with connection pooling.

Uses connection-per-request model: acquire() gets from pool,
release() returns to pool. Each request gets isolated transaction.
"""

from __future__ import annotations

import asyncio
import re
from typing import Any

from ...errors import DatabaseConnectionError
from ...schema import Boolean, Date, Json, Number, String
from .base import SqlDriver


class PostgresDriver(SqlDriver):
    """PostgreSQL async driver with connection pooling.

    Uses :name placeholders converted to %(name)s. acquire() gets connection
    from pool, release() returns it. Each connection is isolated.

    Pool is initialized lazily on first acquire(). dict/list parameters are
    sent as JSONB.
    """

    dialect = "postgresql"
    column_types = {
        String: "TEXT",
        Number: "DOUBLE PRECISION",
        Boolean: "BOOLEAN",
        Date: "TIMESTAMPTZ",
        Json: "JSONB",
    }
    unlimited = "ALL"

    def __init__(self, dsn: str, pool_size: int = 10, connect_timeout: float = 10.0):
        self.dsn = dsn
        self.pool_size = pool_size
        self.connect_timeout = connect_timeout
        self._pool: Any = None

        # Verify psycopg is available at init time
        try:
            import psycopg
        except ImportError as e:
            raise ImportError(
                "PostgreSQL support requires psycopg. "
                "Install with: pip install consent-store[postgresql]"
            ) from e
        self.errors = (psycopg.Error,)

    def _convert_placeholders(self, query: str) -> str:
        """Convert :name placeholders to %(name)s for psycopg."""
        return re.sub(r"(?<!:):([a-zA-Z_][a-zA-Z0-9_]*)", r"%(\1)s", query)

    def _adapt_params(self, params: dict[str, Any] | None) -> dict[str, Any]:
        """Wrap JSON values (dict/list) for JSONB columns."""
        from psycopg.types.json import Jsonb

        return {
            key: Jsonb(value) if isinstance(value, (dict, list)) else value
            for key, value in (params or {}).items()
        }

    async def _ensure_pool(self) -> None:
        """Initialize connection pool if not already open."""
        if self._pool is not None:
            return

        from psycopg_pool import AsyncConnectionPool

        self._pool = AsyncConnectionPool(
            self.dsn,
            min_size=1,
            max_size=self.pool_size,
            open=False,
        )
        try:
            await asyncio.wait_for(
                self._pool.open(wait=True, timeout=self.connect_timeout),
                timeout=self.connect_timeout + 1,
            )
        except asyncio.TimeoutError:
            await self._pool.close()
            self._pool = None
            raise DatabaseConnectionError(
                f"PostgreSQL connection timed out after {self.connect_timeout}s. "
                "Check credentials and server availability."
            ) from None
        except Exception as e:
            await self._pool.close()
            self._pool = None
            raise DatabaseConnectionError(f"PostgreSQL connection failed: {e}") from e

    async def acquire(self) -> Any:
        """Acquire connection from pool."""
        await self._ensure_pool()
        return await self._pool.getconn()

    async def release(self, conn: Any) -> None:
        """Return connection to pool."""
        if self._pool:
            await self._pool.putconn(conn)

    async def shutdown(self) -> None:
        """Close connection pool (application shutdown)."""
        if self._pool:
            await self._pool.close()
            self._pool = None

    async def commit(self, conn: Any) -> None:
        """Commit transaction on connection."""
        await conn.commit()

    async def rollback(self, conn: Any) -> None:
        """Rollback transaction on connection."""
        await conn.rollback()

    async def execute(self, conn: Any, query: str, params: dict[str, Any] | None = None) -> int:
        """Execute query, return affected row count."""
        query = self._convert_placeholders(query)
        async with conn.cursor() as cur:
            await cur.execute(query, self._adapt_params(params))
            return cur.rowcount

    async def fetch_one(
        self, conn: Any, query: str, params: dict[str, Any] | None = None
    ) -> dict[str, Any] | None:
        """Execute query, return single row as dict or None."""
        from psycopg.rows import dict_row

        query = self._convert_placeholders(query)
        async with conn.cursor(row_factory=dict_row) as cur:
            await cur.execute(query, self._adapt_params(params))
            return await cur.fetchone()

    async def fetch_all(
        self, conn: Any, query: str, params: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        """Execute query, return all rows as list of dicts."""
        from psycopg.rows import dict_row

        query = self._convert_placeholders(query)
        async with conn.cursor(row_factory=dict_row) as cur:
            await cur.execute(query, self._adapt_params(params))
            return await cur.fetchall()


__all__ = ["PostgresDriver"]
