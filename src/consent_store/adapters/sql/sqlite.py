# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""SQLite async driver using aiosqlite with per-request connections."""

from __future__ import annotations

from typing import Any

import aiosqlite

from ...schema import Boolean, Date, Json, Number, String
from .base import SqlDriver

MEMORY_PATH = ":memory:"


class SqliteDriver(SqlDriver):
    """SQLite async driver with per-request connections.

    Uses :name placeholders natively. For a database file each acquire()
    opens a new connection and release() closes it, which keeps requests
    isolated. An in-memory database (":memory:") only exists while its
    connection is open, so that case shares one connection until shutdown().

    Values are stored with SQLite's loose typing: booleans as 0/1, dates as
    ISO 8601 text, JSON as serialized text (see EntityTransformer).
    """

    dialect = "sqlite"
    column_types = {
        String: "TEXT",
        Number: "REAL",
        Boolean: "INTEGER",
        Date: "TEXT",
        Json: "TEXT",
    }
    errors = (aiosqlite.Error,)

    def __init__(self, db_path: str):
        self.db_path = db_path or MEMORY_PATH
        self._shared: aiosqlite.Connection | None = None

    @property
    def is_memory(self) -> bool:
        return self.db_path == MEMORY_PATH

    async def _connect(self) -> aiosqlite.Connection:
        conn = await aiosqlite.connect(self.db_path)
        # LIKE is case-sensitive on the other backends
        await conn.execute("PRAGMA case_sensitive_like = ON")
        return conn

    async def acquire(self) -> aiosqlite.Connection:
        """Open new connection for request (shared one for :memory:)."""
        if not self.is_memory:
            return await self._connect()
        if self._shared is None:
            self._shared = await self._connect()
        return self._shared

    async def release(self, conn: aiosqlite.Connection) -> None:
        """Close connection (kept open for :memory:)."""
        if conn is not self._shared:
            await conn.close()

    async def shutdown(self) -> None:
        """Close the shared in-memory connection, if any."""
        if self._shared is not None:
            await self._shared.close()
            self._shared = None

    async def begin(self, conn: aiosqlite.Connection) -> None:
        """Open the write transaction explicitly so reads are covered too."""
        await conn.execute("BEGIN")

    async def commit(self, conn: aiosqlite.Connection) -> None:
        """Commit transaction on connection."""
        await conn.commit()

    async def rollback(self, conn: aiosqlite.Connection) -> None:
        """Rollback transaction on connection."""
        await conn.rollback()

    async def execute(
        self, conn: aiosqlite.Connection, query: str, params: dict[str, Any] | None = None
    ) -> int:
        """Execute query, return affected row count."""
        cursor = await conn.execute(query, params or {})
        return cursor.rowcount

    async def fetch_one(
        self, conn: aiosqlite.Connection, query: str, params: dict[str, Any] | None = None
    ) -> dict[str, Any] | None:
        """Execute query, return single row as dict or None."""
        async with conn.execute(query, params or {}) as cursor:
            row = await cursor.fetchone()
            if row is None:
                return None
            cols = [c[0] for c in cursor.description]
            return dict(zip(cols, row, strict=True))

    async def fetch_all(
        self, conn: aiosqlite.Connection, query: str, params: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        """Execute query, return all rows as list of dicts."""
        async with conn.execute(query, params or {}) as cursor:
            rows = await cursor.fetchall()
            cols = [c[0] for c in cursor.description]
            return [dict(zip(cols, row, strict=True)) for row in rows]


__all__ = ["SqliteDriver"]
