# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Base driver class for async SQL backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar


class SqlDriver(ABC):
    """Abstract base class for async SQL drivers.

    A driver owns the connection model and statement execution for one
    database engine; SqlAdapter builds the statements.

    Connection model:
    - acquire(): Returns a connection (from pool or new file handle)
    - release(conn): Returns connection to pool or closes it
    - shutdown(): Closes connection pool (application shutdown only)
    - begin/commit/rollback(conn): Transaction control on a connection

    Statements use `:name` placeholders; drivers whose engine expects a
    different style convert them before execution.

    Subclasses set `dialect`, `column_types` (logical field type -> SQL
    type), `errors` (driver exceptions raised by failing statements) and
    `unlimited` (LIMIT value meaning "no limit").
    """

    dialect: ClassVar[str]
    column_types: ClassVar[dict[str, str]]
    unlimited: ClassVar[str] = "-1"
    errors: tuple[type[Exception], ...] = ()

    @abstractmethod
    async def acquire(self) -> Any:
        """Acquire a connection."""
        ...

    @abstractmethod
    async def release(self, conn: Any) -> None:
        """Release a connection."""
        ...

    @abstractmethod
    async def shutdown(self) -> None:
        """Close all resources (application shutdown)."""
        ...

    async def begin(self, conn: Any) -> None:
        """Start an explicit transaction on connection."""
        pass

    @abstractmethod
    async def commit(self, conn: Any) -> None:
        """Commit transaction on connection."""
        ...

    @abstractmethod
    async def rollback(self, conn: Any) -> None:
        """Rollback transaction on connection."""
        ...

    @abstractmethod
    async def execute(
        self, conn: Any, query: str, params: dict[str, Any] | None = None
    ) -> int:
        """Execute query on connection, return affected row count."""
        ...

    @abstractmethod
    async def fetch_one(
        self, conn: Any, query: str, params: dict[str, Any] | None = None
    ) -> dict[str, Any] | None:
        """Execute query on connection, return single row as dict or None."""
        ...

    @abstractmethod
    async def fetch_all(
        self, conn: Any, query: str, params: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        """Execute query on connection, return all rows as list of dicts."""
        ...

    # -------------------------------------------------------------------------
    # SQL Helpers
    # -------------------------------------------------------------------------

    def sql_name(self, name: str) -> str:
        """Return quoted SQL identifier for column/table name."""
        return '"' + name.replace('"', '""') + '"'

    def column_sql(self, name: str, field_type: str) -> str:
        return f"{self.sql_name(name)} {self.column_types[field_type]}"

    def limit_clause(self, limit: int | None, offset: int = 0) -> str:
        """Return LIMIT/OFFSET clause ("" when neither applies)."""
        if limit is None and not offset:
            return ""
        clause = f" LIMIT {self.unlimited if limit is None else int(limit)}"
        if offset:
            clause += f" OFFSET {int(offset)}"
        return clause


__all__ = ["SqlDriver"]
