# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""SQL backends: drivers for SQLite and PostgreSQL plus the SQL adapter.

Components:
    SqlDriver: Abstract base class defining the driver interface.
    SqliteDriver: SQLite driver using aiosqlite with per-request connections.
    PostgresDriver: PostgreSQL driver using psycopg3 with connection pooling.
    SqlAdapter: Adapter contract rendered as SQL statements.
    get_driver: Create the driver for a SqlBackend.
    sql_adapter: Adapter factory bound to a driver.

Example:
    Usage via the factory::

        driver = get_driver(SqlBackend("sqlite", "/data/consent.db"))
        adapter = sql_adapter(driver)(options)
        await adapter.create_schema()
        async def register(tx):
            subject = await tx.create(model="subject", data={})
            await tx.create(model="consent", data={"subject_id": subject["id"], ...})
        await adapter.transaction(callback=register)
        # COMMIT on success, ROLLBACK on exception

    Application shutdown::

        await adapter.shutdown()  # Close the pool (PostgreSQL)

Note:
    PostgreSQL requires psycopg: `pip install consent-store[postgresql]`.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING

from ...schema import get_schema
from .adapter import SqlAdapter, transactions_unsupported
from .base import SqlDriver
from .query import WhereBuilder
from .sqlite import SqliteDriver

if TYPE_CHECKING:
    from ...schema import EntitySchema
    from ...store_config import SqlBackend, StoreOptions

__all__ = [
    "DRIVERS",
    "SqlAdapter",
    "SqlDriver",
    "SqliteDriver",
    "WhereBuilder",
    "get_driver",
    "sql_adapter",
    "transactions_unsupported",
]

# Driver registry
DRIVERS: dict[str, type[SqlDriver]] = {
    "sqlite": SqliteDriver,
}


def get_driver(backend: SqlBackend) -> SqlDriver:
    """Create the driver for a SqlBackend.

    Raises:
        ImportError: If postgresql requested but psycopg not installed.
    """
    if backend.dialect == "postgresql":
        # Lazy import to avoid ImportError when psycopg not installed
        from .postgresql import PostgresDriver

        DRIVERS.setdefault("postgresql", PostgresDriver)
        return PostgresDriver(backend.connection)

    return DRIVERS[backend.dialect](backend.connection)  # type: ignore[call-arg]


def sql_adapter(driver: SqlDriver) -> Callable[..., SqlAdapter]:
    """Adapter factory bound to a driver.

    Returns a function (options, schema=None) -> SqlAdapter; the schema is
    built from options when not given.
    """

    def create_adapter(
        options: StoreOptions, schema: Mapping[str, EntitySchema] | None = None
    ) -> SqlAdapter:
        return SqlAdapter(driver, schema if schema is not None else get_schema(options), options)

    return create_adapter
