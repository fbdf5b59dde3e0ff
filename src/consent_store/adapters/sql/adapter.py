# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""SQL adapter: the adapter contract on top of an async SQL driver.

Connection model:
- Outside a transaction, every operation acquires its own connection,
  commits on success, rolls back on exception and releases it.
- transaction(callback) holds one connection for the whole callback and
  hands the callback a new SqlAdapter bound to it.

Driver exceptions are wrapped in DatabaseQueryError (failed statements)
or DatabaseConnectionError (connection could not be acquired). Any other
non-store exception raised while running a statement becomes
UnknownStoreError.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping, Sequence
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, TypeVar

from ...errors import (
    ConsentStoreError,
    DatabaseConnectionError,
    DatabaseQueryError,
    UnknownStoreError,
)
from ..base import DEFAULT_LIMIT, Adapter, SortBy
from ..transformer import ID_FIELD, EntityTransformer
from .query import WhereBuilder

if TYPE_CHECKING:
    from ...schema import EntitySchema
    from ...store_config import StoreOptions
    from ..where import Where
    from .base import SqlDriver

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Messages drivers use when the engine has no transaction support
NO_TRANSACTION_MESSAGES = ("transactions are not supported", "no transaction support")


def transactions_unsupported(error: BaseException) -> bool:
    message = str(error).lower()
    return any(text in message for text in NO_TRANSACTION_MESSAGES)


class SqlAdapter(Adapter):
    """Adapter over a SqlDriver (SQLite, PostgreSQL).

    Args:
        driver: Connection/statement driver for the engine.
        schema: Model name -> EntitySchema map.
        options: Store options.
        conn: Connection bound to a transaction scope (internal).
    """

    def __init__(
        self,
        driver: SqlDriver,
        schema: Mapping[str, EntitySchema],
        options: StoreOptions,
        conn: Any = None,
    ):
        super().__init__(
            schema,
            options,
            EntityTransformer(schema, options, driver.dialect),  # type: ignore[arg-type]
        )
        self.driver = driver
        self.id = driver.dialect
        self._conn = conn

    @property
    def in_transaction(self) -> bool:
        return self._conn is not None

    # -------------------------------------------------------------------------
    # Connection management
    # -------------------------------------------------------------------------

    async def _acquire(self) -> Any:
        try:
            return await self.driver.acquire()
        except ConsentStoreError:
            raise
        except Exception as e:
            logger.error("Cannot acquire %s connection", self.driver.dialect, exc_info=True)
            raise DatabaseConnectionError(
                f"Cannot connect to {self.driver.dialect} database: {e}"
            ) from e

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[Any]:
        """Yield the bound connection, or a fresh one committed on exit."""
        if self._conn is not None:
            yield self._conn
            return

        conn = await self._acquire()
        try:
            yield conn
            await self.driver.commit(conn)
        except Exception:
            await self.driver.rollback(conn)
            raise
        finally:
            await self.driver.release(conn)

    def _wrap(self, error: Exception, sql: str) -> DatabaseQueryError:
        logger.error("Query failed: %s", sql, exc_info=True)
        return DatabaseQueryError(f"Database query failed: {error}", meta={"sql": sql})

    async def _run(
        self,
        statement: Callable[[Any, str, dict[str, Any]], Awaitable[T]],
        conn: Any,
        sql: str,
        params: dict[str, Any],
    ) -> T:
        logger.debug("SQL: %s %s", sql, params)
        try:
            return await statement(conn, sql, params)
        except self.driver.errors as e:
            raise self._wrap(e, sql) from e
        except ConsentStoreError:
            raise
        except Exception as e:
            logger.error("Unexpected failure running: %s", sql, exc_info=True)
            raise UnknownStoreError(
                f"Unexpected database failure: {e}", meta={"sql": sql}
            ) from e

    async def _execute(self, conn: Any, sql: str, params: dict[str, Any]) -> int:
        return await self._run(self.driver.execute, conn, sql, params)

    async def _fetch_one(
        self, conn: Any, sql: str, params: dict[str, Any]
    ) -> dict[str, Any] | None:
        return await self._run(self.driver.fetch_one, conn, sql, params)

    async def _fetch_all(self, conn: Any, sql: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        return await self._run(self.driver.fetch_all, conn, sql, params)

    # -------------------------------------------------------------------------
    # Statement helpers
    # -------------------------------------------------------------------------

    def _table(self, model: str) -> str:
        return self.driver.sql_name(self.transformer.get_entity_name(model))

    def _columns(self, model: str, select: Sequence[str] | None) -> str:
        if select is None:
            return "*"
        columns = [self.transformer.get_field(model, name) for name in select]
        return ", ".join(self.driver.sql_name(c) for c in columns) or "*"

    def _where(self, model: str, where: Where | None) -> tuple[str, dict[str, Any]]:
        plan = self.transformer.convert_where_clause(model, where)
        where_sql, params = WhereBuilder(self.driver).build(plan)
        return (f" WHERE {where_sql}" if where_sql else ""), params

    def _order_by(self, column: str, descending: bool) -> str:
        """ORDER BY with NULLs last ascending and first descending on every dialect."""
        name = self.driver.sql_name(column)
        if descending:
            return f" ORDER BY {name} IS NULL DESC, {name} DESC"
        return f" ORDER BY {name} IS NULL, {name} ASC"

    async def _select_ids(self, conn: Any, model: str, where: Where | None) -> list[Any]:
        where_sql, params = self._where(model, where)
        rows = await self._fetch_all(
            conn, f'SELECT "{ID_FIELD}" FROM {self._table(model)}{where_sql}', params
        )
        return [row[ID_FIELD] for row in rows]

    async def _rows_by_id(self, conn: Any, model: str, ids: list[Any]) -> list[dict[str, Any]]:
        if not ids:
            return []
        rows = await self._fetch_all(
            conn,
            f"SELECT * FROM {self._table(model)} WHERE "
            f'"{ID_FIELD}" IN ({", ".join(f":id{i}" for i in range(len(ids)))})',
            {f"id{i}": v for i, v in enumerate(ids)},
        )
        by_id = {row[ID_FIELD]: row for row in rows}
        return [by_id[i] for i in ids if i in by_id]

    # -------------------------------------------------------------------------
    # CRUD contract
    # -------------------------------------------------------------------------

    async def create(
        self,
        *,
        model: str,
        data: Mapping[str, Any],
        select: Sequence[str] | None = None,
    ) -> dict[str, Any]:
        select = self.transformer.check_select(model, select)
        record = self.transformer.transform_input(data, model, "create")

        cols = list(record)
        col_list = ", ".join(self.driver.sql_name(c) for c in cols)
        placeholders = ", ".join(f":v{i}" for i in range(len(cols)))
        params = {f"v{i}": record[c] for i, c in enumerate(cols)}
        sql = f"INSERT INTO {self._table(model)} ({col_list}) VALUES ({placeholders})"

        async with self.connection() as conn:
            await self._execute(conn, sql, params)
            row = await self._fetch_one(
                conn,
                f'SELECT * FROM {self._table(model)} WHERE "{ID_FIELD}" = :id',
                {"id": record[ID_FIELD]},
            )
        return self.transformer.transform_output(row, model, select)  # type: ignore[return-value]

    async def find_one(
        self,
        *,
        model: str,
        where: Where,
        select: Sequence[str] | None = None,
    ) -> dict[str, Any] | None:
        select = self.transformer.check_select(model, select)
        where_sql, params = self._where(model, where)
        sql = f"SELECT {self._columns(model, select)} FROM {self._table(model)}{where_sql} LIMIT 1"
        async with self.connection() as conn:
            row = await self._fetch_one(conn, sql, params)
        return self.transformer.transform_output(row, model, select)

    async def find_many(
        self,
        *,
        model: str,
        where: Where | None = None,
        sort_by: SortBy | None = None,
        limit: int | None = DEFAULT_LIMIT,
        offset: int = 0,
        select: Sequence[str] | None = None,
    ) -> list[dict[str, Any]]:
        select = self.transformer.check_select(model, select)
        where_sql, params = self._where(model, where)
        sql = f"SELECT {self._columns(model, select)} FROM {self._table(model)}{where_sql}"

        sort = self._sort_field(model, sort_by)
        if sort is not None:
            column, descending = sort
            sql += self._order_by(column, descending)
        sql += self.driver.limit_clause(limit, offset)

        async with self.connection() as conn:
            rows = await self._fetch_all(conn, sql, params)
        output = self.transformer.transform_output
        return [output(row, model, select) for row in rows]  # type: ignore[misc]

    async def count(self, *, model: str, where: Where | None = None) -> int:
        where_sql, params = self._where(model, where)
        sql = f"SELECT COUNT(*) AS cnt FROM {self._table(model)}{where_sql}"
        async with self.connection() as conn:
            row = await self._fetch_one(conn, sql, params)
        return int(row["cnt"]) if row else 0

    async def update(
        self,
        *,
        model: str,
        where: Where,
        update: Mapping[str, Any],
    ) -> dict[str, Any] | None:
        updated = await self.update_many(model=model, where=where, update=update)
        return updated[0] if updated else None

    async def update_many(
        self,
        *,
        model: str,
        where: Where,
        update: Mapping[str, Any],
    ) -> list[dict[str, Any]]:
        values = self.transformer.transform_input(update, model, "update")
        where_sql, params = self._where(model, where)

        async with self.connection() as conn:
            # Ids first: the update may change the columns the where clause tests
            ids = await self._select_ids(conn, model, where)
            if ids and values:
                set_parts = []
                for i, (col, val) in enumerate(values.items()):
                    set_parts.append(f"{self.driver.sql_name(col)} = :s{i}")
                    params[f"s{i}"] = val
                sql = f"UPDATE {self._table(model)} SET {', '.join(set_parts)}{where_sql}"
                await self._execute(conn, sql, params)
            rows = await self._rows_by_id(conn, model, ids)
        return [self.transformer.transform_output(row, model) for row in rows]  # type: ignore[misc]

    async def delete(self, *, model: str, where: Where) -> None:
        await self.delete_many(model=model, where=where)

    async def delete_many(self, *, model: str, where: Where) -> int:
        where_sql, params = self._where(model, where)
        sql = f"DELETE FROM {self._table(model)}{where_sql}"
        async with self.connection() as conn:
            return await self._execute(conn, sql, params)

    async def transaction(self, *, callback: Callable[[Adapter], Awaitable[T]]) -> T:
        if self.in_transaction:
            return await callback(self)

        if self.options.advanced.disable_transactions:
            logger.warning(
                "Transactions disabled by configuration: running callback without atomicity"
            )
            return await callback(self)

        conn = await self._acquire()
        try:
            await self.driver.begin(conn)
        except self.driver.errors as e:
            await self.driver.release(conn)
            if not transactions_unsupported(e):
                raise self._wrap(e, "BEGIN") from e
            logger.warning(
                "%s does not support transactions: running callback without atomicity",
                self.driver.dialect,
            )
            return await callback(self)

        scoped = SqlAdapter(self.driver, self.schema, self.options, conn=conn)
        try:
            result = await callback(scoped)
            await self.driver.commit(conn)
        except Exception:
            await self.driver.rollback(conn)
            raise
        finally:
            await self.driver.release(conn)
        return result

    # -------------------------------------------------------------------------
    # Schema
    # -------------------------------------------------------------------------

    def create_table_sql(self, model: str) -> str:
        """Generate CREATE TABLE IF NOT EXISTS statement for a model."""
        entity = self.transformer.get_schema(model)
        col_defs = [f'"{ID_FIELD}" TEXT PRIMARY KEY']
        for field in entity.fields.values():
            storage_name: str = field.storage_name  # type: ignore[assignment]
            col_defs.append(self.driver.column_sql(storage_name, field.type))
        return (
            f"CREATE TABLE IF NOT EXISTS {self._table(model)} (\n    "
            + ",\n    ".join(col_defs)
            + "\n)"
        )

    async def create_schema(self) -> None:
        """Create the tables of every model if they don't exist."""
        async with self.connection() as conn:
            for model in self.schema:
                await self._execute(conn, self.create_table_sql(model), {})

    async def shutdown(self) -> None:
        """Close driver resources (pool, shared connection)."""
        await self.driver.shutdown()


__all__ = ["SqlAdapter", "transactions_unsupported"]
