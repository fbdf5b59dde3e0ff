# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""In-memory adapter: the reference implementation of the adapter contract.

The data lives in an explicitly owned MemoryStore (storage table name ->
ordered list of records). Queries are linear scans with a plain predicate
rendered from the where plan; nothing is indexed.

Transactions work on a deep copy of the whole store: the callback gets an
adapter bound to the copy, and on success the live store's per-table lists
are replaced by the copy's. On error the copy is dropped, so the live store
never sees partial writes.

Usage:
    store = MemoryStore()
    adapter = memory_adapter(store)(options)
    subject = await adapter.create(model="subject", data={"external_id": "u1"})
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

from ..errors import DatabaseQueryError
from ..schema import get_schema
from .base import DEFAULT_LIMIT, Adapter, SortBy
from .transformer import ID_FIELD, EntityTransformer
from .where import to_predicate

if TYPE_CHECKING:
    from ..schema import EntitySchema
    from ..store_config import StoreOptions
    from .where import Where

logger = logging.getLogger(__name__)

T = TypeVar("T")

Record = dict[str, Any]


class MemoryStore:
    """Owned in-memory data: table name -> ordered list of records."""

    def __init__(self, tables: dict[str, list[Record]] | None = None):
        self.tables: dict[str, list[Record]] = tables if tables is not None else {}

    def table(self, name: str) -> list[Record]:
        return self.tables.setdefault(name, [])

    def snapshot(self) -> MemoryStore:
        """Deep copy of the whole store."""
        return MemoryStore(copy.deepcopy(self.tables))

    def swap(self, other: MemoryStore) -> None:
        """Replace this store's per-table lists with the other store's."""
        for name, rows in other.tables.items():
            self.tables[name] = rows

    def clear(self) -> None:
        self.tables.clear()


class MemoryAdapter(Adapter):
    """Adapter over a MemoryStore."""

    id = "memory"

    def __init__(
        self,
        store: MemoryStore,
        schema: Mapping[str, EntitySchema],
        options: StoreOptions,
    ):
        super().__init__(schema, options, EntityTransformer(schema, options, "memory"))
        self.store = store

    def _rows(self, model: str) -> list[Record]:
        return self.store.table(self.transformer.get_entity_name(model))

    def _matching(self, model: str, where: Where | None) -> list[Record]:
        predicate = to_predicate(self.transformer.convert_where_clause(model, where))
        return [row for row in self._rows(model) if predicate(row)]

    async def create(
        self,
        *,
        model: str,
        data: Mapping[str, Any],
        select: Sequence[str] | None = None,
    ) -> dict[str, Any]:
        select = self.transformer.check_select(model, select)
        record = self.transformer.transform_input(data, model, "create")
        rows = self._rows(model)
        if any(row.get(ID_FIELD) == record[ID_FIELD] for row in rows):
            raise DatabaseQueryError(
                f"Duplicate id '{record[ID_FIELD]}' in '{self.transformer.get_entity_name(model)}'",
                meta={"model": model, "id": record[ID_FIELD]},
            )
        rows.append(record)
        created = self.transformer.transform_output(record, model, select)
        return created  # type: ignore[return-value]

    async def find_one(
        self,
        *,
        model: str,
        where: Where,
        select: Sequence[str] | None = None,
    ) -> dict[str, Any] | None:
        select = self.transformer.check_select(model, select)
        predicate = to_predicate(self.transformer.convert_where_clause(model, where))
        for row in self._rows(model):
            if predicate(row):
                return self.transformer.transform_output(row, model, select)
        return None

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
        rows = self._matching(model, where)

        sort = self._sort_field(model, sort_by)
        if sort is not None:
            column, descending = sort
            rows.sort(key=lambda r: (r.get(column) is None, r.get(column)), reverse=descending)

        end = None if limit is None else offset + limit
        return [
            self.transformer.transform_output(row, model, select)  # type: ignore[misc]
            for row in rows[offset:end]
        ]

    async def count(self, *, model: str, where: Where | None = None) -> int:
        return len(self._matching(model, where))

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
        rows = self._matching(model, where)
        for row in rows:
            row.update(copy.deepcopy(values))
        return [self.transformer.transform_output(row, model) for row in rows]  # type: ignore[misc]

    async def delete(self, *, model: str, where: Where) -> None:
        await self.delete_many(model=model, where=where)

    async def delete_many(self, *, model: str, where: Where) -> int:
        predicate = to_predicate(self.transformer.convert_where_clause(model, where))
        rows = self._rows(model)
        kept = [row for row in rows if not predicate(row)]
        removed = len(rows) - len(kept)
        rows[:] = kept
        return removed

    async def transaction(self, *, callback: Callable[[Adapter], Awaitable[T]]) -> T:
        if self.options.advanced.disable_transactions:
            logger.warning(
                "Transactions disabled by configuration: running callback without atomicity"
            )
            return await callback(self)

        snapshot = self.store.snapshot()
        scoped = MemoryAdapter(snapshot, self.schema, self.options)
        result = await callback(scoped)
        self.store.swap(snapshot)
        return result


def memory_adapter(
    store: MemoryStore | None = None,
) -> Callable[..., MemoryAdapter]:
    """Adapter factory bound to an owned store.

    Returns a function (options, schema=None) -> MemoryAdapter; the schema
    is built from options when not given.
    """
    bound = store if store is not None else MemoryStore()

    def create_adapter(
        options: StoreOptions, schema: Mapping[str, EntitySchema] | None = None
    ) -> MemoryAdapter:
        return MemoryAdapter(bound, schema if schema is not None else get_schema(options), options)

    return create_adapter


__all__ = ["MemoryAdapter", "MemoryStore", "memory_adapter"]
