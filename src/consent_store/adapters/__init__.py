# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Storage adapters with one CRUD contract for every backend.

Components:
    Adapter: Abstract base class defining the adapter contract.
    EntityTransformer: Field/type mapping between entities and records.
    WhereCondition, WherePlan: Where clause DSL and its resolved form.
    MemoryAdapter, MemoryStore: In-memory reference implementation.
    SqlAdapter: SQLite/PostgreSQL implementation over async drivers.
    get_adapter: Resolve StoreOptions.backend into a concrete adapter.

Adapter factories are two-stage: the outer call captures the backend
state (store, driver), the inner call binds the schema from options.
Transactions reuse the inner stage to build transaction-scoped adapters.

    adapter = memory_adapter(MemoryStore())(options)
    adapter = sql_adapter(get_driver(SqlBackend("sqlite", path)))(options)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from ..errors import InvalidConfigurationError
from ..schema import get_schema
from ..store_config import CustomBackend, MemoryBackend, SqlBackend
from .base import DEFAULT_LIMIT, Adapter
from .memory import MemoryAdapter, MemoryStore, memory_adapter
from .sql import SqlAdapter, get_driver, sql_adapter
from .transformer import EntityTransformer
from .where import WhereCondition, WherePlan

if TYPE_CHECKING:
    from ..schema import EntitySchema
    from ..store_config import StoreOptions

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_LIMIT",
    "Adapter",
    "EntityTransformer",
    "MemoryAdapter",
    "MemoryStore",
    "SqlAdapter",
    "WhereCondition",
    "WherePlan",
    "get_adapter",
    "get_driver",
    "memory_adapter",
    "sql_adapter",
]


def get_adapter(
    options: StoreOptions, schema: Mapping[str, EntitySchema] | None = None
) -> Adapter:
    """Create the adapter for options.backend.

    Backend kinds:
        - None -> MemoryBackend (with a warning)
        - MemoryBackend -> MemoryAdapter over a new MemoryStore
        - SqlBackend -> SqlAdapter over SqliteDriver / PostgresDriver
        - CustomBackend -> whatever factory(options) returns

    Raises:
        InvalidConfigurationError: Unknown backend, or a custom factory
            that does not return an Adapter.
    """
    schema = schema if schema is not None else get_schema(options)
    backend = options.backend

    if backend is None:
        logger.warning("No storage backend configured, using the in-memory adapter")
        backend = MemoryBackend()

    if isinstance(backend, MemoryBackend):
        return memory_adapter(MemoryStore())(options, schema)

    if isinstance(backend, SqlBackend):
        return sql_adapter(get_driver(backend))(options, schema)

    if isinstance(backend, CustomBackend):
        adapter = backend.factory(options)
        if not isinstance(adapter, Adapter):
            raise InvalidConfigurationError(
                f"Custom backend factory returned {type(adapter).__name__}, expected an Adapter"
            )
        return adapter

    raise InvalidConfigurationError(
        f"Unknown backend: {backend!r}. Expected MemoryBackend, SqlBackend or CustomBackend"
    )
