# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Base adapter class: the storage contract shared by every backend."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

from ..errors import InvalidOperatorUsageError
from .transformer import EntityTransformer

if TYPE_CHECKING:
    from ..schema import EntitySchema
    from ..store_config import StoreOptions
    from .where import Where

T = TypeVar("T")

DEFAULT_LIMIT = 100

SortBy = Mapping[str, str]


class Adapter(ABC):
    """Abstract base class for storage adapters.

    Every adapter exposes the same async CRUD contract over logical
    entities; only the internal translation differs:

    - create(model, data, select): insert, returning the stored entity
    - find_one(model, where, select): first match or None
    - find_many(model, where, sort_by, limit=100, offset=0, select)
    - count(model, where)
    - update(model, where, update): update matches, return the first one
    - update_many(model, where, update): update matches, return all
    - delete(model, where) / delete_many(model, where) -> count
    - transaction(callback): run callback(scoped_adapter) atomically

    Records go through the EntityTransformer on the way in (ids, defaults,
    coercion) and on the way out (logical names, inverse coercion).

    Subclasses must set `id` (backend name) and implement the abstract
    methods. `transaction` receives a new adapter bound to the transaction
    scope; operations on the outer adapter stay isolated until commit.
    """

    id: str = "adapter"

    def __init__(
        self,
        schema: Mapping[str, EntitySchema],
        options: StoreOptions,
        transformer: EntityTransformer,
    ):
        self.schema = schema
        self.options = options
        self.transformer = transformer

    # -------------------------------------------------------------------------
    # CRUD contract
    # -------------------------------------------------------------------------

    @abstractmethod
    async def create(
        self,
        *,
        model: str,
        data: Mapping[str, Any],
        select: Sequence[str] | None = None,
    ) -> dict[str, Any]:
        """Insert a record and return it, including the generated id."""
        ...

    @abstractmethod
    async def find_one(
        self,
        *,
        model: str,
        where: Where,
        select: Sequence[str] | None = None,
    ) -> dict[str, Any] | None:
        """Return the first matching record or None."""
        ...

    @abstractmethod
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
        """Return matching records; offset is applied before limit."""
        ...

    @abstractmethod
    async def count(self, *, model: str, where: Where | None = None) -> int:
        """Return the number of matching records."""
        ...

    @abstractmethod
    async def update(
        self,
        *,
        model: str,
        where: Where,
        update: Mapping[str, Any],
    ) -> dict[str, Any] | None:
        """Update matching records, return the first updated one (or None)."""
        ...

    @abstractmethod
    async def update_many(
        self,
        *,
        model: str,
        where: Where,
        update: Mapping[str, Any],
    ) -> list[dict[str, Any]]:
        """Update matching records, return all of them."""
        ...

    @abstractmethod
    async def delete(self, *, model: str, where: Where) -> None:
        """Delete matching records."""
        ...

    @abstractmethod
    async def delete_many(self, *, model: str, where: Where) -> int:
        """Delete matching records, return how many were removed."""
        ...

    @abstractmethod
    async def transaction(
        self, *, callback: Callable[[Adapter], Awaitable[T]]
    ) -> T:
        """Run callback with a transaction-scoped adapter.

        Commits when the callback returns, rolls back and re-raises when
        it raises.
        """
        ...

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _sort_field(self, model: str, sort_by: SortBy | None) -> tuple[str, bool] | None:
        """Resolve sort_by into (storage column, descending)."""
        if not sort_by:
            return None
        column = self.transformer.get_field(model, sort_by["field"])
        direction = str(sort_by.get("direction", "asc")).lower()
        if direction not in ("asc", "desc"):
            raise InvalidOperatorUsageError(
                "sort_by", sort_by["field"], f"direction must be 'asc' or 'desc', got '{direction}'"
            )
        return column, direction == "desc"


__all__ = ["DEFAULT_LIMIT", "Adapter", "SortBy"]
