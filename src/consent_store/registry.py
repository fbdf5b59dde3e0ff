# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Base class for entity registries.

A registry is a small service over one entity: writes go through the hook
pipeline, reads go straight to the adapter. Registries are cheap to
rebuild, so code running inside a transaction uses registry.bind(tx) to
get a copy bound to the transaction-scoped adapter.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

from .hooks import create_with_hooks, update_with_hooks

if TYPE_CHECKING:
    from .adapters.base import Adapter
    from .store_config import DatabaseHook

R = TypeVar("R", bound="EntityRegistry")


class EntityRegistry:
    """Entity-level operations on top of an adapter.

    Attributes:
        model: Entity name handled by the registry.
        adapter: Adapter used for reads and writes.
        hooks: Hook maps for writes (None = adapter.options.database_hooks).
    """

    model: str

    def __init__(self, adapter: Adapter, hooks: Sequence[DatabaseHook] | None = None):
        self.adapter = adapter
        self.hooks = hooks

    def bind(self: R, adapter: Adapter) -> R:
        """Same registry on another adapter (e.g. a transaction scope)."""
        return type(self)(adapter, self.hooks)

    async def _create(
        self, data: Mapping[str, Any], context: Any = None, model: str | None = None
    ) -> dict[str, Any] | None:
        return await create_with_hooks(
            self.adapter,
            model=model or self.model,
            data=data,
            hooks=self.hooks,
            context=context,
        )

    async def _update(
        self,
        where: Sequence[Mapping[str, Any]],
        data: Mapping[str, Any],
        context: Any = None,
        model: str | None = None,
    ) -> dict[str, Any] | None:
        return await update_with_hooks(
            self.adapter,
            model=model or self.model,
            where=where,
            data=data,
            hooks=self.hooks,
            context=context,
        )

    async def _find_by(self, field: str, value: Any) -> dict[str, Any] | None:
        return await self.adapter.find_one(
            model=self.model, where=[{"field": field, "value": value}]
        )

    async def find_by_id(self, record_id: str) -> dict[str, Any] | None:
        return await self._find_by("id", record_id)


__all__ = ["EntityRegistry"]
