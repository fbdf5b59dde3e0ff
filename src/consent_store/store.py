# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Consent store: schema, adapter, hooks and registries wired together.

ConsentStore provides:
1. Configuration: StoreOptions instance at self.options
2. Schema: model -> EntitySchema map at self.schema (autodiscovered entities)
3. Adapter: the backend adapter at self.adapter (resolved from options.backend)
4. Hooks: create/update pipelines bound to the adapter
5. Registries: entity services at self.registry

Usage:
    # From environment (Docker/production):
    store = ConsentStore(config_from_env())

    # Explicit configuration:
    store = ConsentStore(StoreOptions(backend=SqlBackend("sqlite", "/data/consent.db")))
    await store.init()
    subject = await store.registry.subjects.find_or_create_subject(external_subject_id="u1")
    await store.shutdown()
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

from .adapters import Adapter, SqlAdapter, get_adapter
from .entities import (
    AuditLogRegistry,
    ConsentPolicyRegistry,
    ConsentPurposeRegistry,
    ConsentRegistry,
    DomainRegistry,
    SubjectRegistry,
)
from .hooks import CustomOperation, create_with_hooks, update_many_with_hooks, update_with_hooks
from .schema import get_schema
from .store_config import StoreOptions

if TYPE_CHECKING:
    from .adapters.where import Where
    from .store_config import DatabaseHook

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StoreRegistry:
    """All entity registries, sharing one adapter."""

    def __init__(self, adapter: Adapter, hooks: Sequence[DatabaseHook] | None = None):
        self.adapter = adapter
        self.hooks = hooks
        self.subjects = SubjectRegistry(adapter, hooks)
        self.consent_purposes = ConsentPurposeRegistry(adapter, hooks)
        self.consent_policies = ConsentPolicyRegistry(adapter, hooks)
        self.domains = DomainRegistry(adapter, hooks)
        self.consents = ConsentRegistry(adapter, hooks)
        self.audit_logs = AuditLogRegistry(adapter, hooks)

    def bind(self, adapter: Adapter) -> StoreRegistry:
        """Registries bound to another adapter (e.g. a transaction scope)."""
        return StoreRegistry(adapter, self.hooks)


class ConsentStore:
    """Foundation layer: options, schema, adapter, hooks, registries.

    Attributes:
        options: StoreOptions with all configuration
        schema: Model name -> EntitySchema
        adapter: Adapter for the configured backend
        registry: StoreRegistry bound to the adapter

    Class Attributes (override in subclass):
        entity_packages: Package names scanned for entity definitions
    """

    entity_packages: list[str] = ["consent_store.entities"]

    def __init__(self, options: StoreOptions | None = None, adapter: Adapter | None = None):
        """Build schema and adapter from options (or use the given adapter)."""
        self.options = options or StoreOptions()
        self.schema = get_schema(self.options, tuple(self.entity_packages))
        self.adapter = adapter or get_adapter(self.options, self.schema)
        self.registry = StoreRegistry(self.adapter, self.options.database_hooks)

    @property
    def hooks(self) -> list[DatabaseHook]:
        return self.options.database_hooks

    async def init(self) -> None:
        """Create SQL tables if missing (no-op for other backends)."""
        if isinstance(self.adapter, SqlAdapter):
            await self.adapter.create_schema()
        logger.info(
            "Consent store ready (%s backend, %d models)", self.adapter.id, len(self.schema)
        )

    async def shutdown(self) -> None:
        """Release backend resources (connection pool, shared connection)."""
        if isinstance(self.adapter, SqlAdapter):
            await self.adapter.shutdown()

    async def transaction(self, callback: Callable[[Adapter], Awaitable[T]]) -> T:
        return await self.adapter.transaction(callback=callback)

    # -------------------------------------------------------------------------
    # Hook pipelines bound to the store adapter
    # -------------------------------------------------------------------------

    async def create_with_hooks(
        self,
        *,
        model: str,
        data: Mapping[str, Any],
        custom_fn: CustomOperation | None = None,
        context: Any = None,
    ) -> dict[str, Any] | None:
        return await create_with_hooks(
            self.adapter,
            model=model,
            data=data,
            hooks=self.hooks,
            custom_fn=custom_fn,
            context=context,
        )

    async def update_with_hooks(
        self,
        *,
        model: str,
        where: Where,
        data: Mapping[str, Any],
        custom_fn: CustomOperation | None = None,
        context: Any = None,
    ) -> dict[str, Any] | None:
        return await update_with_hooks(
            self.adapter,
            model=model,
            where=where,
            data=data,
            hooks=self.hooks,
            custom_fn=custom_fn,
            context=context,
        )

    async def update_many_with_hooks(
        self,
        *,
        model: str,
        where: Where,
        data: Mapping[str, Any],
        custom_fn: CustomOperation | None = None,
        context: Any = None,
    ) -> list[dict[str, Any]] | None:
        return await update_many_with_hooks(
            self.adapter,
            model=model,
            where=where,
            data=data,
            hooks=self.hooks,
            custom_fn=custom_fn,
            context=context,
        )


__all__ = ["ConsentStore", "StoreRegistry"]
