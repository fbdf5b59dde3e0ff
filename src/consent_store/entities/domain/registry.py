# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Domain registry."""

from __future__ import annotations

from typing import Any

from ...errors import ConflictError
from ...registry import EntityRegistry


class DomainRegistry(EntityRegistry):
    """Domain operations. Domain names are unique."""

    model = "domain"

    async def create_domain(
        self, data: dict[str, Any], context: Any = None
    ) -> dict[str, Any] | None:
        """Create a domain, raising ConflictError if the name is taken."""
        name = data.get("name")
        if name and await self.find_domain_by_name(name) is not None:
            raise ConflictError(f"Domain '{name}' already exists", meta={"name": name})
        return await self._create(data, context)

    async def find_domain_by_id(self, domain_id: str) -> dict[str, Any] | None:
        return await self.find_by_id(domain_id)

    async def find_domain_by_name(self, name: str) -> dict[str, Any] | None:
        return await self._find_by("name", name)

    async def find_or_create_domain(
        self, name: str, context: Any = None
    ) -> dict[str, Any] | None:
        domain = await self.find_domain_by_name(name)
        if domain is not None:
            return domain
        return await self._create({"name": name}, context)


__all__ = ["DomainRegistry"]
