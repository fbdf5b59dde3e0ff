# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Audit log registry."""

from __future__ import annotations

from typing import Any

from ...registry import EntityRegistry


class AuditLogRegistry(EntityRegistry):
    model = "audit_log"

    async def create_audit_log(
        self, data: dict[str, Any], context: Any = None
    ) -> dict[str, Any] | None:
        return await self._create(data, context)

    async def find_audit_logs(
        self,
        entity_type: str | None = None,
        entity_id: str | None = None,
        limit: int | None = 100,
    ) -> list[dict[str, Any]]:
        """Audit entries for an entity type/id, newest first."""
        where = []
        if entity_type is not None:
            where.append({"field": "entity_type", "value": entity_type})
        if entity_id is not None:
            where.append({"field": "entity_id", "value": entity_id})
        return await self.adapter.find_many(
            model=self.model,
            where=where,
            sort_by={"field": "created_at", "direction": "desc"},
            limit=limit,
        )


__all__ = ["AuditLogRegistry"]
