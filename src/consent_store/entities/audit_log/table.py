# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Audit log entity.

One row per tracked change: entity_type/entity_id identify the changed
record, changes holds the before/after values.
"""

from __future__ import annotations

from ...schema import Date, Entity, Json, String, utcnow


class AuditLogEntity(Entity):
    """Audit log storage definition."""

    name = "audit_log"
    prefix = "log"

    def configure(self) -> None:
        f = self.fields
        f.field("entity_type", String, required=True)
        f.field("entity_id", String, required=True)
        f.field("action_type", String, required=True)
        f.field("subject_id", String)
        f.field("ip_address", String)
        f.field("user_agent", String)
        f.field("changes", Json)
        f.field("metadata", Json)
        f.field("created_at", Date, default=utcnow)
        f.field("event_timezone", String, default="UTC")
