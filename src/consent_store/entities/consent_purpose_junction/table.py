# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Link between a consent and each purpose it covers."""

from __future__ import annotations

from ...schema import Date, Entity, Json, String, utcnow


class ConsentPurposeJunctionEntity(Entity):
    name = "consent_purpose_junction"
    prefix = "pjx"

    def configure(self) -> None:
        f = self.fields
        f.field("consent_id", String)
        f.field("purpose_id", String)
        f.field("status", String, default="active")
        f.field("metadata", Json)
        f.field("created_at", Date, default=utcnow)
        f.field("updated_at", Date, default=utcnow)
