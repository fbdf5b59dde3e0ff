# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Domain entity: a website/application that collects consent."""

from __future__ import annotations

from ...schema import Boolean, Date, Entity, Json, String, utcnow


class DomainEntity(Entity):
    name = "domain"
    prefix = "dom"

    def configure(self) -> None:
        f = self.fields
        f.field("name", String, required=True)
        f.field("description", String)
        f.field("allowed_origins", Json, default=[])
        f.field("is_verified", Boolean, default=True)
        f.field("is_active", Boolean, default=True)
        f.field("created_at", Date, default=utcnow)
        f.field("updated_at", Date, default=utcnow)
