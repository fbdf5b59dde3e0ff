# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Consent record entity: append-only history of consent actions."""

from __future__ import annotations

from ...schema import Date, Entity, Json, String, utcnow


class ConsentRecordEntity(Entity):
    name = "consent_record"
    prefix = "rec"

    def configure(self) -> None:
        f = self.fields
        f.field("subject_id", String)
        f.field("consent_id", String)
        f.field("action_type", String, required=True)
        f.field("details", Json)
        f.field("created_at", Date, default=utcnow)
