# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Consent withdrawal entity: who revoked a consent, when and why."""

from __future__ import annotations

from ...schema import Date, Entity, Json, String, utcnow


class ConsentWithdrawalEntity(Entity):
    name = "consent_withdrawal"
    prefix = "wdr"

    def configure(self) -> None:
        f = self.fields
        f.field("consent_id", String)
        f.field("subject_id", String)
        f.field("withdrawal_reason", String)
        f.field("withdrawal_method", String, default="subject-initiated")
        f.field("ip_address", String)
        f.field("user_agent", String)
        f.field("metadata", Json)
        f.field("created_at", Date, default=utcnow)
