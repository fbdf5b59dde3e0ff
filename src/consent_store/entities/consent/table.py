# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Consent entity: the choices a subject made on a domain.

purpose_ids holds the ids of the accepted consent_purpose records.
A withdrawn consent keeps its row with status "withdrawn" and
is_active False.
"""

from __future__ import annotations

from ...schema import Boolean, Date, Entity, Json, String, utcnow


class ConsentEntity(Entity):
    """Consent storage definition."""

    name = "consent"
    prefix = "cns"

    def configure(self) -> None:
        f = self.fields
        f.field("subject_id", String, required=True)
        f.field("domain_id", String, required=True)
        f.field("purpose_ids", Json, required=True)
        f.field("metadata", Json)
        f.field("policy_id", String)
        f.field("ip_address", String)
        f.field("user_agent", String)
        f.field("status", String, default="active")
        f.field("withdrawal_reason", String)
        f.field("given_at", Date, default=utcnow)
        f.field("valid_until", Date)
        f.field("is_active", Boolean, default=True)
