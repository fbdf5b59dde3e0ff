# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Consent policy entity: versioned privacy/cookie policy texts.

Policies are grouped by type ("cookie_banner", "privacy_policy", ...);
the active policy of a type is the one with the latest effective_date.
"""

from __future__ import annotations

from ...schema import Boolean, Date, Entity, String, utcnow


class ConsentPolicyEntity(Entity):
    """Consent policy storage definition."""

    name = "consent_policy"
    prefix = "pol"

    def configure(self) -> None:
        f = self.fields
        f.field("version", String, required=True)
        f.field("type", String, required=True)
        f.field("name", String, required=True)
        f.field("effective_date", Date, required=True)
        f.field("expiration_date", Date)
        f.field("content", String)
        f.field("content_hash", String)
        f.field("is_active", Boolean, default=True)
        f.field("created_at", Date, default=utcnow)
