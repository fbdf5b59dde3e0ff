# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Consent purpose entity (analytics, marketing, necessary, ...)."""

from __future__ import annotations

from ...schema import Boolean, Date, Entity, String, utcnow


class ConsentPurposeEntity(Entity):
    name = "consent_purpose"
    prefix = "pur"

    def configure(self) -> None:
        f = self.fields
        f.field("code", String, required=True)
        f.field("name", String, required=True)
        f.field("description", String)
        f.field("is_essential", Boolean, default=False)
        f.field("data_category", String)
        f.field("legal_basis", String)
        f.field("is_active", Boolean, default=True)
        f.field("created_at", Date, default=utcnow)
        f.field("updated_at", Date, default=utcnow)
