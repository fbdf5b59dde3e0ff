# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Where a consent was given (resolved from the client IP)."""

from __future__ import annotations

from ...schema import Date, Entity, Number, String, utcnow


class ConsentGeoLocationEntity(Entity):
    name = "consent_geo_location"
    prefix = "cgl"

    def configure(self) -> None:
        f = self.fields
        f.field("consent_id", String)
        f.field("ip", String)
        f.field("country", String)
        f.field("region", String)
        f.field("city", String)
        f.field("latitude", Number)
        f.field("longitude", Number)
        f.field("timezone", String)
        f.field("created_at", Date, default=utcnow)
