# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Geo location entity: countries/regions and the regulations that apply."""

from __future__ import annotations

from ...schema import Date, Entity, Json, String, utcnow


class GeoLocationEntity(Entity):
    name = "geo_location"
    prefix = "geo"

    def configure(self) -> None:
        f = self.fields
        f.field("country_code", String)
        f.field("country_name", String)
        f.field("region_code", String)
        f.field("region_name", String)
        f.field("regulatory_zones", Json)
        f.field("created_at", Date, default=utcnow)
