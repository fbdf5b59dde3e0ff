# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Subject entity: a person or device that gives consent.

Subjects start anonymous and become identified once linked to an
external identity (external_id + identity_provider).
"""

from __future__ import annotations

from ...schema import Boolean, Date, Entity, String, utcnow


class SubjectEntity(Entity):
    """Subject storage definition."""

    name = "subject"
    prefix = "sub"

    def configure(self) -> None:
        f = self.fields
        f.field("is_identified", Boolean, default=False, required=True)
        f.field("external_id", String)
        f.field("identity_provider", String)
        f.field("last_ip_address", String)
        f.field("subject_timezone", String, default="UTC")
        f.field("created_at", Date, default=utcnow)
        f.field("updated_at", Date, default=utcnow)
