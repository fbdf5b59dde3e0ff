# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Consent policy registry.

find_or_create_policy() guarantees a policy exists for a given type: it
returns the newest active one, or creates a placeholder version 1.0.0.
"""

from __future__ import annotations

import hashlib
from datetime import datetime
from typing import TYPE_CHECKING, Any

from ...registry import EntityRegistry
from ...schema import utcnow

if TYPE_CHECKING:
    from ...adapters.base import Adapter


def policy_placeholder(policy_type: str, now: datetime) -> tuple[str, str]:
    """Placeholder policy text and its SHA-256 hex digest."""
    content = (
        f"[PLACEHOLDER] This is an automatically generated {policy_type} policy "
        f"created on {now.isoformat()}. Replace it with the real policy text."
    )
    return content, hashlib.sha256(content.encode("utf-8")).hexdigest()


class ConsentPolicyRegistry(EntityRegistry):
    """Consent policy operations."""

    model = "consent_policy"

    async def create_consent_policy(
        self, data: dict[str, Any], context: Any = None
    ) -> dict[str, Any] | None:
        return await self._create(data, context)

    async def find_consent_policy_by_id(self, policy_id: str) -> dict[str, Any] | None:
        return await self.find_by_id(policy_id)

    async def find_latest_policy(self, policy_type: str) -> dict[str, Any] | None:
        """Newest active policy of a type (by effective_date)."""
        policies = await self.adapter.find_many(
            model=self.model,
            where=[
                {"field": "type", "value": policy_type},
                {"field": "is_active", "value": True},
            ],
            sort_by={"field": "effective_date", "direction": "desc"},
            limit=1,
        )
        return policies[0] if policies else None

    async def find_or_create_policy(
        self, policy_type: str, context: Any = None
    ) -> dict[str, Any] | None:
        """Latest active policy of a type, created as placeholder if missing.

        Lookup and creation run in one transaction.
        """

        async def find_or_create(tx: Adapter) -> dict[str, Any] | None:
            registry = self.bind(tx)
            latest = await registry.find_latest_policy(policy_type)
            if latest is not None:
                return latest

            now = utcnow()
            content, content_hash = policy_placeholder(policy_type, now)
            return await registry.create_consent_policy(
                {
                    "version": "1.0.0",
                    "type": policy_type,
                    "name": policy_type,
                    "effective_date": now,
                    "content": content,
                    "content_hash": content_hash,
                    "is_active": True,
                    "expiration_date": None,
                },
                context,
            )

        return await self.adapter.transaction(callback=find_or_create)


__all__ = ["ConsentPolicyRegistry", "policy_placeholder"]
