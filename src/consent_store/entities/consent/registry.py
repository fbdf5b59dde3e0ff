# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Consent registry: consent creation, lookup and withdrawal."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ...errors import NotFoundError
from ...registry import EntityRegistry

if TYPE_CHECKING:
    from ...adapters.base import Adapter


class ConsentRegistry(EntityRegistry):
    """Consent operations."""

    model = "consent"

    async def create_consent(
        self, data: dict[str, Any], context: Any = None
    ) -> dict[str, Any] | None:
        return await self._create(data, context)

    async def find_consent_by_id(self, consent_id: str) -> dict[str, Any] | None:
        return await self.find_by_id(consent_id)

    async def find_consents(
        self,
        subject_id: str | None = None,
        domain_id: str | None = None,
        status: str | None = None,
        limit: int | None = 100,
    ) -> list[dict[str, Any]]:
        """Consents filtered by subject, domain and status, newest first."""
        where = [
            {"field": name, "value": value}
            for name, value in (
                ("subject_id", subject_id),
                ("domain_id", domain_id),
                ("status", status),
            )
            if value is not None
        ]
        return await self.adapter.find_many(
            model=self.model,
            where=where,
            sort_by={"field": "given_at", "direction": "desc"},
            limit=limit,
        )

    async def withdraw_consent(
        self,
        consent_id: str,
        reason: str | None = None,
        method: str | None = None,
        context: Any = None,
    ) -> dict[str, Any] | None:
        """Mark a consent withdrawn and record the withdrawal, atomically.

        Returns the updated consent, or None if an update hook aborted.

        Raises:
            NotFoundError: Unknown consent.
        """

        async def withdraw(tx: Adapter) -> dict[str, Any] | None:
            registry = self.bind(tx)
            consent = await registry.find_consent_by_id(consent_id)
            if consent is None:
                raise NotFoundError(
                    f"Consent '{consent_id}' not found", meta={"consent_id": consent_id}
                )

            updated = await registry._update(
                [{"field": "id", "value": consent_id}],
                {"status": "withdrawn", "is_active": False, "withdrawal_reason": reason},
                context,
            )
            if updated is None:
                return None

            withdrawal: dict[str, Any] = {
                "consent_id": consent_id,
                "subject_id": consent.get("subject_id"),
                "withdrawal_reason": reason,
            }
            if method:
                withdrawal["withdrawal_method"] = method
            await registry._create(withdrawal, context, model="consent_withdrawal")
            return updated

        return await self.adapter.transaction(callback=withdraw)


__all__ = ["ConsentRegistry"]
