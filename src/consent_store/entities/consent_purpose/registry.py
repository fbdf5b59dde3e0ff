# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Consent purpose registry."""

from __future__ import annotations

from typing import Any

from ...registry import EntityRegistry


class ConsentPurposeRegistry(EntityRegistry):
    model = "consent_purpose"

    async def create_consent_purpose(
        self, data: dict[str, Any], context: Any = None
    ) -> dict[str, Any] | None:
        return await self._create(data, context)

    async def find_consent_purpose_by_id(self, purpose_id: str) -> dict[str, Any] | None:
        return await self.find_by_id(purpose_id)

    async def find_consent_purpose_by_code(self, code: str) -> dict[str, Any] | None:
        return await self._find_by("code", code)


__all__ = ["ConsentPurposeRegistry"]
