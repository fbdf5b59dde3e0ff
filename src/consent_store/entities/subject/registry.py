# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Subject registry: lookup and idempotent creation of subjects."""

from __future__ import annotations

import logging
from typing import Any

from ...errors import ConflictError, NotFoundError
from ...registry import EntityRegistry

logger = logging.getLogger(__name__)


class SubjectRegistry(EntityRegistry):
    """Subject operations."""

    model = "subject"

    async def create_subject(
        self, data: dict[str, Any], context: Any = None
    ) -> dict[str, Any] | None:
        """Create a subject through the hook pipeline."""
        return await self._create(data, context)

    async def find_subject_by_id(self, subject_id: str) -> dict[str, Any] | None:
        return await self.find_by_id(subject_id)

    async def find_subject_by_external_id(self, external_id: str) -> dict[str, Any] | None:
        return await self._find_by("external_id", external_id)

    async def find_or_create_subject(
        self,
        subject_id: str | None = None,
        external_subject_id: str | None = None,
        ip_address: str | None = None,
        context: Any = None,
    ) -> dict[str, Any] | None:
        """Resolve the subject a request refers to, creating it if needed.

        - subject_id and external_subject_id: both must exist and be the
          same subject (NotFoundError / ConflictError otherwise)
        - subject_id only: must exist (NotFoundError)
        - external_subject_id only: found, or created as identified subject
        - neither: a new anonymous subject

        Returns None only when a before hook aborted the creation.
        """
        if subject_id and external_subject_id:
            by_id = await self.find_subject_by_id(subject_id)
            by_external = await self.find_subject_by_external_id(external_subject_id)
            meta = {"subject_id": subject_id, "external_subject_id": external_subject_id}
            if by_id is None or by_external is None:
                logger.error("Subject validation failed: one or both subjects not found %s", meta)
                raise NotFoundError("The specified subject could not be found", meta=meta)
            if by_id["id"] != by_external["id"]:
                logger.warning("Subject ids refer to different subjects %s", meta)
                raise ConflictError(
                    "subject_id and external_subject_id do not match the same subject",
                    meta=meta,
                )
            return by_id

        if subject_id:
            subject = await self.find_subject_by_id(subject_id)
            if subject is None:
                raise NotFoundError(
                    f"Subject '{subject_id}' not found", meta={"subject_id": subject_id}
                )
            return subject

        if external_subject_id:
            subject = await self.find_subject_by_external_id(external_subject_id)
            if subject is not None:
                return subject
            logger.info("Creating subject for external id %s", external_subject_id)
            return await self.create_subject(
                {
                    "external_id": external_subject_id,
                    "identity_provider": "external",
                    "last_ip_address": ip_address,
                    "is_identified": True,
                },
                context,
            )

        return await self.create_subject(
            {
                "identity_provider": "anonymous",
                "last_ip_address": ip_address,
                "is_identified": False,
            },
            context,
        )


__all__ = ["SubjectRegistry"]
