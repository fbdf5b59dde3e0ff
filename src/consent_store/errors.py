# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Error taxonomy for the consent store.

Every error raised by the store derives from ConsentStoreError and carries:
- code: stable machine-readable code (e.g. "NOT_FOUND", "BAD_REQUEST")
- status: HTTP-like status for the API layer (4xx caller errors, 5xx storage)
- category: coarse grouping ("validation", "storage", "plugin", ...)
- meta: extra diagnostic data (offending names, valid alternatives, ...)

Schema and where-clause errors are raised eagerly, close to their source.
Storage errors wrap the driver exception and keep it as __cause__.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any


class ConsentStoreError(Exception):
    """Base class for all consent store errors."""

    code = "UNKNOWN_ERROR"
    status = 500
    category = "unexpected"

    def __init__(self, message: str, meta: dict[str, Any] | None = None):
        self.message = message
        self.meta = meta or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serializable form for API responses."""
        return {
            "code": self.code,
            "message": self.message,
            "status": self.status,
            "category": self.category,
            "meta": self.meta,
        }


class SchemaNotFoundError(ConsentStoreError):
    """Raised when a model name is not part of the schema."""

    code = "NOT_FOUND"
    status = 404
    category = "validation"

    def __init__(self, model: str, available: Iterable[str]):
        self.model = model
        self.available = sorted(available)
        super().__init__(
            f"Model '{model}' not found in schema. "
            f"Available models: {', '.join(self.available)}",
            meta={"model": model, "available": self.available},
        )


class FieldNotFoundError(ConsentStoreError):
    """Raised when a field name is not defined on a model."""

    code = "NOT_FOUND"
    status = 404
    category = "validation"

    def __init__(self, model: str, field: str, available: Iterable[str]):
        self.model = model
        self.field = field
        self.available = sorted(available)
        super().__init__(
            f"Field '{field}' not found in model '{model}'. "
            f"Valid fields: {', '.join(self.available)}",
            meta={"model": model, "field": field, "available": self.available},
        )


class InvalidOperatorUsageError(ConsentStoreError):
    """Raised when a where condition uses an operator with an invalid value."""

    code = "BAD_REQUEST"
    status = 400
    category = "validation"

    def __init__(self, operator: str, field: str, reason: str):
        self.operator = operator
        self.field = field
        super().__init__(
            f"Invalid use of operator '{operator}' on field '{field}': {reason}",
            meta={"operator": operator, "field": field},
        )


class NotFoundError(ConsentStoreError):
    """Raised when a referenced record does not exist."""

    code = "NOT_FOUND"
    status = 404
    category = "validation"


class ConflictError(ConsentStoreError):
    """Raised when a write collides with existing data."""

    code = "CONFLICT"
    status = 409
    category = "validation"


class DatabaseConnectionError(ConsentStoreError):
    """Raised when the storage backend cannot be reached."""

    code = "DATABASE_CONNECTION_ERROR"
    status = 503
    category = "storage"


class DatabaseQueryError(ConsentStoreError):
    """Raised when a storage statement fails (constraint, syntax, ...)."""

    code = "DATABASE_QUERY_ERROR"
    status = 500
    category = "storage"


class HookFailureError(ConsentStoreError):
    """Raised when a database hook returns something other than a HookResult."""

    code = "PLUGIN_INITIALIZATION_FAILED"
    status = 500
    category = "plugin"


class InvalidConfigurationError(ConsentStoreError):
    """Raised for unusable store options."""

    code = "INVALID_CONFIGURATION"
    status = 500
    category = "configuration"


class UnknownStoreError(ConsentStoreError):
    """Catch-all wrapper for unexpected failures."""


__all__ = [
    "ConflictError",
    "ConsentStoreError",
    "DatabaseConnectionError",
    "DatabaseQueryError",
    "FieldNotFoundError",
    "HookFailureError",
    "InvalidConfigurationError",
    "InvalidOperatorUsageError",
    "NotFoundError",
    "SchemaNotFoundError",
    "UnknownStoreError",
]
