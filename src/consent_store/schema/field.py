# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Field definitions for entity schemas."""

from __future__ import annotations

import copy
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any

# Logical field types, independent of the storage backend
String = "string"
Number = "number"
Boolean = "boolean"
Date = "date"
Json = "json"

FIELD_TYPES = frozenset({String, Number, Boolean, Date, Json})


def utcnow() -> datetime:
    """Timezone-aware current time, used as default for timestamp fields."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Field:
    """One entity attribute.

    Attributes:
        name: Logical name used by callers and hooks.
        type: One of String, Number, Boolean, Date, Json.
        storage_name: Column/key name in the backend (defaults to name).
        default: Literal value or zero-argument callable applied on create.
            None means the field has no default.
        required: Whether callers are expected to provide a value.
    """

    name: str
    type: str = String
    storage_name: str | None = None
    default: Any = None
    required: bool = False

    def __post_init__(self) -> None:
        if self.type not in FIELD_TYPES:
            raise ValueError(
                f"Unknown field type '{self.type}' for '{self.name}'. "
                f"Supported: {', '.join(sorted(FIELD_TYPES))}"
            )
        if self.storage_name is None:
            object.__setattr__(self, "storage_name", self.name)

    @property
    def has_default(self) -> bool:
        return self.default is not None

    def default_value(self) -> Any:
        """Return a fresh default: call generators, copy mutable literals."""
        if callable(self.default):
            return self.default()
        return copy.deepcopy(self.default)

    def renamed(self, storage_name: str) -> Field:
        return replace(self, storage_name=storage_name)


class Fields(dict[str, Field]):
    """Ordered field registry filled by Entity.configure()."""

    def field(
        self,
        name: str,
        type_: str = String,
        *,
        default: Any | Callable[[], Any] = None,
        required: bool = False,
        storage_name: str | None = None,
    ) -> Field:
        """Define a field and return it."""
        if name == "id":
            raise ValueError("'id' is implicit and cannot be declared as a field")
        field = Field(
            name=name,
            type=type_,
            storage_name=storage_name,
            default=default,
            required=required,
        )
        self[name] = field
        return field


__all__ = [
    "FIELD_TYPES",
    "Boolean",
    "Date",
    "Field",
    "Fields",
    "Json",
    "Number",
    "String",
    "utcnow",
]
