# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Entity base class and the immutable schema it produces."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from ..errors import FieldNotFoundError
from .field import Field, Fields

if TYPE_CHECKING:
    from ..store_config import TableOptions


@dataclass(frozen=True)
class EntitySchema:
    """Static description of one entity as seen by adapters.

    Attributes:
        model: Logical entity name ("consent", "subject", ...).
        entity_name: Storage table/collection name.
        entity_prefix: Prefix for generated ids ("cns" -> "cns_<random>").
        fields: Read-only ordered mapping of logical name to Field.
    """

    model: str
    entity_name: str
    entity_prefix: str
    fields: Mapping[str, Field]

    def field(self, name: str) -> Field:
        """Return the Field for a logical name, raising FieldNotFoundError."""
        try:
            return self.fields[name]
        except KeyError:
            raise FieldNotFoundError(self.model, name, ["id", *self.fields]) from None

    @property
    def field_names(self) -> list[str]:
        return list(self.fields)


class Entity:
    """Base class for entity definitions.

    Subclasses set `name` and `prefix` and declare fields in configure():

        class SubjectEntity(Entity):
            name = "subject"
            prefix = "sub"

            def configure(self):
                f = self.fields
                f.field("is_identified", Boolean, default=False, required=True)
                f.field("external_id")

    The `id` field is implicit on every entity.
    """

    name: str
    prefix: str = ""

    def __init__(self) -> None:
        if not getattr(self, "name", None):
            raise ValueError(f"{type(self).__name__} must define 'name'")
        self.fields = Fields()
        self.configure()

    def configure(self) -> None:
        """Override to define fields. Called during __init__."""
        pass

    def build_schema(self, table_options: TableOptions | None = None) -> EntitySchema:
        """Freeze the declared fields, applying per-table overrides."""
        fields: dict[str, Field] = dict(self.fields)
        entity_name = self.name
        entity_prefix = self.prefix or self.name[:3]

        if table_options is not None:
            for extra in table_options.additional_fields:
                fields[extra.name] = extra
            for logical, storage in table_options.fields.items():
                if logical not in fields:
                    raise FieldNotFoundError(self.name, logical, ["id", *fields])
                fields[logical] = fields[logical].renamed(storage)
            entity_name = table_options.entity_name or entity_name
            entity_prefix = table_options.entity_prefix or entity_prefix

        return EntitySchema(
            model=self.name,
            entity_name=entity_name,
            entity_prefix=entity_prefix,
            fields=MappingProxyType(fields),
        )


__all__ = ["Entity", "EntitySchema"]
