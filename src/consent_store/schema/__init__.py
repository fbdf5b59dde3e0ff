# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Entity schema layer.

Components:
    Field, Fields: Field definitions with logical types and defaults.
    Entity: Base class for entity definitions (entities/<name>/table.py).
    EntitySchema: Immutable per-entity description consumed by adapters.
    get_schema: Discover entities and build the model -> EntitySchema map.

Example:
    Declaring an entity::

        from consent_store.schema import Boolean, Entity, String

        class DeviceEntity(Entity):
            name = "device"
            prefix = "dev"

            def configure(self):
                self.fields.field("label", String, required=True)
                self.fields.field("is_trusted", Boolean, default=False)
"""

from .entity import Entity, EntitySchema
from .field import FIELD_TYPES, Boolean, Date, Field, Fields, Json, Number, String, utcnow
from .loader import discover_entities, find_entity_classes, get_schema

__all__ = [
    "FIELD_TYPES",
    "Boolean",
    "Date",
    "Entity",
    "EntitySchema",
    "Field",
    "Fields",
    "Json",
    "Number",
    "String",
    "discover_entities",
    "find_entity_classes",
    "get_schema",
    "utcnow",
]
