# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Bidirectional mapping between entities and backend records.

EntityTransformer converts the logical entity shape used by callers and
hooks into the storage shape of one backend, and back:

- names: logical field -> storage column, model -> storage table
- ids: assigned on create (caller value, configured generator, or
  "<prefix>_<random>")
- defaults: applied on create only
- values: coerced for backends without native types

Dialect coercion:

    type      memory   sqlite              postgresql
    boolean   native   0/1                 native
    date      native   ISO 8601 string     native
    json      copy     json.dumps text     native (JSONB)
"""

from __future__ import annotations

import copy
import json
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any, Literal

from genro_toolbox import get_uuid

from ..errors import InvalidConfigurationError, InvalidOperatorUsageError, SchemaNotFoundError
from ..schema import Boolean, Date, Json, Number, String
from .where import ResolvedCondition, Where, WhereCondition, WherePlan, build_plan, normalize_where

if TYPE_CHECKING:
    from ..schema import EntitySchema
    from ..store_config import StoreOptions

Dialect = Literal["memory", "sqlite", "postgresql"]
Action = Literal["create", "update"]

ID_FIELD = "id"


class EntityTransformer:
    """Per-backend input/output transformation for every entity.

    Args:
        schema: Model name -> EntitySchema map.
        options: Store options (advanced.generate_id is used on create).
        dialect: Backend value representation ("memory", "sqlite", "postgresql").
    """

    def __init__(
        self,
        schema: Mapping[str, EntitySchema],
        options: StoreOptions | None = None,
        dialect: Dialect = "memory",
    ):
        self.schema = schema
        self.options = options
        self.dialect = dialect

    # -------------------------------------------------------------------------
    # Names
    # -------------------------------------------------------------------------

    def get_schema(self, model: str) -> EntitySchema:
        """Return the EntitySchema for a model, raising SchemaNotFoundError."""
        try:
            return self.schema[model]
        except KeyError:
            raise SchemaNotFoundError(model, self.schema) from None

    def get_entity_name(self, model: str) -> str:
        """Storage table name for a model."""
        return self.get_schema(model).entity_name

    def get_field(self, model: str, name: str) -> str:
        """Storage column name for a logical field. `id` passes through."""
        if name == ID_FIELD:
            return ID_FIELD
        return self.get_schema(model).field(name).storage_name  # type: ignore[return-value]

    def check_select(self, model: str, select: Iterable[str] | None) -> list[str] | None:
        """Validate a select list, returning it as a list (or None)."""
        if select is None:
            return None
        selected = list(select)
        for name in selected:
            self.get_field(model, name)
        return selected

    # -------------------------------------------------------------------------
    # Ids
    # -------------------------------------------------------------------------

    def generate_id(self, model: str) -> str:
        """New record id from the configured generator or the entity prefix."""
        generator = self.options.advanced.generate_id if self.options else None
        if generator is not None:
            new_id = generator(model)
            if not new_id:
                raise InvalidConfigurationError(
                    f"advanced.generate_id returned an empty id for model '{model}'",
                    meta={"model": model},
                )
            return str(new_id)
        prefix = self.get_schema(model).entity_prefix
        return f"{prefix}_{get_uuid()}"

    # -------------------------------------------------------------------------
    # Value coercion
    # -------------------------------------------------------------------------

    def encode_value(self, field_type: str, value: Any) -> Any:
        """Convert a logical value into the backend representation."""
        if value is None:
            return None
        if self.dialect == "sqlite":
            if field_type == Boolean:
                return 1 if value else 0
            if field_type == Date and isinstance(value, datetime):
                return value.isoformat()
            if field_type == Json:
                return json.dumps(value, default=str)
            return value
        if field_type == Json:
            return copy.deepcopy(value)
        return value

    def decode_value(self, field_type: str, value: Any) -> Any:
        """Convert a backend value back into its logical representation."""
        if value is None:
            return None
        if self.dialect == "sqlite":
            if field_type == Boolean:
                return bool(value)
            if field_type == Date and isinstance(value, str):
                return _parse_datetime(value)
            if field_type == Json and isinstance(value, str):
                return json.loads(value)
            if field_type == Number and isinstance(value, float) and value.is_integer():
                return int(value)
            return value
        if field_type == Json:
            return copy.deepcopy(value)
        return value

    # -------------------------------------------------------------------------
    # Records
    # -------------------------------------------------------------------------

    def transform_input(
        self, data: Mapping[str, Any], model: str, action: Action
    ) -> dict[str, Any]:
        """Convert entity data into a backend record.

        On create: assigns the id and applies defaults to fields whose value
        is missing. On update: the id is immutable and may not appear. On both
        actions: fields without a value and without a default are omitted;
        explicit None is written as None.

        Raises:
            SchemaNotFoundError: Unknown model.
            FieldNotFoundError: Data contains a key that is not a field.
            InvalidOperatorUsageError: Update data contains the id.
        """
        entity = self.get_schema(model)
        for key in data:
            if key != ID_FIELD:
                entity.field(key)

        record: dict[str, Any] = {}
        if action == "create":
            supplied = data.get(ID_FIELD)
            record[ID_FIELD] = supplied if supplied else self.generate_id(model)
        elif ID_FIELD in data:
            raise InvalidOperatorUsageError(action, ID_FIELD, "record ids cannot be changed")

        for name, field in entity.fields.items():
            if name in data:
                value = data[name]
            elif action == "create" and field.has_default:
                value = field.default_value()
            else:
                continue
            record[field.storage_name] = self.encode_value(field.type, value)  # type: ignore[index]
        return record

    def transform_output(
        self,
        row: Mapping[str, Any] | None,
        model: str,
        select: Iterable[str] | None = None,
    ) -> dict[str, Any] | None:
        """Convert a backend record into entity data (None for a missing row)."""
        if row is None:
            return None
        entity = self.get_schema(model)
        selected = set(select) if select is not None else None

        result: dict[str, Any] = {}
        if ID_FIELD in row and (selected is None or ID_FIELD in selected):
            result[ID_FIELD] = row[ID_FIELD]

        for name, field in entity.fields.items():
            if selected is not None and name not in selected:
                continue
            if field.storage_name not in row:
                continue
            result[name] = self.decode_value(field.type, row[field.storage_name])
        return result

    # -------------------------------------------------------------------------
    # Where clauses
    # -------------------------------------------------------------------------

    def field_type(self, model: str, name: str) -> str:
        if name == ID_FIELD:
            return String
        return self.get_schema(model).field(name).type

    def convert_where_clause(self, model: str, where: Where | None) -> WherePlan:
        """Resolve a where clause into a WherePlan for this backend.

        Field names go through get_field(); values go through encode_value()
        (element-wise for `in`). Pattern operators keep their string value.
        """
        self.get_schema(model)
        conditions = normalize_where(where)

        def resolve(cond: WhereCondition) -> ResolvedCondition:
            column = self.get_field(model, cond.field)
            field_type = self.field_type(model, cond.field)
            if cond.operator == "in":
                value: Any = [self.encode_value(field_type, v) for v in cond.value]
            elif cond.operator in ("contains", "starts_with", "ends_with", "ilike"):
                value = cond.value
            else:
                value = self.encode_value(field_type, cond.value)
            return ResolvedCondition(
                field=cond.field, column=column, operator=cond.operator, value=value
            )

        return build_plan(conditions, resolve)


def _parse_datetime(value: str) -> datetime | str:
    """Parse an ISO 8601 string, leaving unparseable text untouched."""
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value


__all__ = ["Action", "Dialect", "EntityTransformer", "ID_FIELD"]
