# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for EntityTransformer: names, ids, defaults and coercion."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from consent_store.adapters import EntityTransformer
from consent_store.errors import (
    FieldNotFoundError,
    InvalidConfigurationError,
    InvalidOperatorUsageError,
    SchemaNotFoundError,
)
from consent_store.schema import get_schema
from consent_store.store_config import AdvancedOptions, StoreOptions, TableOptions


@pytest.fixture
def schema():
    return get_schema()


@pytest.fixture
def transformer(schema) -> EntityTransformer:
    return EntityTransformer(schema, StoreOptions())


@pytest.fixture
def sqlite_transformer(schema) -> EntityTransformer:
    return EntityTransformer(schema, StoreOptions(), "sqlite")


class TestNames:
    """Model and field name resolution."""

    def test_unknown_model(self, transformer):
        """Unknown models raise SchemaNotFoundError listing valid ones."""
        with pytest.raises(SchemaNotFoundError) as exc_info:
            transformer.get_schema("widget")
        assert "subject" in exc_info.value.available

    def test_entity_name_override(self):
        """entity_name from table options is the storage name."""
        options = StoreOptions(tables={"subject": TableOptions(entity_name="people")})
        transformer = EntityTransformer(get_schema(options), options)
        assert transformer.get_entity_name("subject") == "people"

    def test_field_rename(self):
        """get_field returns the storage column."""
        options = StoreOptions(tables={"consent": TableOptions(fields={"given_at": "created"})})
        transformer = EntityTransformer(get_schema(options), options)
        assert transformer.get_field("consent", "given_at") == "created"
        assert transformer.get_field("consent", "id") == "id"

    def test_unknown_field(self, transformer):
        """Unknown fields raise FieldNotFoundError listing valid fields."""
        with pytest.raises(FieldNotFoundError) as exc_info:
            transformer.get_field("subject", "nickname")
        assert "external_id" in exc_info.value.message

    def test_check_select(self, transformer):
        """select lists are validated against the schema."""
        assert transformer.check_select("subject", ("id", "external_id")) == ["id", "external_id"]
        assert transformer.check_select("subject", None) is None
        with pytest.raises(FieldNotFoundError):
            transformer.check_select("subject", ["nickname"])


class TestIds:
    """Id assignment on create."""

    def test_prefix_id(self, transformer):
        """Without a generator ids are <prefix>_<random>."""
        record = transformer.transform_input({}, "subject", "create")
        assert record["id"].startswith("sub_")
        other = transformer.transform_input({}, "subject", "create")
        assert other["id"] != record["id"]

    def test_caller_id_wins(self, transformer):
        """A caller-supplied id is kept."""
        record = transformer.transform_input({"id": "sub_fixed"}, "subject", "create")
        assert record["id"] == "sub_fixed"

    def test_generator(self, schema):
        """advanced.generate_id is called with the model name."""
        calls = []

        def generate(model):
            calls.append(model)
            return f"{model}-1"

        transformer = EntityTransformer(
            schema, StoreOptions(advanced=AdvancedOptions(generate_id=generate))
        )
        record = transformer.transform_input({}, "domain", "create")
        assert record["id"] == "domain-1"
        assert calls == ["domain"]

    def test_generator_empty_id(self, schema):
        """An empty generated id is a configuration error."""
        transformer = EntityTransformer(
            schema, StoreOptions(advanced=AdvancedOptions(generate_id=lambda model: ""))
        )
        with pytest.raises(InvalidConfigurationError):
            transformer.transform_input({}, "domain", "create")

    def test_update_has_no_id(self, transformer):
        """Updates never invent an id."""
        record = transformer.transform_input({"status": "withdrawn"}, "consent", "update")
        assert "id" not in record

    def test_update_rejects_id(self, transformer):
        """Record ids are immutable."""
        with pytest.raises(InvalidOperatorUsageError, match="ids cannot be changed"):
            transformer.transform_input({"id": "cns_2", "status": "x"}, "consent", "update")


class TestDefaults:
    """Defaults apply on create only."""

    def test_defaults_on_create(self, transformer):
        """Missing fields with defaults are filled on create."""
        record = transformer.transform_input(
            {"subject_id": "sub_1", "domain_id": "dom_1", "purpose_ids": []}, "consent", "create"
        )
        assert record["status"] == "active"
        assert record["is_active"] is True
        assert isinstance(record["given_at"], datetime)
        assert "withdrawal_reason" not in record

    def test_no_defaults_on_update(self, transformer):
        """Update data only contains what the caller sent."""
        record = transformer.transform_input({"withdrawal_reason": "moved"}, "consent", "update")
        assert record == {"withdrawal_reason": "moved"}

    def test_explicit_none_kept(self, transformer):
        """Explicit None overrides a default."""
        record = transformer.transform_input({"status": None}, "consent", "create")
        assert record["status"] is None

    def test_unknown_input_key(self, transformer):
        """Data keys that are not fields are rejected."""
        with pytest.raises(FieldNotFoundError) as exc_info:
            transformer.transform_input({"nickname": "x"}, "subject", "create")
        assert exc_info.value.field == "nickname"

    def test_storage_names_used(self):
        """Records use storage column names."""
        options = StoreOptions(tables={"subject": TableOptions(fields={"external_id": "ext"})})
        transformer = EntityTransformer(get_schema(options), options)
        record = transformer.transform_input({"external_id": "u1"}, "subject", "update")
        assert record == {"ext": "u1"}
        assert transformer.transform_output({"id": "sub_1", "ext": "u1"}, "subject") == {
            "id": "sub_1",
            "external_id": "u1",
        }


class TestCoercion:
    """Dialect value coercion."""

    def test_sqlite_encoding(self, sqlite_transformer):
        """SQLite stores booleans as 0/1, dates as text, JSON as text."""
        when = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
        record = sqlite_transformer.transform_input(
            {
                "name": "example.com",
                "is_verified": False,
                "allowed_origins": ["a"],
                "created_at": when,
            },
            "domain",
            "create",
        )
        assert record["is_verified"] == 0
        assert record["is_active"] == 1
        assert record["allowed_origins"] == '["a"]'
        assert record["created_at"] == "2024-05-01T12:30:00+00:00"

    def test_sqlite_decoding(self, sqlite_transformer):
        """Stored values come back as logical values."""
        row = {
            "id": "dom_1",
            "name": "example.com",
            "is_verified": 0,
            "allowed_origins": '["a", "b"]',
            "created_at": "2024-05-01T12:30:00Z",
        }
        result = sqlite_transformer.transform_output(row, "domain")
        assert result["is_verified"] is False
        assert result["allowed_origins"] == ["a", "b"]
        assert result["created_at"] == datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)

    def test_sqlite_integer_numbers(self, sqlite_transformer):
        """REAL columns holding whole numbers decode to int."""
        assert sqlite_transformer.decode_value("number", 3.0) == 3
        assert sqlite_transformer.decode_value("number", 3.5) == 3.5

    def test_memory_json_copied(self, transformer):
        """JSON values are copied so callers cannot mutate stored data."""
        origins = ["a"]
        record = transformer.transform_input(
            {"name": "x", "allowed_origins": origins}, "domain", "create"
        )
        origins.append("b")
        assert record["allowed_origins"] == ["a"]

    def test_output_missing_row(self, transformer):
        """A missing row stays None."""
        assert transformer.transform_output(None, "subject") is None

    def test_output_select(self, transformer):
        """Only selected fields are returned."""
        row = {"id": "sub_1", "external_id": "u1", "is_identified": True}
        selected = transformer.transform_output(row, "subject", ["external_id"])
        assert selected == {"external_id": "u1"}


class TestConvertWhere:
    """Where clause resolution."""

    def test_columns_and_values(self, sqlite_transformer):
        """Fields map to columns and values are encoded."""
        plan = sqlite_transformer.convert_where_clause(
            "consent",
            [
                {"field": "is_active", "value": True},
                {"field": "status", "value": ["active", "pending"], "operator": "in"},
            ],
        )
        assert [(c.column, c.value) for c in plan.and_group] == [
            ("is_active", 1),
            ("status", ["active", "pending"]),
        ]

    def test_or_group(self, transformer):
        """OR conditions are kept apart from AND conditions."""
        plan = transformer.convert_where_clause(
            "consent",
            [
                {"field": "domain_id", "value": "dom_a", "connector": "OR"},
                {"field": "subject_id", "value": "sub_1"},
                {"field": "domain_id", "value": "dom_b", "connector": "or"},
            ],
        )
        assert [c.field for c in plan.and_group] == ["subject_id"]
        assert [c.value for c in plan.or_group] == ["dom_a", "dom_b"]

    def test_unknown_where_field(self, transformer):
        """Where clauses naming unknown fields are rejected."""
        with pytest.raises(FieldNotFoundError):
            transformer.convert_where_clause("subject", [{"field": "nickname", "value": "x"}])

    def test_in_requires_list(self, transformer):
        """The in operator needs a list value."""
        with pytest.raises(InvalidOperatorUsageError):
            transformer.convert_where_clause(
                "consent", [{"field": "status", "value": "active", "operator": "in"}]
            )
