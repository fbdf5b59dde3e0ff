# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for fields, entities and schema discovery."""

from __future__ import annotations

from datetime import datetime

import pytest

from consent_store.entities import ConsentEntity, DomainEntity, SubjectEntity
from consent_store.errors import FieldNotFoundError, InvalidConfigurationError
from consent_store.schema import (
    Boolean,
    Entity,
    Field,
    Fields,
    Json,
    Number,
    String,
    discover_entities,
    get_schema,
)
from consent_store.store_config import StoreOptions, TableOptions

MODELS = {
    "audit_log",
    "consent",
    "consent_geo_location",
    "consent_policy",
    "consent_purpose",
    "consent_purpose_junction",
    "consent_record",
    "consent_withdrawal",
    "domain",
    "geo_location",
    "subject",
}


class TestField:
    """Field definitions."""

    def test_storage_name_defaults_to_name(self):
        """storage_name falls back to the logical name."""
        assert Field("status").storage_name == "status"
        assert Field("status", storage_name="state").storage_name == "state"

    def test_unknown_type_rejected(self):
        """Only the logical types are accepted."""
        with pytest.raises(ValueError, match="Unknown field type"):
            Field("x", type="varchar")

    def test_callable_default_called(self):
        """Callable defaults produce a fresh value each time."""
        field = Field("created_at", default=lambda: datetime(2024, 1, 1))
        assert field.has_default
        assert field.default_value() == datetime(2024, 1, 1)

    def test_mutable_default_copied(self):
        """Mutable literal defaults are never shared."""
        field = Field("tags", Json, default=[])
        first = field.default_value()
        first.append("x")
        assert field.default_value() == []

    def test_no_default(self):
        """None means no default."""
        assert not Field("note").has_default

    def test_renamed(self):
        """renamed() keeps everything but the storage name."""
        field = Field("is_active", Boolean, default=True).renamed("active")
        assert field.name == "is_active"
        assert field.storage_name == "active"
        assert field.default is True


class TestFields:
    """Fields registry."""

    def test_field_registers_in_order(self):
        """Fields keep declaration order."""
        fields = Fields()
        fields.field("b")
        fields.field("a", Number)
        assert list(fields) == ["b", "a"]
        assert fields["a"].type == Number

    def test_id_is_implicit(self):
        """Declaring id is rejected."""
        with pytest.raises(ValueError, match="implicit"):
            Fields().field("id")


class TestEntity:
    """Entity definitions and schema building."""

    def test_name_required(self):
        """Entities without a name cannot be built."""

        class Nameless(Entity):
            pass

        with pytest.raises(ValueError, match="must define 'name'"):
            Nameless()

    def test_build_schema(self):
        """Schema reflects name, prefix and declared fields."""
        schema = SubjectEntity().build_schema()
        assert schema.model == "subject"
        assert schema.entity_name == "subject"
        assert schema.entity_prefix == "sub"
        assert "external_id" in schema.field_names
        assert schema.field("is_identified").type == Boolean

    def test_prefix_defaults_to_name(self):
        """Missing prefix uses the first three letters of the name."""

        class Device(Entity):
            name = "device"

        assert Device().build_schema().entity_prefix == "dev"

    def test_fields_read_only(self):
        """The schema field map cannot be modified."""
        schema = DomainEntity().build_schema()
        with pytest.raises(TypeError):
            schema.fields["extra"] = Field("extra")  # type: ignore[index]

    def test_unknown_field_lists_valid(self):
        """field() raises FieldNotFoundError listing valid names."""
        schema = DomainEntity().build_schema()
        with pytest.raises(FieldNotFoundError) as exc_info:
            schema.field("owner")
        assert "name" in exc_info.value.available
        assert "id" in exc_info.value.available

    def test_table_options(self):
        """Table options rename the table, the prefix and columns."""
        schema = ConsentEntity().build_schema(
            TableOptions(
                entity_name="consents",
                entity_prefix="c",
                fields={"given_at": "created"},
                additional_fields=[Field("source", String)],
            )
        )
        assert schema.entity_name == "consents"
        assert schema.entity_prefix == "c"
        assert schema.field("given_at").storage_name == "created"
        assert schema.field("source").type == String

    def test_rename_unknown_field(self):
        """Renaming a field that does not exist is an error."""
        with pytest.raises(FieldNotFoundError):
            ConsentEntity().build_schema(TableOptions(fields={"nope": "x"}))


class TestGetSchema:
    """Schema discovery."""

    def test_discovers_all_entities(self):
        """All built-in entities are found."""
        assert set(get_schema()) == MODELS

    def test_applies_table_options(self):
        """Per-table options are applied once, at build time."""
        schema = get_schema(StoreOptions(tables={"subject": TableOptions(entity_name="people")}))
        assert schema["subject"].entity_name == "people"
        assert schema["consent"].entity_name == "consent"

    def test_unknown_table_option_rejected(self):
        """Options naming an unknown model are rejected."""
        with pytest.raises(InvalidConfigurationError, match="unknown models"):
            get_schema(StoreOptions(tables={"widget": TableOptions()}))

    def test_missing_package_ignored(self):
        """Packages that cannot be imported contribute nothing."""
        assert discover_entities("no_such_package_for_entities") == {}

    def test_subclass_replaces_base(self, tmp_path, monkeypatch):
        """An extension package subclassing an entity replaces it."""
        pkg = tmp_path / "consent_ext_fixture"
        (pkg / "subject").mkdir(parents=True)
        (pkg / "__init__.py").write_text("")
        (pkg / "subject" / "__init__.py").write_text("")
        (pkg / "subject" / "table.py").write_text(
            "from consent_store.entities.subject.table import SubjectEntity\n"
            "\n"
            "\n"
            "class ExtendedSubjectEntity(SubjectEntity):\n"
            "    def configure(self):\n"
            "        super().configure()\n"
            "        self.fields.field('nickname')\n"
        )
        monkeypatch.syspath_prepend(str(tmp_path))

        classes = discover_entities("consent_store.entities", "consent_ext_fixture")
        assert classes["subject"].__name__ == "ExtendedSubjectEntity"

        schema = get_schema(packages=("consent_store.entities", "consent_ext_fixture"))
        assert "nickname" in schema["subject"].field_names
        assert "external_id" in schema["subject"].field_names
