# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Every backend gives the same answers for the same calls.

SQL backends return every column, unset ones as None, while the memory
adapter only returns the fields it stored; comparisons drop None values.
"""

from __future__ import annotations

from typing import Any

import pytest

from consent_store.adapters import Adapter
from consent_store.errors import InvalidOperatorUsageError


def present(record: dict[str, Any] | None) -> dict[str, Any] | None:
    if record is None:
        return None
    return {k: v for k, v in record.items() if v is not None}


async def lifecycle(adapter: Adapter) -> list[Any]:
    """create -> find_one -> update -> delete -> find_one, collecting results."""
    results: list[Any] = []
    created = await adapter.create(
        model="domain",
        data={"id": "dom_1", "name": "example.com", "allowed_origins": ["https://example.com"]},
    )
    timestamps = ("created_at", "updated_at")
    results.append(present({k: v for k, v in created.items() if k not in timestamps}))

    where = [{"field": "id", "value": "dom_1"}]
    found = await adapter.find_one(model="domain", where=where, select=["id", "name", "is_active"])
    results.append(present(found))

    updated = await adapter.update(
        model="domain", where=where, update={"is_active": False, "description": "x"}
    )
    results.append(present({k: updated[k] for k in ("id", "is_active", "description")}))

    await adapter.delete(model="domain", where=where)
    results.append(await adapter.find_one(model="domain", where=where))
    return results


async def queries(adapter: Adapter) -> list[Any]:
    for code, essential, category in [
        ("necessary", True, "technical"),
        ("analytics", False, "usage"),
        ("marketing", False, None),
        ("ads", False, "Usage"),
    ]:
        await adapter.create(
            model="consent_purpose",
            data={
                "id": f"pur_{code}",
                "code": code,
                "name": code,
                "is_essential": essential,
                "data_category": category,
            },
        )

    def ids(rows: list[dict[str, Any]]) -> list[str]:
        return [r["id"] for r in rows]

    sort = {"field": "code", "direction": "asc"}
    return [
        ids(await adapter.find_many(model="consent_purpose", sort_by=sort)),
        ids(await adapter.find_many(
            model="consent_purpose",
            where=[
                {"field": "is_essential", "value": False},
                {"field": "data_category", "value": "usage", "connector": "OR"},
                {"field": "data_category", "value": None, "connector": "OR"},
            ],
            sort_by=sort,
        )),
        ids(await adapter.find_many(
            model="consent_purpose",
            where=[{"field": "data_category", "value": "usage", "operator": "ilike"}],
            sort_by=sort,
        )),
        ids(await adapter.find_many(
            model="consent_purpose",
            where=[{"field": "code", "value": "a", "operator": "starts_with"}],
            sort_by={"field": "code", "direction": "desc"},
        )),
        ids(await adapter.find_many(
            model="consent_purpose",
            where=[{"field": "data_category", "value": "usage", "operator": "ne"}],
            sort_by=sort,
        )),
        ids(await adapter.find_many(model="consent_purpose", sort_by=sort, limit=2, offset=1)),
        await adapter.count(
            model="consent_purpose", where=[{"field": "code", "value": [], "operator": "in"}]
        ),
        await adapter.delete_many(
            model="consent_purpose", where=[{"field": "is_essential", "value": False}]
        ),
        await adapter.count(model="consent_purpose"),
    ]


async def literal_patterns_and_null_sort(adapter: Adapter) -> list[Any]:
    """Wildcard characters in pattern values, sorting on a nullable column."""
    for domain_id, name, description in [
        ("dom_1", "50% off", "b"),
        ("dom_2", "500 off", None),
        ("dom_3", "a_b", "a"),
        ("dom_4", "axb", "c"),
    ]:
        await adapter.create(
            model="domain", data={"id": domain_id, "name": name, "description": description}
        )

    async def ids(**query: Any) -> list[str]:
        rows = await adapter.find_many(model="domain", **query)
        return [r["id"] for r in rows]

    def name(operator: str, value: str) -> list[dict[str, Any]]:
        return [{"field": "name", "value": value, "operator": operator}]

    by_id = {"field": "id"}
    return [
        await ids(where=name("contains", "0%"), sort_by=by_id),
        await ids(where=name("contains", "a_b"), sort_by=by_id),
        await ids(where=name("starts_with", "a_"), sort_by=by_id),
        await ids(where=name("ends_with", "% off"), sort_by=by_id),
        await ids(sort_by={"field": "description", "direction": "asc"}),
        await ids(sort_by={"field": "description", "direction": "desc"}),
    ]


LITERAL_PATTERNS_AND_NULL_SORT = [
    ["dom_1"],
    ["dom_3"],
    ["dom_3"],
    ["dom_1"],
    ["dom_3", "dom_1", "dom_4", "dom_2"],
    ["dom_2", "dom_4", "dom_1", "dom_3"],
]


class TestParity:
    """Memory and SQLite agree."""

    async def test_lifecycle(self, memory, sqlite_adapter):
        expected = [
            {
                "id": "dom_1",
                "name": "example.com",
                "allowed_origins": ["https://example.com"],
                "is_verified": True,
                "is_active": True,
            },
            {"id": "dom_1", "name": "example.com", "is_active": True},
            {"id": "dom_1", "is_active": False, "description": "x"},
            None,
        ]
        assert await lifecycle(memory) == expected
        assert await lifecycle(sqlite_adapter) == expected

    async def test_queries(self, memory, sqlite_adapter):
        expected = [
            ["pur_ads", "pur_analytics", "pur_marketing", "pur_necessary"],
            ["pur_analytics", "pur_marketing"],
            ["pur_ads", "pur_analytics"],
            ["pur_analytics", "pur_ads"],
            ["pur_ads", "pur_necessary"],
            ["pur_analytics", "pur_marketing"],
            0,
            3,
            1,
        ]
        assert await queries(memory) == expected
        assert await queries(sqlite_adapter) == expected

    @pytest.mark.postgres
    async def test_postgres_queries(self, pg_adapter):
        assert await queries(pg_adapter) == [
            ["pur_ads", "pur_analytics", "pur_marketing", "pur_necessary"],
            ["pur_analytics", "pur_marketing"],
            ["pur_ads", "pur_analytics"],
            ["pur_analytics", "pur_ads"],
            ["pur_ads", "pur_necessary"],
            ["pur_analytics", "pur_marketing"],
            0,
            3,
            1,
        ]

    async def test_literal_patterns_and_null_sort(self, memory, sqlite_adapter):
        """% and _ match literally; NULLs sort last ascending, first descending."""
        expected = LITERAL_PATTERNS_AND_NULL_SORT
        assert await literal_patterns_and_null_sort(memory) == expected
        assert await literal_patterns_and_null_sort(sqlite_adapter) == expected

    @pytest.mark.postgres
    async def test_postgres_literal_patterns_and_null_sort(self, pg_adapter):
        expected = LITERAL_PATTERNS_AND_NULL_SORT
        assert await literal_patterns_and_null_sort(pg_adapter) == expected

    async def test_update_rejects_id(self, memory, sqlite_adapter):
        """Record ids are immutable on every backend."""
        for adapter in (memory, sqlite_adapter):
            await adapter.create(model="domain", data={"id": "dom_1", "name": "example.com"})
            with pytest.raises(InvalidOperatorUsageError, match="ids cannot be changed"):
                await adapter.update(
                    model="domain",
                    where=[{"field": "id", "value": "dom_1"}],
                    update={"id": "dom_x"},
                )
            where = [{"field": "id", "value": "dom_1"}]
            found = await adapter.find_one(model="domain", where=where)
            assert found["name"] == "example.com"
