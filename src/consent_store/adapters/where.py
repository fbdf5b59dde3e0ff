# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Backend-agnostic where clauses and their intermediate representation.

A where clause is an ordered list of conditions:

    [
        {"field": "subject_id", "value": "sub_x1"},
        {"field": "status", "value": ["active", "pending"], "operator": "in"},
        {"field": "domain_id", "value": "dom_a", "connector": "OR"},
        {"field": "domain_id", "value": "dom_b", "connector": "OR"},
    ]

Conditions are split into an AND group (connector omitted or "AND") and an
OR group (connector "OR"). The clause matches when every AND condition
holds and, if the OR group is not empty, at least one OR condition holds:

    (AND-group) AND (OR-group)

This is not a general boolean expression: OR conditions never form an
alternative to the AND group.

EntityTransformer.convert_where_clause() resolves field names and coerces
values into a WherePlan; each adapter renders the plan into its native
predicate (to_predicate() for the memory adapter, the SQL where builder
for SQL adapters).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from ..errors import InvalidOperatorUsageError

OPERATORS = frozenset({
    "eq", "ne", "lt", "lte", "gt", "gte", "in",
    "contains", "starts_with", "ends_with", "ilike",
})
ORDERING_OPERATORS = frozenset({"lt", "lte", "gt", "gte"})
PATTERN_OPERATORS = frozenset({"contains", "starts_with", "ends_with"})
CONNECTORS = frozenset({"AND", "OR"})


@dataclass(frozen=True)
class WhereCondition:
    """One filter condition on a logical field."""

    field: str
    value: Any
    operator: str = "eq"
    connector: str = "AND"


@dataclass(frozen=True)
class ResolvedCondition:
    """A condition bound to a storage column, value already coerced."""

    field: str
    column: str
    operator: str
    value: Any


@dataclass(frozen=True)
class WherePlan:
    """Resolved conditions split into the AND group and the OR group."""

    and_group: tuple[ResolvedCondition, ...] = ()
    or_group: tuple[ResolvedCondition, ...] = ()

    @property
    def matches_all(self) -> bool:
        return not self.and_group and not self.or_group

    @property
    def conditions(self) -> tuple[ResolvedCondition, ...]:
        return self.and_group + self.or_group


Where = Iterable["WhereCondition | Mapping[str, Any]"]


def normalize_where(where: Where | None) -> list[WhereCondition]:
    """Turn a where clause (conditions or dicts) into validated WhereConditions.

    Raises:
        InvalidOperatorUsageError: Unknown operator or connector, or an
            operator used with a value of the wrong shape.
    """
    if not where:
        return []

    conditions: list[WhereCondition] = []
    for item in where:
        if isinstance(item, WhereCondition):
            cond = item
        else:
            cond = WhereCondition(
                field=item["field"],
                value=item.get("value"),
                operator=item.get("operator") or "eq",
                connector=(item.get("connector") or "AND").upper(),
            )
        _validate(cond)
        conditions.append(cond)
    return conditions


def _validate(cond: WhereCondition) -> None:
    if cond.operator not in OPERATORS:
        raise InvalidOperatorUsageError(
            cond.operator, cond.field, f"unknown operator, expected one of {sorted(OPERATORS)}"
        )
    if cond.connector not in CONNECTORS:
        raise InvalidOperatorUsageError(
            cond.operator, cond.field, f"unknown connector '{cond.connector}'"
        )
    if cond.operator == "in" and not isinstance(cond.value, (list, tuple)):
        raise InvalidOperatorUsageError(
            "in", cond.field, f"value must be a list, got {type(cond.value).__name__}"
        )
    if cond.operator in ORDERING_OPERATORS and cond.value is None:
        raise InvalidOperatorUsageError(cond.operator, cond.field, "value cannot be None")
    if cond.operator in PATTERN_OPERATORS or cond.operator == "ilike":
        if not isinstance(cond.value, str):
            raise InvalidOperatorUsageError(
                cond.operator,
                cond.field,
                f"value must be a string, got {type(cond.value).__name__}",
            )


def build_plan(
    conditions: list[WhereCondition],
    resolve: Callable[[WhereCondition], ResolvedCondition],
) -> WherePlan:
    """Partition conditions by connector, resolving each one."""
    and_group = tuple(resolve(c) for c in conditions if c.connector == "AND")
    or_group = tuple(resolve(c) for c in conditions if c.connector == "OR")
    return WherePlan(and_group=and_group, or_group=or_group)


# -----------------------------------------------------------------------------
# Memory rendering
# -----------------------------------------------------------------------------


def _compare(op: str, current: Any, expected: Any) -> bool:
    try:
        if op == "lt":
            return current < expected
        if op == "lte":
            return current <= expected
        if op == "gt":
            return current > expected
        return current >= expected
    except TypeError:
        # Incomparable types (e.g. str vs int) never match
        return False


def matches(cond: ResolvedCondition, row: Mapping[str, Any]) -> bool:
    """Evaluate one condition against a stored record.

    Missing and None values follow SQL NULL semantics: only `eq None`
    matches them.
    """
    current = row.get(cond.column)
    op = cond.operator
    expected = cond.value

    if op == "eq":
        return current is None if expected is None else current == expected
    if op == "ne":
        if expected is None:
            return current is not None
        return current is not None and current != expected

    if current is None:
        return False

    if op in ORDERING_OPERATORS:
        return _compare(op, current, expected)
    if op == "in":
        return current in expected
    if not isinstance(current, str):
        return False
    if op == "contains":
        return expected in current
    if op == "starts_with":
        return current.startswith(expected)
    if op == "ends_with":
        return current.endswith(expected)
    # ilike
    return current.lower() == expected.lower()


def to_predicate(plan: WherePlan) -> Callable[[Mapping[str, Any]], bool]:
    """Render a plan into a plain predicate over stored records."""
    if plan.matches_all:
        return lambda row: True

    def predicate(row: Mapping[str, Any]) -> bool:
        if not all(matches(c, row) for c in plan.and_group):
            return False
        if plan.or_group:
            return any(matches(c, row) for c in plan.or_group)
        return True

    return predicate


__all__ = [
    "CONNECTORS",
    "OPERATORS",
    "ResolvedCondition",
    "Where",
    "WhereCondition",
    "WherePlan",
    "build_plan",
    "matches",
    "normalize_where",
    "to_predicate",
]
