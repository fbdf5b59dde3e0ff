# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""SQL rendering of where plans."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..where import ResolvedCondition, WherePlan
    from .base import SqlDriver


LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    """Escape the escape character and the LIKE wildcards % and _."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class WhereBuilder:
    """Builds a WHERE clause and its parameters from a WherePlan.

    The AND group is joined with AND; the OR group is joined with OR and
    parenthesized; the two are conjoined:

        "a" = :w0 AND "b" = :w1 AND ("c" = :w2 OR "c" = :w3)

    An empty plan renders as "" (no WHERE clause).

    Pattern operators escape the LIKE wildcards in the value, so "%" and "_"
    only match themselves. ilike compares LOWER() of both sides; SQLite's
    LOWER() folds ASCII letters only, so non-ASCII values compare
    case-sensitively there.
    """

    COMPARISONS = {
        "eq": "=",
        "ne": "<>",
        "lt": "<",
        "lte": "<=",
        "gt": ">",
        "gte": ">=",
    }
    PATTERNS = {
        "contains": "%{}%",
        "starts_with": "{}%",
        "ends_with": "%{}",
    }

    def __init__(self, driver: SqlDriver, prefix: str = "w"):
        self.driver = driver
        self.prefix = prefix

    def build(self, plan: WherePlan) -> tuple[str, dict[str, Any]]:
        """Return (where_sql, params)."""
        params: dict[str, Any] = {}
        counter = iter(range(len(plan.conditions)))

        and_parts = [self._condition_to_sql(c, next(counter), params) for c in plan.and_group]
        or_parts = [self._condition_to_sql(c, next(counter), params) for c in plan.or_group]

        parts = list(and_parts)
        if len(or_parts) == 1:
            parts.append(or_parts[0])
        elif or_parts:
            parts.append("(" + " OR ".join(or_parts) + ")")
        return " AND ".join(parts), params

    def _condition_to_sql(
        self, cond: ResolvedCondition, index: int, params: dict[str, Any]
    ) -> str:
        """Convert a single resolved condition to SQL."""
        column = self.driver.sql_name(cond.column)
        name = f"{self.prefix}{index}"
        op = cond.operator
        value = cond.value

        if op in ("eq", "ne") and value is None:
            return f"{column} IS NULL" if op == "eq" else f"{column} IS NOT NULL"

        if op in self.COMPARISONS:
            params[name] = value
            return f"{column} {self.COMPARISONS[op]} :{name}"

        if op == "in":
            if not value:
                # Empty list: IN () always false
                return "1=0"
            placeholders = []
            for i, v in enumerate(value):
                param_name = f"{name}_{i}"
                placeholders.append(f":{param_name}")
                params[param_name] = v
            return f"{column} IN ({', '.join(placeholders)})"

        if op in self.PATTERNS:
            params[name] = self.PATTERNS[op].format(escape_like(value))
            return f"{column} LIKE :{name} ESCAPE '{LIKE_ESCAPE}'"

        # ilike: case-insensitive equality
        params[name] = value
        return f"LOWER({column}) = LOWER(:{name})"


__all__ = ["LIKE_ESCAPE", "WhereBuilder", "escape_like"]
