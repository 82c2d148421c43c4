"""
Structured WHERE clause builder for list endpoints.

Conditions are collected as data and rendered to asyncpg SQL (`$n`
placeholders) only at query time, so one filter description drives both the
COUNT(*) and the page query.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

EQ = "eq"
SEARCH = "search"
GT = "gt"
GTE = "gte"
LT = "lt"
LTE = "lte"

_COMPARATORS = {GT: ">", GTE: ">=", LT: "<", LTE: "<="}


def parse_bool_param(value: str | None) -> bool | None:
    """
    Map `"true"` / `"false"` query strings to booleans; anything else is "unset".
    """
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


def parse_datetime_param(value: str | None) -> datetime | None:
    raw = (value or "").strip()
    if not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@dataclass(frozen=True)
class Condition:
    kind: str
    columns: tuple[str, ...]
    value: Any


@dataclass
class WhereBuilder:
    conditions: list[Condition] = field(default_factory=list)

    def equals(self, column: str, value: Any) -> "WhereBuilder":
        if value is not None:
            self.conditions.append(Condition(EQ, (column,), value))
        return self

    def search(self, columns: tuple[str, ...], term: str | None) -> "WhereBuilder":
        """
        Case-insensitive substring match on any of `columns`.
        """
        term = (term or "").strip()
        if term:
            self.conditions.append(Condition(SEARCH, tuple(columns), term))
        return self

    def compare(self, column: str, op: str, value: Any) -> "WhereBuilder":
        if op not in _COMPARATORS:
            raise ValueError(f"Unsupported comparison: {op}")
        if value is not None:
            self.conditions.append(Condition(op, (column,), value))
        return self

    def render(self, start: int = 1) -> tuple[str, list[Any]]:
        """
        Return `("WHERE ...", args)` or `("", [])` when nothing was added.
        """
        clauses: list[str] = []
        args: list[Any] = []

        def placeholder(value: Any) -> str:
            args.append(value)
            return f"${start + len(args) - 1}"

        for cond in self.conditions:
            if cond.kind == EQ:
                clauses.append(f"{cond.columns[0]} = {placeholder(cond.value)}")
            elif cond.kind == SEARCH:
                pattern = placeholder(f"%{escape_like(cond.value)}%")
                ors = " OR ".join(f"{col} ILIKE {pattern}" for col in cond.columns)
                clauses.append(f"({ors})")
            else:
                op = _COMPARATORS[cond.kind]
                clauses.append(f"{cond.columns[0]} {op} {placeholder(cond.value)}")

        if not clauses:
            return "", []
        return "WHERE " + " AND ".join(clauses), args
