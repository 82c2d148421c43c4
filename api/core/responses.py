"""
JSON envelope helpers: `{success, message?, data?, error?}`.
"""

from __future__ import annotations

from typing import Any


def to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def to_snake(name: str) -> str:
    out: list[str] = []
    for ch in name:
        if ch.isupper():
            out.append("_")
            out.append(ch.lower())
        else:
            out.append(ch)
    return "".join(out).lstrip("_")


def serialize(
    row: dict[str, Any] | None,
    *,
    exclude: frozenset[str] = frozenset(),
    rename: dict[str, str] | None = None,
) -> dict[str, Any] | None:
    """
    Convert a DB row (snake_case columns) to the camelCase shape clients use.

    `rename` maps column names to output keys where they differ, e.g. a
    `display_order` column exposed as `order`.
    """
    if row is None:
        return None
    rename = rename or {}
    return {rename.get(key) or to_camel(key): value for key, value in row.items() if key not in exclude}


def serialize_many(
    rows: list[dict[str, Any]],
    *,
    exclude: frozenset[str] = frozenset(),
    rename: dict[str, str] | None = None,
) -> list[dict[str, Any]]:
    return [serialize(row, exclude=exclude, rename=rename) for row in rows]


def ok(data: Any = None, message: str | None = None, **extra: Any) -> dict[str, Any]:
    body: dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    body.update(extra)
    if data is not None:
        body["data"] = data
    return body


def failure(message: str, error: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "message": message}
    if error is not None:
        body["error"] = error
    return body
