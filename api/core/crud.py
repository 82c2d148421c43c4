"""
Generic paginated CRUD over one table (raw SQL).

Each content feature describes its table with a `Resource` and reuses the
operations below; feature-specific SQL stays in the feature package.

Table and column names are interpolated into SQL, so they must only ever come
from a `Resource` definition, never from request input. Sorting goes through
`Resource.order_by`, which whitelists columns.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Annotated, Any

from fastapi import HTTPException, Path, status
from pydantic import BaseModel, ValidationError

from .db import Database
from .filters import WhereBuilder
from .pagination import PageParams, Pagination
from .responses import to_snake
from .validation import describe_errors

logger = logging.getLogger(__name__)

# Primary keys are BIGSERIAL; anything outside that range cannot exist.
MAX_RECORD_ID = 2**63 - 1

RecordId = Annotated[int, Path(ge=1, le=MAX_RECORD_ID)]


@dataclass(frozen=True)
class Resource:
    table: str
    label: str
    columns: tuple[str, ...]
    sortable: frozenset[str] = field(default_factory=lambda: frozenset({"created_at", "updated_at"}))
    default_sort: str = "created_at"
    default_direction: str = "desc"

    @property
    def select_list(self) -> str:
        return ", ".join(self.columns)

    @property
    def not_found(self) -> str:
        return f"{self.label} not found"

    def order_by(self, sort_by: str | None = None, direction: str | None = None) -> str:
        """
        Build a safe ORDER BY clause. Unknown columns fall back to the default.
        """
        column = to_snake((sort_by or "").strip()) or self.default_sort
        if column not in self.sortable:
            column = self.default_sort
        direction = (direction or self.default_direction).strip().lower()
        if direction not in {"asc", "desc"}:
            direction = self.default_direction
        # id breaks ties so pages never overlap.
        return f"ORDER BY {column} {direction.upper()}, id {direction.upper()}"


def parse_model(model_cls: type[BaseModel], data: dict[str, Any]) -> BaseModel:
    """
    Validate a dict (e.g. multipart form fields) into `model_cls`, mapping
    failures to a 400 instead of a 500.
    """
    try:
        return model_cls.model_validate(data)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=describe_errors(exc.errors())) from exc


def patch_values(payload: BaseModel) -> dict[str, Any]:
    """
    Only the fields the client actually sent. Explicit nulls are dropped too,
    so a partial update never blanks a column by omission.
    """
    return {key: value for key, value in payload.model_dump(exclude_unset=True).items() if value is not None}


async def insert(db: Database, resource: Resource, values: dict[str, Any]) -> dict[str, Any]:
    columns = list(values)
    placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
    row = await db.fetch_one(
        f"""
        INSERT INTO {resource.table} ({", ".join(columns)})
        VALUES ({placeholders})
        RETURNING {resource.select_list}
        """,
        *values.values(),
    )
    if row is None:
        raise RuntimeError(f"Failed to create {resource.label.lower()}.")
    return row


async def get_by_id(db: Database, resource: Resource, item_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {resource.select_list}
        FROM {resource.table}
        WHERE id = $1
        """,
        item_id,
    )


async def count(db: Database, resource: Resource, where: WhereBuilder) -> int:
    where_sql, args = where.render()
    total = await db.fetch_val(f"SELECT count(*) FROM {resource.table} {where_sql}", *args)
    return int(total or 0)


async def list_page(
    db: Database,
    resource: Resource,
    where: WhereBuilder,
    *,
    params: PageParams,
    order_by: str,
) -> tuple[list[dict[str, Any]], Pagination]:
    total = await count(db, resource, where)
    where_sql, args = where.render()
    limit_ph = f"${len(args) + 1}"
    offset_ph = f"${len(args) + 2}"
    rows = await db.fetch_all(
        f"""
        SELECT {resource.select_list}
        FROM {resource.table}
        {where_sql}
        {order_by}
        LIMIT {limit_ph} OFFSET {offset_ph}
        """,
        *args,
        params.limit,
        params.offset,
    )
    return rows, Pagination.build(total=total, params=params)


async def list_all(
    db: Database,
    resource: Resource,
    where: WhereBuilder,
    *,
    order_by: str,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    where_sql, args = where.render()
    limit_sql = ""
    if limit is not None:
        args = [*args, limit]
        limit_sql = f"LIMIT ${len(args)}"
    return await db.fetch_all(
        f"""
        SELECT {resource.select_list}
        FROM {resource.table}
        {where_sql}
        {order_by}
        {limit_sql}
        """,
        *args,
    )


async def update(db: Database, resource: Resource, item_id: int, changes: dict[str, Any]) -> dict[str, Any] | None:
    if not changes:
        return await get_by_id(db, resource, item_id)

    assignments = ", ".join(f"{column} = ${i}" for i, column in enumerate(changes, start=2))
    return await db.fetch_one(
        f"""
        UPDATE {resource.table}
        SET {assignments}, updated_at = now()
        WHERE id = $1
        RETURNING {resource.select_list}
        """,
        item_id,
        *changes.values(),
    )


async def delete(db: Database, resource: Resource, item_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        DELETE FROM {resource.table}
        WHERE id = $1
        RETURNING {resource.select_list}
        """,
        item_id,
    )


async def get_or_404(db: Database, resource: Resource, item_id: int) -> dict[str, Any]:
    row = await get_by_id(db, resource, item_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=resource.not_found)
    return row


async def update_or_404(db: Database, resource: Resource, item_id: int, changes: dict[str, Any]) -> dict[str, Any]:
    row = await update(db, resource, item_id, changes)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=resource.not_found)
    return row


async def toggle_flag(db: Database, resource: Resource, item_id: int, column: str) -> dict[str, Any]:
    """
    Flip one boolean column: read the current value, write its negation.

    Not atomic. Two concurrent toggles can both read the same value and the
    last write wins.
    """
    if column not in resource.columns:
        raise ValueError(f"{column} is not a column of {resource.table}")
    current = await get_or_404(db, resource, item_id)
    row = await update(db, resource, item_id, {column: not bool(current[column])})
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=resource.not_found)
    logger.info("flag_toggled table=%s id=%s column=%s value=%s", resource.table, item_id, column, row[column])
    return row


async def delete_or_404(db: Database, resource: Resource, item_id: int) -> dict[str, Any]:
    row = await delete(db, resource, item_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=resource.not_found)
    logger.info("record_deleted table=%s id=%s", resource.table, item_id)
    return row


async def get_visible_or_404(
    db: Database,
    resource: Resource,
    item_id: int,
    viewer: dict[str, Any] | None,
) -> dict[str, Any]:
    """
    Anonymous callers only see active records; signed-in staff see everything.
    """
    row = await get_or_404(db, resource, item_id)
    if viewer is None and not bool(row.get("is_active", True)):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=resource.not_found)
    return row
