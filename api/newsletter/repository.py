"""
Newsletter subscriber table description and lookups.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from core import crud
from core.db import Database
from core.filters import GT, GTE, WhereBuilder

SUBSCRIBERS = crud.Resource(
    table="newsletter_subscribers",
    label="Subscriber",
    columns=(
        "id",
        "email",
        "first_name",
        "last_name",
        "country_code",
        "is_active",
        "created_at",
        "updated_at",
    ),
    sortable=frozenset({"created_at", "updated_at", "email", "id"}),
)

SEARCH_COLUMNS = ("email", "first_name", "last_name")


async def get_by_email(db: Database, email: str) -> dict[str, Any] | None:
    rows = await crud.list_all(
        db,
        SUBSCRIBERS,
        WhereBuilder().equals("email", email),
        order_by=SUBSCRIBERS.order_by("id", "asc"),
        limit=1,
    )
    return rows[0] if rows else None


def admin_filter(*, search: str | None = None, is_active: bool | None = None) -> WhereBuilder:
    return WhereBuilder().search(SEARCH_COLUMNS, search).equals("is_active", is_active)


def active_after(last_id: int) -> WhereBuilder:
    return WhereBuilder().equals("is_active", True).compare("id", GT, last_id)


def active_since(since: datetime) -> WhereBuilder:
    return WhereBuilder().equals("is_active", True).compare("created_at", GTE, since)
