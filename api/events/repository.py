"""
Event table description and the date-window filter shared with festival events.
"""

from __future__ import annotations

from datetime import datetime, timezone

from core import crud
from core.filters import GTE, LT, LTE, WhereBuilder

EVENT_COLUMNS = (
    "id",
    "title",
    "description",
    "date",
    "location",
    "is_online",
    "is_active",
    "image_url",
    "created_at",
    "updated_at",
)

EVENTS = crud.Resource(
    table="events",
    label="Event",
    columns=EVENT_COLUMNS,
    sortable=frozenset({"date", "created_at", "title"}),
    default_sort="date",
    default_direction="asc",
)

SEARCH_COLUMNS = ("title", "description", "location")


def event_filter(
    *,
    search: str | None = None,
    is_active: bool | None = None,
    upcoming: bool = False,
    past: bool = False,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    now: datetime | None = None,
) -> WhereBuilder:
    """
    `upcoming` wins over `past` when both are set.
    """
    now = now or datetime.now(timezone.utc)
    where = WhereBuilder().search(SEARCH_COLUMNS, search).equals("is_active", is_active)
    if upcoming:
        where.compare("date", GTE, now)
    elif past:
        where.compare("date", LT, now)
    where.compare("date", GTE, date_from)
    where.compare("date", LTE, date_to)
    return where


def upcoming_filter(now: datetime | None = None) -> WhereBuilder:
    return event_filter(is_active=True, upcoming=True, now=now)
