"""
Festival events share the event columns and filters, in their own table.
"""

from __future__ import annotations

from core import crud
from events.repository import EVENT_COLUMNS

FESTIVAL_EVENTS = crud.Resource(
    table="festival_events",
    label="Festival event",
    columns=EVENT_COLUMNS,
    sortable=frozenset({"date", "created_at", "title"}),
    default_sort="date",
    default_direction="asc",
)

PUBLIC_LIMIT = 3
