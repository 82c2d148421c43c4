"""
Festival event business logic.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from core import crud
from core.db import Database
from core.pagination import PageParams, Pagination
from events import schemas
from events.repository import event_filter, upcoming_filter

from .repository import FESTIVAL_EVENTS

logger = logging.getLogger(__name__)


async def create_festival_event(db: Database, payload: schemas.EventCreate) -> dict[str, Any]:
    row = await crud.insert(db, FESTIVAL_EVENTS, payload.model_dump())
    logger.info("festival_event_created id=%s", row["id"])
    return row


async def list_festival_events(
    db: Database,
    params: PageParams,
    *,
    search: str | None,
    is_active: bool | None,
    upcoming: bool,
    past: bool,
    date_from: datetime | None,
    date_to: datetime | None,
) -> tuple[list[dict[str, Any]], Pagination]:
    where = event_filter(
        search=search,
        is_active=is_active,
        upcoming=upcoming,
        past=past,
        date_from=date_from,
        date_to=date_to,
    )
    return await crud.list_page(db, FESTIVAL_EVENTS, where, params=params, order_by=FESTIVAL_EVENTS.order_by())


async def list_public_festival_events(db: Database, limit: int) -> list[dict[str, Any]]:
    return await crud.list_all(
        db,
        FESTIVAL_EVENTS,
        upcoming_filter(),
        order_by=FESTIVAL_EVENTS.order_by(),
        limit=limit,
    )


async def update_festival_event(db: Database, event_id: int, payload: schemas.EventUpdate) -> dict[str, Any]:
    return await crud.update_or_404(db, FESTIVAL_EVENTS, event_id, crud.patch_values(payload))
