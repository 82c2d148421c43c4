"""
Event business logic.
"""

from __future__ import annotations

import logging
from typing import Any

from core import crud
from core.db import Database
from core.pagination import PageParams, Pagination

from . import schemas
from .repository import EVENTS, event_filter, upcoming_filter

logger = logging.getLogger(__name__)


async def create_event(db: Database, payload: schemas.EventCreate) -> dict[str, Any]:
    row = await crud.insert(db, EVENTS, payload.model_dump())
    logger.info("event_created id=%s", row["id"])
    return row


async def list_events(
    db: Database,
    params: PageParams,
    *,
    search: str | None,
    is_active: bool | None,
    upcoming: bool,
    past: bool,
) -> tuple[list[dict[str, Any]], Pagination]:
    where = event_filter(search=search, is_active=is_active, upcoming=upcoming, past=past)
    return await crud.list_page(db, EVENTS, where, params=params, order_by=EVENTS.order_by())


async def list_public_events(db: Database, params: PageParams) -> tuple[list[dict[str, Any]], Pagination]:
    return await crud.list_page(db, EVENTS, upcoming_filter(), params=params, order_by=EVENTS.order_by())


async def update_event(db: Database, event_id: int, payload: schemas.EventUpdate) -> dict[str, Any]:
    return await crud.update_or_404(db, EVENTS, event_id, crud.patch_values(payload))
