"""
Festival highlight business logic.
"""

from __future__ import annotations

import logging
from typing import Any

from core import crud
from core.db import Database
from core.pagination import PageParams, Pagination

from . import schemas
from .repository import HIGHLIGHTS, admin_filter, parse_sort, public_filter

logger = logging.getLogger(__name__)


async def create_highlight(db: Database, payload: schemas.HighlightCreate) -> dict[str, Any]:
    row = await crud.insert(db, HIGHLIGHTS, payload.model_dump())
    logger.info("festival_highlight_created id=%s", row["id"])
    return row


async def list_highlights(
    db: Database,
    params: PageParams,
    *,
    search: str | None,
    is_active: bool | None,
    sort: str | None,
) -> tuple[list[dict[str, Any]], Pagination]:
    sort_by, direction = parse_sort(sort)
    where = admin_filter(search=search, is_active=is_active)
    return await crud.list_page(db, HIGHLIGHTS, where, params=params, order_by=HIGHLIGHTS.order_by(sort_by, direction))


async def list_public_highlights(db: Database) -> list[dict[str, Any]]:
    return await crud.list_all(db, HIGHLIGHTS, public_filter(), order_by=HIGHLIGHTS.order_by())


async def update_highlight(db: Database, highlight_id: int, payload: schemas.HighlightUpdate) -> dict[str, Any]:
    return await crud.update_or_404(db, HIGHLIGHTS, highlight_id, crud.patch_values(payload))
