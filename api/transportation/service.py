"""
Transportation option business logic.
"""

from __future__ import annotations

import logging
from typing import Any

from core import crud
from core.db import Database
from core.pagination import PageParams, Pagination

from . import schemas
from .repository import TRANSPORTATIONS, admin_filter, public_filter, sort_column

logger = logging.getLogger(__name__)


async def create_transportation(db: Database, payload: schemas.TransportationCreate) -> dict[str, Any]:
    row = await crud.insert(db, TRANSPORTATIONS, payload.model_dump())
    logger.info("transportation_created id=%s", row["id"])
    return row


async def list_transportations(
    db: Database,
    params: PageParams,
    *,
    search: str | None,
    is_active: bool | None,
    sort_by: str | None,
    sort_order: str | None,
) -> tuple[list[dict[str, Any]], Pagination]:
    order_by = TRANSPORTATIONS.order_by(sort_column(sort_by), sort_order)
    where = admin_filter(search=search, is_active=is_active)
    return await crud.list_page(db, TRANSPORTATIONS, where, params=params, order_by=order_by)


async def list_public_transportations(db: Database) -> list[dict[str, Any]]:
    order_by = TRANSPORTATIONS.order_by("display_order", "asc")
    return await crud.list_all(db, TRANSPORTATIONS, public_filter(), order_by=order_by)


async def update_transportation(
    db: Database,
    transportation_id: int,
    payload: schemas.TransportationUpdate,
) -> dict[str, Any]:
    return await crud.update_or_404(db, TRANSPORTATIONS, transportation_id, crud.patch_values(payload))
