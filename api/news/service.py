"""
News business logic.
"""

from __future__ import annotations

import logging
from typing import Any

from starlette.datastructures import UploadFile

from core import crud
from core.db import Database
from core.pagination import PageParams, Pagination
from media.storage import KIND_IMAGE, ObjectStorage, store_upload

from . import schemas
from .repository import NEWS, admin_filter, public_filter

logger = logging.getLogger(__name__)

IMAGE_UPLOAD_FAILED = "Error uploading image file"


async def create_news(
    db: Database,
    storage: ObjectStorage,
    payload: schemas.NewsCreate,
    image: UploadFile | None = None,
) -> dict[str, Any]:
    values = payload.model_dump()
    image_url = await store_upload(storage, image, KIND_IMAGE, failure_message=IMAGE_UPLOAD_FAILED)
    if image_url:
        values["image_url"] = image_url

    row = await crud.insert(db, NEWS, values)
    logger.info("news_created id=%s", row["id"])
    return row


async def list_news(
    db: Database,
    params: PageParams,
    *,
    search: str | None,
    is_active: bool | None,
    is_trending: bool | None,
    category: str | None,
    sort_by: str | None,
    sort_order: str | None,
) -> tuple[list[dict[str, Any]], Pagination]:
    where = admin_filter(search=search, is_active=is_active, is_trending=is_trending, category=category)
    return await crud.list_page(db, NEWS, where, params=params, order_by=NEWS.order_by(sort_by, sort_order))


async def list_public_news(
    db: Database,
    params: PageParams,
    *,
    trending_only: bool,
    category: str | None,
) -> tuple[list[dict[str, Any]], Pagination]:
    where = public_filter(trending_only=trending_only, category=category)
    return await crud.list_page(db, NEWS, where, params=params, order_by=NEWS.order_by())


async def list_trending_news(db: Database) -> list[dict[str, Any]]:
    return await crud.list_all(db, NEWS, public_filter(trending_only=True), order_by=NEWS.order_by())


async def update_news(
    db: Database,
    storage: ObjectStorage,
    news_id: int,
    payload: schemas.NewsUpdate,
    image: UploadFile | None = None,
) -> dict[str, Any]:
    # Unknown ids are rejected before anything is uploaded.
    await crud.get_or_404(db, NEWS, news_id)
    changes = crud.patch_values(payload)
    image_url = await store_upload(storage, image, KIND_IMAGE, failure_message=IMAGE_UPLOAD_FAILED)
    if image_url:
        changes["image_url"] = image_url
    return await crud.update_or_404(db, NEWS, news_id, changes)
