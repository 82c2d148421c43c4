"""
Blog business logic. Blogs can carry one PDF, stored in object storage.
"""

from __future__ import annotations

import logging
from typing import Any

from starlette.datastructures import UploadFile

from core import crud
from core.db import Database
from core.pagination import PageParams, Pagination
from media.storage import KIND_PDF, ObjectStorage, store_upload

from . import schemas
from .repository import BLOGS, admin_filter, public_filter

logger = logging.getLogger(__name__)

PDF_UPLOAD_FAILED = "Error uploading PDF file"


async def create_blog(
    db: Database,
    storage: ObjectStorage,
    payload: schemas.BlogCreate,
    *,
    author_id: int | None,
    pdf: UploadFile | None = None,
) -> dict[str, Any]:
    pdf_url = await store_upload(storage, pdf, KIND_PDF, failure_message=PDF_UPLOAD_FAILED)
    values = {**payload.model_dump(), "author_id": author_id}
    if pdf_url:
        values["pdf_url"] = pdf_url

    row = await crud.insert(db, BLOGS, values)
    logger.info("blog_created id=%s author_id=%s", row["id"], author_id)
    return row


async def list_blogs(
    db: Database,
    params: PageParams,
    *,
    search: str | None,
    is_active: bool | None,
    is_featured: bool | None,
    category: str | None,
    sort_by: str | None,
    sort_order: str | None,
) -> tuple[list[dict[str, Any]], Pagination]:
    where = admin_filter(search=search, is_active=is_active, is_featured=is_featured, category=category)
    return await crud.list_page(db, BLOGS, where, params=params, order_by=BLOGS.order_by(sort_by, sort_order))


async def list_public_blogs(
    db: Database,
    params: PageParams,
    *,
    featured_only: bool,
    category: str | None,
) -> tuple[list[dict[str, Any]], Pagination]:
    where = public_filter(featured_only=featured_only, category=category)
    return await crud.list_page(db, BLOGS, where, params=params, order_by=BLOGS.order_by())


async def list_featured_blogs(db: Database) -> list[dict[str, Any]]:
    return await crud.list_all(db, BLOGS, public_filter(featured_only=True), order_by=BLOGS.order_by())


async def update_blog(
    db: Database,
    storage: ObjectStorage,
    blog_id: int,
    payload: schemas.BlogUpdate,
    pdf: UploadFile | None = None,
) -> dict[str, Any]:
    # Unknown ids are rejected before anything is uploaded.
    await crud.get_or_404(db, BLOGS, blog_id)
    changes = crud.patch_values(payload)
    pdf_url = await store_upload(storage, pdf, KIND_PDF, failure_message=PDF_UPLOAD_FAILED)
    if pdf_url:
        changes["pdf_url"] = pdf_url
    return await crud.update_or_404(db, BLOGS, blog_id, changes)
