"""
News API endpoints.

Create/update accept JSON or multipart form data with an optional `imageFile`.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, status

from auth import dependencies as auth_dependencies
from core import crud
from core.db import Database, get_db
from core.filters import parse_bool_param
from core.pagination import PageParams, page_params
from core.payload import read_body
from core.responses import ok, serialize, serialize_many
from media.storage import ObjectStorage, get_storage

from . import schemas, service
from .repository import NEWS

router = APIRouter(prefix="/news")


def _page(rows: list[dict], pagination) -> dict:
    return {"news": serialize_many(rows), "pagination": pagination.to_dict()}


@router.get("")
async def get_all_news(
    params: PageParams = Depends(page_params),
    search: str = Query(default="", max_length=200),
    active: str | None = Query(default=None),
    category: str | None = Query(default=None, max_length=100),
    trending: str | None = Query(default=None),
    sort_by: str = Query(default="createdAt", alias="sortBy"),
    sort_order: str = Query(default="desc", alias="sortOrder"),
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    rows, pagination = await service.list_news(
        db,
        params,
        search=search,
        is_active=parse_bool_param(active),
        is_trending=parse_bool_param(trending),
        category=category,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return ok(data=_page(rows, pagination), message="News retrieved successfully")


@router.get("/public")
async def get_public_news(
    params: PageParams = Depends(page_params),
    category: str | None = Query(default=None, max_length=100),
    trending: str | None = Query(default=None),
    db: Database = Depends(get_db),
) -> dict:
    rows, pagination = await service.list_public_news(
        db,
        params,
        trending_only=parse_bool_param(trending) is True,
        category=category,
    )
    return ok(data=_page(rows, pagination), message="Public news retrieved successfully")


@router.get("/trending")
async def get_trending_news(db: Database = Depends(get_db)) -> dict:
    rows = await service.list_trending_news(db)
    return ok(data=serialize_many(rows), message="Trending news retrieved successfully")


@router.get("/{news_id}")
async def get_news_by_id(
    news_id: crud.RecordId,
    db: Database = Depends(get_db),
    viewer: dict | None = Depends(auth_dependencies.get_optional_user),
) -> dict:
    row = await crud.get_visible_or_404(db, NEWS, news_id, viewer)
    return ok(data=serialize(row), message="News retrieved successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_news(
    request: Request,
    db: Database = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    fields, image = await read_body(request, file_field="imageFile")
    payload = crud.parse_model(schemas.NewsCreate, fields)
    row = await service.create_news(db, storage, payload, image)
    return ok(data=serialize(row), message="News created successfully")


@router.put("/{news_id}")
async def update_news(
    news_id: crud.RecordId,
    request: Request,
    db: Database = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    fields, image = await read_body(request, file_field="imageFile")
    payload = crud.parse_model(schemas.NewsUpdate, fields)
    row = await service.update_news(db, storage, news_id, payload, image)
    return ok(data=serialize(row), message="News updated successfully")


@router.patch("/{news_id}/toggle-status")
async def toggle_news_status(
    news_id: crud.RecordId,
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    row = await crud.toggle_flag(db, NEWS, news_id, "is_active")
    return ok(data=serialize(row), message="News status toggled successfully")


@router.patch("/{news_id}/toggle-trending")
async def toggle_trending_status(
    news_id: crud.RecordId,
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    row = await crud.toggle_flag(db, NEWS, news_id, "is_trending")
    return ok(data=serialize(row), message="News trending status toggled successfully")


@router.delete("/{news_id}")
async def delete_news(
    news_id: crud.RecordId,
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    row = await crud.delete_or_404(db, NEWS, news_id)
    return ok(data={"id": row["id"], "title": row["title"]}, message="News deleted successfully")
