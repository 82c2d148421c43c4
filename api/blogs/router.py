"""
Blog API endpoints.

Create/update accept JSON or multipart form data with an optional `pdfFile`.
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
from .repository import BLOGS

router = APIRouter(prefix="/blogs")


def _page(rows: list[dict], pagination) -> dict:
    return {"blogs": serialize_many(rows), "pagination": pagination.to_dict()}


@router.get("")
async def get_all_blogs(
    params: PageParams = Depends(page_params),
    search: str = Query(default="", max_length=200),
    active: str | None = Query(default=None),
    category: str | None = Query(default=None, max_length=100),
    featured: str | None = Query(default=None),
    sort_by: str = Query(default="createdAt", alias="sortBy"),
    sort_order: str = Query(default="desc", alias="sortOrder"),
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    rows, pagination = await service.list_blogs(
        db,
        params,
        search=search,
        is_active=parse_bool_param(active),
        is_featured=parse_bool_param(featured),
        category=category,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return ok(data=_page(rows, pagination), message="Blogs retrieved successfully")


@router.get("/public")
async def get_public_blogs(
    params: PageParams = Depends(page_params),
    category: str | None = Query(default=None, max_length=100),
    featured: str | None = Query(default=None),
    db: Database = Depends(get_db),
) -> dict:
    rows, pagination = await service.list_public_blogs(
        db,
        params,
        featured_only=parse_bool_param(featured) is True,
        category=category,
    )
    return ok(data=_page(rows, pagination), message="Public blogs retrieved successfully")


@router.get("/featured")
async def get_featured_blogs(db: Database = Depends(get_db)) -> dict:
    rows = await service.list_featured_blogs(db)
    return ok(data=serialize_many(rows), message="Featured blogs retrieved successfully")


@router.get("/{blog_id}")
async def get_blog_by_id(
    blog_id: crud.RecordId,
    db: Database = Depends(get_db),
    viewer: dict | None = Depends(auth_dependencies.get_optional_user),
) -> dict:
    row = await crud.get_visible_or_404(db, BLOGS, blog_id, viewer)
    return ok(data=serialize(row), message="Blog retrieved successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_blog(
    request: Request,
    db: Database = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
    current_user: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    fields, pdf = await read_body(request, file_field="pdfFile")
    payload = crud.parse_model(schemas.BlogCreate, fields)
    row = await service.create_blog(db, storage, payload, author_id=int(current_user["id"]), pdf=pdf)
    return ok(data=serialize(row), message="Blog created successfully")


@router.put("/{blog_id}")
async def update_blog(
    blog_id: crud.RecordId,
    request: Request,
    db: Database = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    fields, pdf = await read_body(request, file_field="pdfFile")
    payload = crud.parse_model(schemas.BlogUpdate, fields)
    row = await service.update_blog(db, storage, blog_id, payload, pdf)
    return ok(data=serialize(row), message="Blog updated successfully")


@router.patch("/{blog_id}/toggle-status")
async def toggle_blog_status(
    blog_id: crud.RecordId,
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    row = await crud.toggle_flag(db, BLOGS, blog_id, "is_active")
    return ok(data=serialize(row), message="Blog status toggled successfully")


@router.patch("/{blog_id}/toggle-featured")
async def toggle_featured_status(
    blog_id: crud.RecordId,
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    row = await crud.toggle_flag(db, BLOGS, blog_id, "is_featured")
    return ok(data=serialize(row), message="Blog featured status toggled successfully")


@router.delete("/{blog_id}")
async def delete_blog(
    blog_id: crud.RecordId,
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    row = await crud.delete_or_404(db, BLOGS, blog_id)
    return ok(data={"id": row["id"], "title": row["title"]}, message="Blog deleted successfully")
