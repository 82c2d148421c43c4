from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Query, status

from auth import dependencies as auth_dependencies
from core import crud
from core.db import Database, get_db
from core.filters import parse_bool_param
from core.pagination import PageParams, page_params
from core.responses import ok, serialize, serialize_many

from . import schemas, service
from .repository import OUTPUT_RENAMES, TRANSPORTATIONS

router = APIRouter(prefix="/transportations")


def _one(row: dict) -> dict:
    return serialize(row, rename=OUTPUT_RENAMES)


@router.get("")
async def get_all_transportations(
    params: PageParams = Depends(page_params),
    search: str = Query(default="", max_length=200),
    active: str | None = Query(default=None),
    sort_by: str = Query(default="createdAt", alias="sortBy"),
    sort_order: str = Query(default="desc", alias="sortOrder"),
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    rows, pagination = await service.list_transportations(
        db,
        params,
        search=search,
        is_active=parse_bool_param(active),
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return ok(
        data={"transportations": serialize_many(rows, rename=OUTPUT_RENAMES), "pagination": pagination.to_dict()},
        message="Transportation options retrieved successfully",
    )


@router.get("/public")
async def get_public_transportations(db: Database = Depends(get_db)) -> dict:
    rows = await service.list_public_transportations(db)
    return ok(
        data=serialize_many(rows, rename=OUTPUT_RENAMES),
        message="Public transportation options retrieved successfully",
    )


@router.get("/{transportation_id}")
async def get_transportation_by_id(
    transportation_id: crud.RecordId,
    db: Database = Depends(get_db),
    viewer: dict | None = Depends(auth_dependencies.get_optional_user),
) -> dict:
    row = await crud.get_visible_or_404(db, TRANSPORTATIONS, transportation_id, viewer)
    return ok(data=_one(row), message="Transportation option retrieved successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_transportation(
    body: dict = Body(...),
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    payload = crud.parse_model(schemas.TransportationCreate, body)
    row = await service.create_transportation(db, payload)
    return ok(data=_one(row), message="Transportation option created successfully")


@router.put("/{transportation_id}")
async def update_transportation(
    transportation_id: crud.RecordId,
    body: dict = Body(...),
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    payload = crud.parse_model(schemas.TransportationUpdate, body)
    row = await service.update_transportation(db, transportation_id, payload)
    return ok(data=_one(row), message="Transportation option updated successfully")


@router.patch("/{transportation_id}/toggle-status")
async def toggle_transportation_status(
    transportation_id: crud.RecordId,
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    row = await crud.toggle_flag(db, TRANSPORTATIONS, transportation_id, "is_active")
    return ok(data=_one(row), message="Transportation option status toggled successfully")


@router.delete("/{transportation_id}")
async def delete_transportation(
    transportation_id: crud.RecordId,
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    row = await crud.delete_or_404(db, TRANSPORTATIONS, transportation_id)
    return ok(
        data={"id": row["id"], "title": row["title"]},
        message="Transportation option deleted successfully",
    )
