from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Query, status

from auth import dependencies as auth_dependencies
from core import crud
from core.db import Database, get_db
from core.filters import parse_bool_param
from core.pagination import PageParams, page_params
from core.responses import ok, serialize, serialize_many

from . import schemas, service
from .repository import HIGHLIGHTS, OUTPUT_RENAMES

router = APIRouter(prefix="/festival-highlights")


def _one(row: dict) -> dict:
    return serialize(row, rename=OUTPUT_RENAMES)


@router.get("")
async def get_festival_highlights(
    params: PageParams = Depends(page_params),
    search: str = Query(default="", max_length=200),
    is_active: str | None = Query(default=None, alias="isActive"),
    sort: str | None = Query(default=None, max_length=100),
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    rows, pagination = await service.list_highlights(
        db,
        params,
        search=search,
        is_active=parse_bool_param(is_active),
        sort=sort,
    )
    return ok(
        data={"highlights": serialize_many(rows, rename=OUTPUT_RENAMES), "pagination": pagination.to_dict()},
        message="Festival highlights retrieved successfully",
    )


@router.get("/public")
async def get_public_festival_highlights(db: Database = Depends(get_db)) -> dict:
    rows = await service.list_public_highlights(db)
    return ok(data=serialize_many(rows, rename=OUTPUT_RENAMES), message="Public festival highlights retrieved successfully")


@router.get("/{highlight_id}")
async def get_festival_highlight_by_id(
    highlight_id: crud.RecordId,
    db: Database = Depends(get_db),
    viewer: dict | None = Depends(auth_dependencies.get_optional_user),
) -> dict:
    row = await crud.get_visible_or_404(db, HIGHLIGHTS, highlight_id, viewer)
    return ok(data=_one(row), message="Festival highlight retrieved successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_festival_highlight(
    body: dict = Body(...),
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    payload = crud.parse_model(schemas.HighlightCreate, body)
    row = await service.create_highlight(db, payload)
    return ok(data=_one(row), message="Festival highlight created successfully")


@router.put("/{highlight_id}")
async def update_festival_highlight(
    highlight_id: crud.RecordId,
    body: dict = Body(...),
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    payload = crud.parse_model(schemas.HighlightUpdate, body)
    row = await service.update_highlight(db, highlight_id, payload)
    return ok(data=_one(row), message="Festival highlight updated successfully")


@router.patch("/{highlight_id}/toggle-status")
async def toggle_festival_highlight_status(
    highlight_id: crud.RecordId,
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    row = await crud.toggle_flag(db, HIGHLIGHTS, highlight_id, "is_active")
    return ok(data=_one(row), message="Festival highlight status toggled successfully")


@router.delete("/{highlight_id}")
async def delete_festival_highlight(
    highlight_id: crud.RecordId,
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    row = await crud.delete_or_404(db, HIGHLIGHTS, highlight_id)
    return ok(data={"id": row["id"], "title": row["title"]}, message="Festival highlight deleted successfully")
