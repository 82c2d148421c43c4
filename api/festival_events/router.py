from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Query, status

from auth import dependencies as auth_dependencies
from core import crud
from core.db import Database, get_db
from core.filters import parse_bool_param, parse_datetime_param
from core.pagination import MAX_LIMIT, PageParams, page_params
from core.responses import ok, serialize, serialize_many
from events import schemas

from . import service
from .repository import FESTIVAL_EVENTS, PUBLIC_LIMIT

router = APIRouter(prefix="/festival-events")


@router.get("")
async def get_festival_events(
    params: PageParams = Depends(page_params),
    search: str = Query(default="", max_length=200),
    active: str | None = Query(default=None),
    upcoming: str | None = Query(default=None),
    past: str | None = Query(default=None),
    date_from: str | None = Query(default=None, alias="dateFrom"),
    date_to: str | None = Query(default=None, alias="dateTo"),
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    rows, pagination = await service.list_festival_events(
        db,
        params,
        search=search,
        is_active=parse_bool_param(active),
        upcoming=parse_bool_param(upcoming) is True,
        past=parse_bool_param(past) is True,
        date_from=parse_datetime_param(date_from),
        date_to=parse_datetime_param(date_to),
    )
    return ok(
        data={"festivalEvents": serialize_many(rows), "pagination": pagination.to_dict()},
        message="Festival events retrieved successfully",
    )


@router.get("/public")
async def get_public_festival_events(
    limit: int = Query(default=PUBLIC_LIMIT, ge=1, le=MAX_LIMIT),
    db: Database = Depends(get_db),
) -> dict:
    rows = await service.list_public_festival_events(db, limit)
    return ok(data=serialize_many(rows), message="Public festival events retrieved successfully")


@router.get("/{event_id}")
async def get_festival_event_by_id(
    event_id: crud.RecordId,
    db: Database = Depends(get_db),
    viewer: dict | None = Depends(auth_dependencies.get_optional_user),
) -> dict:
    row = await crud.get_visible_or_404(db, FESTIVAL_EVENTS, event_id, viewer)
    return ok(data=serialize(row), message="Festival event retrieved successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_festival_event(
    body: dict = Body(...),
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    payload = crud.parse_model(schemas.EventCreate, body)
    row = await service.create_festival_event(db, payload)
    return ok(data=serialize(row), message="Festival event created successfully")


@router.put("/{event_id}")
async def update_festival_event(
    event_id: crud.RecordId,
    body: dict = Body(...),
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    payload = crud.parse_model(schemas.EventUpdate, body)
    row = await service.update_festival_event(db, event_id, payload)
    return ok(data=serialize(row), message="Festival event updated successfully")


@router.patch("/{event_id}/toggle-status")
async def toggle_festival_event_status(
    event_id: crud.RecordId,
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    row = await crud.toggle_flag(db, FESTIVAL_EVENTS, event_id, "is_active")
    return ok(data=serialize(row), message="Festival event status toggled successfully")


@router.delete("/{event_id}")
async def delete_festival_event(
    event_id: crud.RecordId,
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    row = await crud.delete_or_404(db, FESTIVAL_EVENTS, event_id)
    return ok(data={"id": row["id"], "title": row["title"]}, message="Festival event deleted successfully")
