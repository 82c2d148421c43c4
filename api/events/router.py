from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Query, status

from auth import dependencies as auth_dependencies
from core import crud
from core.db import Database, get_db
from core.filters import parse_bool_param
from core.pagination import PageParams, page_params
from core.responses import ok, serialize, serialize_many

from . import schemas, service
from .repository import EVENTS

router = APIRouter(prefix="/events")


def _page(rows: list[dict], pagination) -> dict:
    return {"events": serialize_many(rows), "pagination": pagination.to_dict()}


@router.get("")
async def get_events(
    params: PageParams = Depends(page_params),
    search: str = Query(default="", max_length=200),
    active: str | None = Query(default=None),
    upcoming: str | None = Query(default=None),
    past: str | None = Query(default=None),
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    rows, pagination = await service.list_events(
        db,
        params,
        search=search,
        is_active=parse_bool_param(active),
        upcoming=parse_bool_param(upcoming) is True,
        past=parse_bool_param(past) is True,
    )
    return ok(data=_page(rows, pagination), message="Events retrieved successfully")


@router.get("/public")
async def get_public_events(
    params: PageParams = Depends(page_params),
    db: Database = Depends(get_db),
) -> dict:
    rows, pagination = await service.list_public_events(db, params)
    return ok(data=_page(rows, pagination), message="Public events retrieved successfully")


@router.get("/{event_id}")
async def get_event_by_id(
    event_id: crud.RecordId,
    db: Database = Depends(get_db),
    viewer: dict | None = Depends(auth_dependencies.get_optional_user),
) -> dict:
    row = await crud.get_visible_or_404(db, EVENTS, event_id, viewer)
    return ok(data=serialize(row), message="Event retrieved successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_event(
    body: dict = Body(...),
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    payload = crud.parse_model(schemas.EventCreate, body)
    row = await service.create_event(db, payload)
    return ok(data=serialize(row), message="Event created successfully")


@router.put("/{event_id}")
async def update_event(
    event_id: crud.RecordId,
    body: dict = Body(...),
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    payload = crud.parse_model(schemas.EventUpdate, body)
    row = await service.update_event(db, event_id, payload)
    return ok(data=serialize(row), message="Event updated successfully")


@router.patch("/{event_id}/toggle-status")
async def toggle_event_status(
    event_id: crud.RecordId,
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    row = await crud.toggle_flag(db, EVENTS, event_id, "is_active")
    return ok(data=serialize(row), message="Event status toggled successfully")


@router.delete("/{event_id}")
async def delete_event(
    event_id: crud.RecordId,
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.require_editor),
) -> dict:
    row = await crud.delete_or_404(db, EVENTS, event_id)
    return ok(data={"id": row["id"], "title": row["title"]}, message="Event deleted successfully")
