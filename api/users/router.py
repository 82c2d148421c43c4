"""
Admin user management endpoints (ADMIN role only).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from auth import dependencies as auth_dependencies
from auth.repository import PRIVATE_FIELDS, USERS
from core import crud
from core.db import Database, get_db
from core.filters import parse_bool_param
from core.pagination import PageParams, page_params
from core.responses import ok, serialize, serialize_many

from . import schemas, service

router = APIRouter(prefix="/user", dependencies=[Depends(auth_dependencies.require_admin)])


def _public(row: dict) -> dict:
    return serialize(row, exclude=PRIVATE_FIELDS)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(payload: schemas.UserCreate, db: Database = Depends(get_db)) -> dict:
    row = await service.create_user(db, payload)
    return ok(data=_public(row), message="User created successfully")


@router.get("")
async def get_users(
    params: PageParams = Depends(page_params),
    search: str = Query(default="", max_length=200),
    role: str | None = Query(default=None, max_length=20),
    is_active: str | None = Query(default=None, alias="isActive"),
    db: Database = Depends(get_db),
) -> dict:
    rows, pagination = await service.list_users(
        db,
        params,
        search=search,
        role=role,
        is_active=parse_bool_param(is_active),
    )
    return ok(
        data={"users": serialize_many(rows, exclude=PRIVATE_FIELDS), "pagination": pagination.to_dict()},
        message="Users retrieved successfully",
    )


@router.get("/{user_id}")
async def get_user_by_id(user_id: crud.RecordId, db: Database = Depends(get_db)) -> dict:
    row = await crud.get_or_404(db, USERS, user_id)
    return ok(data=_public(row), message="User retrieved successfully")


@router.put("/{user_id}")
async def update_user(user_id: crud.RecordId, payload: schemas.UserUpdate, db: Database = Depends(get_db)) -> dict:
    row = await service.update_user(db, user_id, payload)
    return ok(data=_public(row), message="User updated successfully")


@router.patch("/{user_id}/password")
async def update_user_password(
    user_id: crud.RecordId,
    payload: schemas.PasswordUpdate,
    db: Database = Depends(get_db),
) -> dict:
    row = await service.update_password(db, user_id, payload)
    return ok(data={"id": row["id"]}, message="Password updated successfully")


@router.patch("/{user_id}/toggle-status")
async def toggle_user_status(user_id: crud.RecordId, db: Database = Depends(get_db)) -> dict:
    row = await crud.toggle_flag(db, USERS, user_id, "is_active")
    state = "activated" if row["is_active"] else "deactivated"
    return ok(data=_public(row), message=f"User {state} successfully")


@router.delete("/{user_id}")
async def delete_user(user_id: crud.RecordId, db: Database = Depends(get_db)) -> dict:
    row = await crud.delete_or_404(db, USERS, user_id)
    return ok(
        data={"id": row["id"], "email": row["email"], "name": row["name"]},
        message="User deleted successfully",
    )
