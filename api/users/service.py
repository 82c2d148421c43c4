"""
Admin user management. Accounts created here skip email verification.

Persistence goes through `auth.repository`, which owns the users table.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException, status

from auth import repository, security
from auth.repository import USERS
from core import crud
from core.db import Database, UniqueViolation
from core.filters import WhereBuilder
from core.pagination import PageParams, Pagination

from . import schemas

logger = logging.getLogger(__name__)

EMAIL_EXISTS = "User with this email already exists"
EMAIL_TAKEN = "Email is already taken by another user"


async def create_user(db: Database, payload: schemas.UserCreate) -> dict[str, Any]:
    if await repository.get_user_by_email(db, payload.email) is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=EMAIL_EXISTS)

    try:
        row = await repository.create_user(
            db,
            email=payload.email,
            password_hash=security.hash_password(payload.password),
            name=payload.name,
            role=payload.role,
            is_verified=True,
            is_active=payload.is_active,
        )
    except UniqueViolation as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=EMAIL_EXISTS) from exc

    logger.info("user_created user_id=%s role=%s", row["id"], row["role"])
    return row


async def list_users(
    db: Database,
    params: PageParams,
    *,
    search: str | None,
    role: str | None,
    is_active: bool | None,
) -> tuple[list[dict[str, Any]], Pagination]:
    where = (
        WhereBuilder()
        .equals("role", (role or "").strip().upper() or None)
        .equals("is_active", is_active)
        .search(("email", "name"), search)
    )
    return await crud.list_page(db, USERS, where, params=params, order_by=USERS.order_by())


async def update_user(db: Database, user_id: int, payload: schemas.UserUpdate) -> dict[str, Any]:
    await crud.get_or_404(db, USERS, user_id)
    changes = crud.patch_values(payload)

    if "email" in changes and await repository.email_taken_by_other(db, changes["email"], user_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=EMAIL_TAKEN)

    password = changes.pop("password", None)
    if password:
        changes["password_hash"] = security.hash_password(password)

    try:
        row = await crud.update_or_404(db, USERS, user_id, changes)
    except UniqueViolation as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=EMAIL_TAKEN) from exc

    logger.info("user_updated user_id=%s fields=%s", user_id, ",".join(sorted(changes)))
    return row


async def update_password(db: Database, user_id: int, payload: schemas.PasswordUpdate) -> dict[str, Any]:
    row = await repository.replace_password(db, user_id, password_hash=security.hash_password(payload.password))
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=USERS.not_found)
    logger.info("user_password_replaced user_id=%s", user_id)
    return row
