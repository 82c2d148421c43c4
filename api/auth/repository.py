"""
User persistence helpers shared by `auth` and `users`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from core import crud
from core.db import Database

ROLE_EDITOR = "EDITOR"
ROLE_ADMIN = "ADMIN"
ROLES = (ROLE_EDITOR, ROLE_ADMIN)

USERS = crud.Resource(
    table="users",
    label="User",
    columns=(
        "id",
        "name",
        "email",
        "password_hash",
        "role",
        "is_verified",
        "is_active",
        "verification_code",
        "verification_code_expires_at",
        "reset_password_token_hash",
        "reset_password_expires_at",
        "created_at",
        "updated_at",
    ),
    sortable=frozenset({"created_at", "updated_at", "email", "name", "role"}),
)

# Never leave the API.
PRIVATE_FIELDS = frozenset(
    {
        "password_hash",
        "verification_code",
        "verification_code_expires_at",
        "reset_password_token_hash",
        "reset_password_expires_at",
    }
)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def get_user_by_email(db: Database, email: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {USERS.select_list}
        FROM users
        WHERE lower(email) = lower($1)
        """,
        normalize_email(email),
    )


async def get_user_by_id(db: Database, user_id: int) -> dict[str, Any] | None:
    return await crud.get_by_id(db, USERS, user_id)


async def get_user_by_reset_hash(db: Database, token_hash: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {USERS.select_list}
        FROM users
        WHERE reset_password_token_hash = $1
        """,
        token_hash,
    )


async def email_taken_by_other(db: Database, email: str, user_id: int) -> bool:
    row = await db.fetch_one(
        """
        SELECT 1 AS taken
        FROM users
        WHERE lower(email) = lower($1)
          AND id <> $2
        LIMIT 1
        """,
        normalize_email(email),
        user_id,
    )
    return row is not None


async def create_user(
    db: Database,
    *,
    email: str,
    password_hash: str,
    name: str | None = None,
    role: str = ROLE_EDITOR,
    is_verified: bool = False,
    is_active: bool = True,
    verification_code: str | None = None,
    verification_code_expires_at: datetime | None = None,
) -> dict[str, Any]:
    return await crud.insert(
        db,
        USERS,
        {
            "email": normalize_email(email),
            "password_hash": password_hash,
            "name": name,
            "role": role,
            "is_verified": is_verified,
            "is_active": is_active,
            "verification_code": verification_code,
            "verification_code_expires_at": verification_code_expires_at,
        },
    )


async def delete_user(db: Database, user_id: int) -> dict[str, Any] | None:
    return await crud.delete(db, USERS, user_id)


async def update_user(db: Database, user_id: int, changes: dict[str, Any]) -> dict[str, Any] | None:
    return await crud.update(db, USERS, user_id, changes)


async def mark_verified(db: Database, user_id: int) -> dict[str, Any] | None:
    return await update_user(
        db,
        user_id,
        {
            "is_verified": True,
            "verification_code": None,
            "verification_code_expires_at": None,
        },
    )


async def set_verification_code(
    db: Database, user_id: int, *, code: str, expires_at: datetime
) -> dict[str, Any] | None:
    return await update_user(
        db,
        user_id,
        {"verification_code": code, "verification_code_expires_at": expires_at},
    )


async def set_reset_token(
    db: Database, user_id: int, *, token_hash: str, expires_at: datetime
) -> dict[str, Any] | None:
    return await update_user(
        db,
        user_id,
        {"reset_password_token_hash": token_hash, "reset_password_expires_at": expires_at},
    )


async def replace_password(db: Database, user_id: int, *, password_hash: str) -> dict[str, Any] | None:
    """
    Store a new password and burn any outstanding reset token.
    """
    return await update_user(
        db,
        user_id,
        {
            "password_hash": password_hash,
            "reset_password_token_hash": None,
            "reset_password_expires_at": None,
        },
    )
