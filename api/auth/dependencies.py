"""
Auth dependencies for protected FastAPI routes.

- `get_current_user`: token from the session cookie or `Authorization: Bearer`,
  401 when missing/invalid/expired or the user is gone or inactive.
- `require_roles(...)`: same, plus 403 when the role is not allowed.
- `get_optional_user`: same derivation, but any failure means "anonymous".
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable

from fastapi import Depends, HTTPException, Request, status

from core.db import Database, get_db

from . import repository, security, service


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        return ""

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        return ""

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer":
        return ""
    return token


def extract_token(request: Request) -> str:
    cookie_token = (request.cookies.get(security.cookie_name()) or "").strip()
    if cookie_token:
        return cookie_token
    return _extract_bearer_token(request.headers.get("Authorization"))


async def get_current_user(request: Request, db: Database = Depends(get_db)) -> dict[str, Any]:
    token = extract_token(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="You are not logged in. Please log in to get access.",
        )
    return await service.get_user_from_access_token(db, token)


async def get_optional_user(request: Request, db: Database = Depends(get_db)) -> dict[str, Any] | None:
    token = extract_token(request)
    if not token:
        return None
    try:
        return await service.get_user_from_access_token(db, token)
    except HTTPException:
        return None


def require_roles(*roles: str) -> Callable[..., Awaitable[dict[str, Any]]]:
    allowed = frozenset(roles)

    async def dependency(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
        if str(current_user.get("role")) not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action.",
            )
        return current_user

    return dependency


require_admin = require_roles(repository.ROLE_ADMIN)
require_editor = require_roles(repository.ROLE_EDITOR, repository.ROLE_ADMIN)
