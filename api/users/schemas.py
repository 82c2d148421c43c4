"""
Admin user-management request schemas.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field

from auth.repository import ROLES, ROLE_EDITOR
from core.validation import CAMEL_CONFIG, Email


def _check_role(value: str) -> str:
    value = (value or "").strip().upper()
    if value not in ROLES:
        raise ValueError("Role must be either EDITOR or ADMIN")
    return value


Role = Annotated[str, AfterValidator(_check_role)]


class UserCreate(BaseModel):
    model_config = CAMEL_CONFIG

    email: Email
    password: str = Field(..., min_length=8, max_length=128)
    name: str | None = Field(default=None, max_length=200)
    role: Role = ROLE_EDITOR
    is_active: bool = True


class UserUpdate(BaseModel):
    model_config = CAMEL_CONFIG

    email: Email | None = None
    password: str | None = Field(default=None, min_length=8, max_length=128)
    name: str | None = Field(default=None, max_length=200)
    role: Role | None = None
    is_active: bool | None = None
    is_verified: bool | None = None


class PasswordUpdate(BaseModel):
    password: str = Field(..., min_length=8, max_length=128)
