"""
Auth API schemas (request models).
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from core.validation import Email


class SignupRequest(BaseModel):
    email: Email
    password: str = Field(..., min_length=8, max_length=128)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=128)


class VerifyOtpRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    token: str = Field(..., min_length=1, max_length=16)


class EmailRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)


class ResetPasswordRequest(BaseModel):
    password: str = Field(..., min_length=8, max_length=128)
    # May also arrive as `?token=` on the query string.
    token: str | None = Field(default=None, max_length=256)
