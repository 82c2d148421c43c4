"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from core import config
from core.db import Database, get_db
from core.responses import ok
from notifications.mailer import Mailer, get_mailer

from . import dependencies, schemas, security, service

router = APIRouter()


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=security.cookie_name(),
        value=token,
        max_age=security.cookie_expire_days() * 24 * 60 * 60,
        httponly=True,
        secure=config.is_production(),
        samesite="lax",
    )


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(
    request: schemas.SignupRequest,
    db: Database = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
) -> dict:
    await service.signup(db, mailer, request)
    return ok(message="User registered successfully. Please check your email for verification code.")


@router.post("/verify-otp")
async def verify_otp(
    request: schemas.VerifyOtpRequest,
    db: Database = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
) -> dict:
    await service.verify_otp(db, mailer, request)
    return ok(message="Email verified successfully")


@router.post("/resend-verification")
async def resend_verification(
    request: schemas.EmailRequest,
    db: Database = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
) -> dict:
    await service.resend_verification(db, mailer, request)
    return ok(message="A new verification code has been sent to your email")


@router.post("/login")
async def login(
    request: schemas.LoginRequest,
    response: Response,
    db: Database = Depends(get_db),
) -> dict:
    token, user_row = await service.login(db, request)
    _set_session_cookie(response, token)
    user = {
        "id": user_row["id"],
        "name": user_row.get("name"),
        "email": user_row["email"],
        "role": user_row["role"],
    }
    return ok(data={"user": user}, token=token)


@router.post("/forgot-password")
async def forgot_password(
    request: schemas.EmailRequest,
    db: Database = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
) -> dict:
    await service.forgot_password(db, mailer, request)
    return ok(message="Password reset link sent to your email")


@router.post("/reset-password")
async def reset_password(
    request: schemas.ResetPasswordRequest,
    token: str | None = Query(default=None),
    db: Database = Depends(get_db),
) -> dict:
    await service.reset_password(db, request, token=request.token or token)
    return ok(message="Password reset successful")


@router.get("/logout")
async def logout(response: Response) -> dict:
    response.delete_cookie(key=security.cookie_name(), httponly=True)
    return ok(message="Logged out successfully")


@router.get("/me")
async def me(current_user: dict = Depends(dependencies.get_current_user)) -> dict:
    return ok(data=service.public_user(current_user))
