"""
Auth business logic: signup with email verification, login, password reset.

Token checks (verification code, reset token) all fail with the same message
so a caller cannot tell which check rejected them.
"""

from __future__ import annotations

import logging
import secrets
from typing import Any

from fastapi import HTTPException, status

from core.config import client_url
from core.db import Database, UniqueViolation
from core.responses import serialize
from notifications.mailer import Mailer, MailDeliveryError

from . import repository, schemas, security

logger = logging.getLogger(__name__)

INVALID_VERIFICATION = "Invalid or expired verification token"
INVALID_RESET = "Token is invalid or has expired"
INVALID_CREDENTIALS = "Invalid email or password."
EMAIL_UNAVAILABLE = "Email service is currently unavailable. Please try again later."


def public_user(user_row: dict[str, Any]) -> dict[str, Any]:
    return serialize(user_row, exclude=repository.PRIVATE_FIELDS)


def _mail_error(exc: MailDeliveryError, fallback: str) -> HTTPException:
    detail = EMAIL_UNAVAILABLE if exc.is_transport_error else fallback
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


async def signup(db: Database, mailer: Mailer, payload: schemas.SignupRequest) -> dict[str, Any]:
    existing = await repository.get_user_by_email(db, payload.email)
    if existing is not None and bool(existing.get("is_verified")):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this email already exists",
        )

    if existing is not None:
        # Stale unverified signup: start over instead of merging.
        await repository.delete_user(db, int(existing["id"]))
        logger.info("unverified_user_replaced user_id=%s", existing["id"])

    code = security.build_verification_code()
    try:
        user_row = await repository.create_user(
            db,
            email=payload.email,
            password_hash=security.hash_password(payload.password),
            is_verified=False,
            verification_code=code,
            verification_code_expires_at=security.verification_code_expiry(),
        )
    except UniqueViolation as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this email already exists",
        ) from exc

    logger.info("user_signed_up user_id=%s", user_row["id"])
    try:
        await mailer.send_verification_email(str(user_row["email"]), code)
    except MailDeliveryError as exc:
        raise _mail_error(exc, "Error creating user") from exc
    return user_row


async def verify_otp(db: Database, mailer: Mailer, payload: schemas.VerifyOtpRequest) -> dict[str, Any]:
    user_row = await repository.get_user_by_email(db, payload.email)
    stored_code = str((user_row or {}).get("verification_code") or "")
    submitted = payload.token.strip()
    if (
        user_row is None
        or not stored_code
        or not security.is_verification_code(submitted)
        or not secrets.compare_digest(stored_code.encode(), submitted.encode())
        or not security.is_unexpired(user_row.get("verification_code_expires_at"))
    ):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_VERIFICATION)

    verified = await repository.mark_verified(db, int(user_row["id"]))
    if verified is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_VERIFICATION)

    logger.info("user_verified user_id=%s", verified["id"])
    try:
        await mailer.send_welcome_email(str(verified["email"]))
    except MailDeliveryError as exc:
        raise _mail_error(exc, "Error verifying email") from exc
    return verified


async def resend_verification(db: Database, mailer: Mailer, payload: schemas.EmailRequest) -> None:
    user_row = await repository.get_user_by_email(db, payload.email)
    if user_row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if bool(user_row.get("is_verified")):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email is already verified")

    code = security.build_verification_code()
    await repository.set_verification_code(
        db,
        int(user_row["id"]),
        code=code,
        expires_at=security.verification_code_expiry(),
    )
    try:
        await mailer.send_verification_email(str(user_row["email"]), code)
    except MailDeliveryError as exc:
        raise _mail_error(exc, "Error sending verification email") from exc


async def login(db: Database, payload: schemas.LoginRequest) -> tuple[str, dict[str, Any]]:
    user_row = await repository.get_user_by_email(db, payload.email)
    if user_row is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS)

    if not security.verify_password(payload.password, str(user_row.get("password_hash") or "")):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS)

    if not bool(user_row.get("is_active", False)):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Your account is not active please contact admin",
        )

    if not bool(user_row.get("is_verified", False)):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please verify your email before logging in",
        )

    token = security.build_access_token(user_id=int(user_row["id"]), role=str(user_row["role"]))
    logger.info("user_logged_in user_id=%s", user_row["id"])
    return token, user_row


async def forgot_password(db: Database, mailer: Mailer, payload: schemas.EmailRequest) -> None:
    user_row = await repository.get_user_by_email(db, payload.email)
    if user_row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    raw_token = security.build_reset_token()
    await repository.set_reset_token(
        db,
        int(user_row["id"]),
        token_hash=security.hash_reset_token(raw_token),
        expires_at=security.reset_token_expiry(),
    )

    reset_url = f"{client_url()}/reset-password/{raw_token}"
    try:
        await mailer.send_password_reset_email(str(user_row["email"]), reset_url)
    except MailDeliveryError as exc:
        raise _mail_error(exc, "Error processing request") from exc
    logger.info("password_reset_requested user_id=%s", user_row["id"])


async def reset_password(db: Database, payload: schemas.ResetPasswordRequest, *, token: str | None) -> None:
    raw_token = (token or "").strip()
    if not raw_token:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Reset token is required")

    user_row = await repository.get_user_by_reset_hash(db, security.hash_reset_token(raw_token))
    if user_row is None or not security.is_unexpired(user_row.get("reset_password_expires_at")):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_RESET)

    await repository.replace_password(
        db,
        int(user_row["id"]),
        password_hash=security.hash_password(payload.password),
    )
    logger.info("password_reset user_id=%s", user_row["id"])


async def get_user_from_access_token(db: Database, access_token: str) -> dict[str, Any]:
    try:
        payload = security.decode_access_token(access_token)
    except security.AuthSecurityError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token or authentication failed.",
        ) from exc

    user_row = await repository.get_user_by_id(db, int(payload["sub"]))
    if user_row is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="The user belonging to this token no longer exists.",
        )
    if not bool(user_row.get("is_active", False)):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Your account is not active. Please contact admin.",
        )
    return user_row
