"""
Credential and token primitives.

- passwords: bcrypt
- session tokens: signed JWT carrying user id and role
- email verification: 6-digit numeric code, 24 h lifetime
- password reset: 32 random bytes (hex) handed to the user, only the SHA-256
  hash is stored, 10 min lifetime
"""

from __future__ import annotations

import hashlib
import secrets
import time
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

from core.config import env_int, env_str

VERIFICATION_CODE_LENGTH = 6
VERIFICATION_CODE_TTL = timedelta(hours=24)
RESET_TOKEN_TTL = timedelta(minutes=10)
RESET_TOKEN_BYTES = 32


class AuthSecurityError(RuntimeError):
    pass


def jwt_secret() -> str:
    # Local default keeps development simple.
    # In production, set JWT_SECRET in environment.
    return env_str("JWT_SECRET", "dev-change-this-secret")


def jwt_algorithm() -> str:
    return env_str("JWT_ALG", "HS256")


def access_token_expire_minutes() -> int:
    return env_int("JWT_EXPIRES_MIN", 24 * 60)


def cookie_name() -> str:
    return env_str("JWT_COOKIE_NAME", "jwt")


def cookie_expire_days() -> int:
    return env_int("JWT_COOKIE_EXPIRES_DAYS", 1)


def now_epoch_s() -> int:
    return int(time.time())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise AuthSecurityError("Password is empty.")
    return bcrypt.hashpw(password, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


def build_access_token(*, user_id: int, role: str) -> str:
    issued_at = now_epoch_s()
    expires_at = issued_at + (access_token_expire_minutes() * 60)

    payload = {
        "sub": str(user_id),
        "role": role,
        "type": "access",
        "iat": issued_at,
        "exp": expires_at,
    }
    return jwt.encode(payload, jwt_secret(), algorithm=jwt_algorithm())


def decode_access_token(token: str) -> dict[str, Any]:
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("Access token is empty.")

    try:
        payload = jwt.decode(raw, jwt_secret(), algorithms=[jwt_algorithm()])
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid access token.") from exc

    token_type = str(payload.get("type") or "").strip().lower()
    if token_type != "access":
        raise AuthSecurityError("Token is not an access token.")

    subject = str(payload.get("sub") or "").strip()
    if not subject.isdigit():
        raise AuthSecurityError("Invalid access token subject.")

    return payload


def build_verification_code() -> str:
    # 100000..999999, always six digits.
    return str(100000 + secrets.randbelow(900000))


def is_verification_code(value: str) -> bool:
    return len(value) == VERIFICATION_CODE_LENGTH and value.isascii() and value.isdigit()


def verification_code_expiry() -> datetime:
    return utc_now() + VERIFICATION_CODE_TTL


def build_reset_token() -> str:
    return secrets.token_hex(RESET_TOKEN_BYTES)


def hash_reset_token(raw_reset_token: str) -> str:
    token = (raw_reset_token or "").encode("utf-8")
    if not token:
        raise AuthSecurityError("Reset token is empty.")
    return hashlib.sha256(token).hexdigest()


def reset_token_expiry() -> datetime:
    return utc_now() + RESET_TOKEN_TTL


def is_unexpired(expires_at: datetime | None, *, now: datetime | None = None) -> bool:
    if not isinstance(expires_at, datetime):
        return False
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    return expires_at > (now or utc_now())
