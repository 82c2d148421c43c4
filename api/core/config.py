"""
Environment-backed settings.

Every setting is read lazily through a small function so tests can override
values with `monkeypatch.setenv` without re-importing modules.
"""

from __future__ import annotations

import os

DEFAULT_CLIENT_URL = "http://localhost:5173"
DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
)


def env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip() or default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    if raw in {"1", "true", "yes", "on"}:
        return True
    if raw in {"0", "false", "no", "off"}:
        return False
    return default


def app_env() -> str:
    return env_str("APP_ENV", "development").lower()


def is_production() -> bool:
    return app_env() == "production"


def client_url() -> str:
    return env_str("CLIENT_URL", DEFAULT_CLIENT_URL).rstrip("/")


def app_name() -> str:
    return env_str("APP_NAME", "Alenalki")


def admin_email() -> str:
    return env_str("ADMIN_EMAIL", "info@alenalki.se")


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "").strip()
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
