"""
Reusable pydantic field types.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, Sequence

from pydantic import AfterValidator, BeforeValidator, ConfigDict, EmailStr

from .responses import to_camel

# Request bodies use camelCase keys; python code sees snake_case.
CAMEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

INVALID_EMAIL = "Please provide a valid email address"


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def _check_not_blank(value: str) -> str:
    if not (value or "").strip():
        raise ValueError("Required fields must not be blank")
    return value


# Syntax is checked by email-validator; addresses are stored lowercased.
Email = Annotated[EmailStr, BeforeValidator(_strip), AfterValidator(str.lower)]
RequiredText = Annotated[str, AfterValidator(_check_not_blank)]


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# Naive timestamps from forms are taken as UTC.
UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


def describe_errors(errors: Sequence[Any]) -> str:
    """
    One human-readable line for the first pydantic error.

    Custom validators already carry a full sentence; built-in errors are
    prefixed with the offending field.
    """
    if not errors:
        return "Invalid request payload."
    first = errors[0]
    msg = str(first.get("msg") or "invalid value")
    if first.get("type") == "value_error":
        if msg.startswith("value is not a valid email address"):
            return INVALID_EMAIL
        return msg.removeprefix("Value error, ")
    where = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{where}: {msg}" if where else msg
