from __future__ import annotations

from pydantic import BaseModel, Field

from core.validation import CAMEL_CONFIG, Email, RequiredText


class ContactRequest(BaseModel):
    model_config = CAMEL_CONFIG

    first_name: RequiredText = Field(..., max_length=100)
    last_name: RequiredText = Field(..., max_length=100)
    email: Email
    phone: str | None = Field(default=None, max_length=50)
    message: RequiredText = Field(..., max_length=10_000)
