from __future__ import annotations

from pydantic import BaseModel, Field

from core.validation import CAMEL_CONFIG, Email, RequiredText


class SubscribeRequest(BaseModel):
    model_config = CAMEL_CONFIG

    email: Email
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    country_code: str | None = Field(default=None, max_length=10)


class UnsubscribeRequest(BaseModel):
    email: Email


class NewsletterIssue(BaseModel):
    subject: RequiredText = Field(..., max_length=300)
    content: RequiredText
