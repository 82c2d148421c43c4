"""
Event request schemas. Festival events use the same shapes.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from core.validation import CAMEL_CONFIG, RequiredText, UtcDatetime


class EventCreate(BaseModel):
    model_config = CAMEL_CONFIG

    title: RequiredText = Field(..., max_length=300)
    description: RequiredText
    date: UtcDatetime
    location: str | None = Field(default=None, max_length=300)
    is_online: bool = False
    is_active: bool = True
    image_url: str | None = None


class EventUpdate(BaseModel):
    model_config = CAMEL_CONFIG

    title: RequiredText | None = Field(default=None, max_length=300)
    description: RequiredText | None = None
    date: UtcDatetime | None = None
    location: str | None = Field(default=None, max_length=300)
    is_online: bool | None = None
    is_active: bool | None = None
    image_url: str | None = None
