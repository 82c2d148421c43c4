"""
Transportation option request schemas.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from core.validation import CAMEL_CONFIG, RequiredText


class TransportationCreate(BaseModel):
    model_config = CAMEL_CONFIG

    type: RequiredText = Field(..., max_length=100)
    title: RequiredText = Field(..., max_length=300)
    icon: RequiredText = Field(..., max_length=100)
    bg_color: str | None = Field(default=None, max_length=100)
    text_color: str | None = Field(default=None, max_length=100)
    details: str | None = None
    tip: str | None = None
    tip_color: str | None = Field(default=None, max_length=100)
    display_order: int = Field(default=0, alias="order")
    is_active: bool = True


class TransportationUpdate(BaseModel):
    model_config = CAMEL_CONFIG

    type: RequiredText | None = Field(default=None, max_length=100)
    title: RequiredText | None = Field(default=None, max_length=300)
    icon: RequiredText | None = Field(default=None, max_length=100)
    bg_color: str | None = Field(default=None, max_length=100)
    text_color: str | None = Field(default=None, max_length=100)
    details: str | None = None
    tip: str | None = None
    tip_color: str | None = Field(default=None, max_length=100)
    display_order: int | None = Field(default=None, alias="order")
    is_active: bool | None = None
