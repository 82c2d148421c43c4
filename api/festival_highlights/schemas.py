"""
Festival highlight request schemas.

`order` is stored in the `display_order` column.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from core.validation import CAMEL_CONFIG, RequiredText


class HighlightCreate(BaseModel):
    model_config = CAMEL_CONFIG

    title: RequiredText = Field(..., max_length=300)
    content: RequiredText
    icon: RequiredText = Field(..., max_length=100)
    bg_color: str = Field(default="bg-blue-500", max_length=100)
    hover_bg: str = Field(default="hover:bg-blue-600", max_length=100)
    border_color: str = Field(default="border-blue-500", max_length=100)
    text_color: str = Field(default="text-blue-600", max_length=100)
    display_order: int = Field(default=0, alias="order")
    is_active: bool = True


class HighlightUpdate(BaseModel):
    model_config = CAMEL_CONFIG

    title: RequiredText | None = Field(default=None, max_length=300)
    content: RequiredText | None = None
    icon: RequiredText | None = Field(default=None, max_length=100)
    bg_color: str | None = Field(default=None, max_length=100)
    hover_bg: str | None = Field(default=None, max_length=100)
    border_color: str | None = Field(default=None, max_length=100)
    text_color: str | None = Field(default=None, max_length=100)
    display_order: int | None = Field(default=None, alias="order")
    is_active: bool | None = None
