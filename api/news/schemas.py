"""
News request schemas.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from core.validation import CAMEL_CONFIG, RequiredText


class NewsCreate(BaseModel):
    model_config = CAMEL_CONFIG

    title: RequiredText = Field(..., max_length=300)
    content: RequiredText
    category: RequiredText = Field(..., max_length=100)
    image_url: str | None = None
    is_trending: bool = False
    is_active: bool = True


class NewsUpdate(BaseModel):
    model_config = CAMEL_CONFIG

    title: RequiredText | None = Field(default=None, max_length=300)
    content: RequiredText | None = None
    category: RequiredText | None = Field(default=None, max_length=100)
    image_url: str | None = None
    is_trending: bool | None = None
    is_active: bool | None = None
