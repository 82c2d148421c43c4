"""
News table description and list filters.
"""

from __future__ import annotations

from core import crud
from core.filters import WhereBuilder

NEWS = crud.Resource(
    table="news",
    label="News",
    columns=(
        "id",
        "title",
        "content",
        "category",
        "image_url",
        "is_trending",
        "is_active",
        "created_at",
        "updated_at",
    ),
    sortable=frozenset({"created_at", "updated_at", "title", "category"}),
)

SEARCH_COLUMNS = ("title", "content", "category")


def admin_filter(
    *,
    search: str | None = None,
    is_active: bool | None = None,
    is_trending: bool | None = None,
    category: str | None = None,
) -> WhereBuilder:
    return (
        WhereBuilder()
        .search(SEARCH_COLUMNS, search)
        .equals("is_active", is_active)
        .equals("is_trending", is_trending)
        .search(("category",), category)
    )


def public_filter(*, trending_only: bool = False, category: str | None = None) -> WhereBuilder:
    return (
        WhereBuilder()
        .equals("is_active", True)
        .equals("is_trending", True if trending_only else None)
        .search(("category",), category)
    )
