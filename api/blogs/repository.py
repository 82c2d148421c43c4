"""
Blog table description and list filters.
"""

from __future__ import annotations

from core import crud
from core.filters import WhereBuilder

BLOGS = crud.Resource(
    table="blogs",
    label="Blog",
    columns=(
        "id",
        "title",
        "content",
        "category",
        "pdf_url",
        "author_id",
        "is_featured",
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
    is_featured: bool | None = None,
    category: str | None = None,
) -> WhereBuilder:
    return (
        WhereBuilder()
        .search(SEARCH_COLUMNS, search)
        .equals("is_active", is_active)
        .equals("is_featured", is_featured)
        .search(("category",), category)
    )


def public_filter(*, featured_only: bool = False, category: str | None = None) -> WhereBuilder:
    return (
        WhereBuilder()
        .equals("is_active", True)
        .equals("is_featured", True if featured_only else None)
        .search(("category",), category)
    )
