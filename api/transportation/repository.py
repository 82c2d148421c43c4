from __future__ import annotations

from core import crud
from core.filters import WhereBuilder

TRANSPORTATIONS = crud.Resource(
    table="transportations",
    label="Transportation option",
    columns=(
        "id",
        "type",
        "title",
        "icon",
        "bg_color",
        "text_color",
        "details",
        "tip",
        "tip_color",
        "display_order",
        "is_active",
        "created_at",
        "updated_at",
    ),
    sortable=frozenset({"created_at", "updated_at", "title", "type", "display_order"}),
)

OUTPUT_RENAMES = {"display_order": "order"}

SEARCH_COLUMNS = ("title", "type")


def sort_column(sort_by: str | None) -> str | None:
    return "display_order" if (sort_by or "").strip() == "order" else sort_by


def admin_filter(*, search: str | None = None, is_active: bool | None = None) -> WhereBuilder:
    return WhereBuilder().search(SEARCH_COLUMNS, search).equals("is_active", is_active)


def public_filter() -> WhereBuilder:
    return WhereBuilder().equals("is_active", True)
