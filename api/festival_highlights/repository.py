from __future__ import annotations

from core import crud
from core.filters import WhereBuilder

HIGHLIGHTS = crud.Resource(
    table="festival_highlights",
    label="Festival highlight",
    columns=(
        "id",
        "title",
        "content",
        "icon",
        "bg_color",
        "hover_bg",
        "border_color",
        "text_color",
        "display_order",
        "is_active",
        "created_at",
        "updated_at",
    ),
    sortable=frozenset({"display_order", "created_at", "updated_at", "title"}),
    default_sort="display_order",
    default_direction="asc",
)

OUTPUT_RENAMES = {"display_order": "order"}

SEARCH_COLUMNS = ("title", "content")


def parse_sort(sort: str | None) -> tuple[str | None, str | None]:
    """
    `"field:dir"` -> `(column, direction)`. `order` names the display_order column.
    """
    raw = (sort or "").strip()
    if not raw:
        return None, None
    field, _, direction = raw.partition(":")
    field = field.strip()
    if field == "order":
        field = "display_order"
    return field or None, (direction.strip() or "asc")


def admin_filter(*, search: str | None = None, is_active: bool | None = None) -> WhereBuilder:
    return WhereBuilder().equals("is_active", is_active).search(SEARCH_COLUMNS, search)


def public_filter() -> WhereBuilder:
    return WhereBuilder().equals("is_active", True)
