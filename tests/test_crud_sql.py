import asyncio

import pytest
from fastapi import HTTPException

from core import crud
from core.filters import WhereBuilder
from core.pagination import PageParams

GIGS = crud.Resource(
    table="gigs",
    label="Gig",
    columns=("id", "title", "city", "is_active", "created_at", "updated_at"),
    sortable=frozenset({"created_at", "title"}),
)
RETURNING = "RETURNING id, title, city, is_active, created_at, updated_at"


class RecordingDatabase:
    """
    Stands in for `core.db.Database`: records every statement and answers
    with canned results.
    """

    def __init__(self, *, one=None, many=None, value=0):
        self.calls = []
        self.one = one
        self.many = many or []
        self.value = value

    def _record(self, method, sql, args):
        self.calls.append((method, " ".join(sql.split()), args))

    async def fetch_one(self, sql, *args):
        self._record("fetch_one", sql, args)
        return self.one

    async def fetch_all(self, sql, *args):
        self._record("fetch_all", sql, args)
        return self.many

    async def fetch_val(self, sql, *args):
        self._record("fetch_val", sql, args)
        return self.value


def _active_jazz() -> WhereBuilder:
    return WhereBuilder().equals("is_active", True).search(("title", "city"), "jazz")


def test_insert_numbers_placeholders_in_column_order():
    db = RecordingDatabase(one={"id": 1, "title": "Opening night", "city": "Oslo"})
    row = asyncio.run(crud.insert(db, GIGS, {"title": "Opening night", "city": "Oslo"}))

    assert row["id"] == 1
    assert db.calls == [
        (
            "fetch_one",
            f"INSERT INTO gigs (title, city) VALUES ($1, $2) {RETURNING}",
            ("Opening night", "Oslo"),
        )
    ]


def test_insert_without_returned_row_raises():
    with pytest.raises(RuntimeError):
        asyncio.run(crud.insert(RecordingDatabase(one=None), GIGS, {"title": "x"}))


def test_get_and_delete_bind_the_id_as_first_argument():
    db = RecordingDatabase(one=None)
    asyncio.run(crud.get_by_id(db, GIGS, 7))
    asyncio.run(crud.delete(db, GIGS, 7))

    assert db.calls == [
        ("fetch_one", "SELECT id, title, city, is_active, created_at, updated_at FROM gigs WHERE id = $1", (7,)),
        ("fetch_one", f"DELETE FROM gigs WHERE id = $1 {RETURNING}", (7,)),
    ]


def test_update_sets_columns_from_second_placeholder():
    db = RecordingDatabase(one={"id": 7})
    asyncio.run(crud.update(db, GIGS, 7, {"title": "Late show", "is_active": False}))

    assert db.calls == [
        (
            "fetch_one",
            f"UPDATE gigs SET title = $2, is_active = $3, updated_at = now() WHERE id = $1 {RETURNING}",
            (7, "Late show", False),
        )
    ]


def test_update_without_changes_only_reads():
    db = RecordingDatabase(one={"id": 7})
    asyncio.run(crud.update(db, GIGS, 7, {}))

    assert [call[1].split()[0] for call in db.calls] == ["SELECT"]


def test_update_or_404_is_a_single_statement():
    db = RecordingDatabase(one=None)
    with pytest.raises(HTTPException) as excinfo:
        asyncio.run(crud.update_or_404(db, GIGS, 7, {"title": "Gone"}))

    assert excinfo.value.status_code == 404
    assert excinfo.value.detail == "Gig not found"
    assert len(db.calls) == 1


def test_list_page_numbers_limit_and_offset_after_filter_args():
    db = RecordingDatabase(many=[{"id": 3}], value=12)
    rows, pagination = asyncio.run(
        crud.list_page(
            db,
            GIGS,
            _active_jazz(),
            params=PageParams(page=3, limit=5),
            order_by=GIGS.order_by("title", "asc"),
        )
    )

    assert rows == [{"id": 3}]
    assert pagination.to_dict() == {"total": 12, "pages": 3, "page": 3, "limit": 5}

    where = "WHERE is_active = $1 AND (title ILIKE $2 OR city ILIKE $2)"
    assert db.calls == [
        ("fetch_val", f"SELECT count(*) FROM gigs {where}", (True, "%jazz%")),
        (
            "fetch_all",
            "SELECT id, title, city, is_active, created_at, updated_at FROM gigs "
            f"{where} ORDER BY title ASC, id ASC LIMIT $3 OFFSET $4",
            (True, "%jazz%", 5, 10),
        ),
    ]


def test_list_page_without_filters_starts_at_first_placeholder():
    db = RecordingDatabase(value=None)
    _, pagination = asyncio.run(crud.list_page(db, GIGS, WhereBuilder(), params=PageParams(), order_by=GIGS.order_by()))

    assert pagination.total == 0
    assert db.calls[0] == ("fetch_val", "SELECT count(*) FROM gigs", ())
    assert db.calls[1][1].endswith("ORDER BY created_at DESC, id DESC LIMIT $1 OFFSET $2")
    assert db.calls[1][2] == (10, 0)


def test_list_all_appends_limit_placeholder_only_when_limited():
    db = RecordingDatabase()
    asyncio.run(crud.list_all(db, GIGS, _active_jazz(), order_by=GIGS.order_by(), limit=3))
    asyncio.run(crud.list_all(db, GIGS, _active_jazz(), order_by=GIGS.order_by()))

    limited, unlimited = db.calls
    assert limited[1].endswith("ORDER BY created_at DESC, id DESC LIMIT $3")
    assert limited[2] == (True, "%jazz%", 3)
    assert "LIMIT" not in unlimited[1]
    assert unlimited[2] == (True, "%jazz%")


def test_search_term_is_escaped_before_binding():
    db = RecordingDatabase()
    where = WhereBuilder().search(("title",), "50%_off")
    asyncio.run(crud.list_all(db, GIGS, where, order_by=GIGS.order_by()))

    assert db.calls[0][2] == ("%50\\%\\_off%",)


def test_unknown_sort_column_falls_back_to_default():
    assert GIGS.order_by("password_hash; DROP TABLE gigs", "sideways") == "ORDER BY created_at DESC, id DESC"
