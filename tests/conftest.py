"""
Shared fixtures: the app without its database lifespan, an in-memory table
store standing in for Postgres, and recording fakes for mail and storage.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any

import pytest
from fastapi.testclient import TestClient

from auth import repository as auth_repository
from auth import security
from core import crud, filters
from core.db import get_db
from core.pagination import Pagination
from main import create_app
from media.storage import MediaUploadError, get_storage
from notifications.mailer import MailDeliveryError, get_mailer

API = "/api/v1/users"

# Column defaults the schema would apply on INSERT.
_DEFAULTS = {
    "is_active": True,
    "is_trending": False,
    "is_featured": False,
    "is_online": False,
    "is_verified": False,
    "display_order": 0,
    "role": auth_repository.ROLE_EDITOR,
}

_ORDER_RE = re.compile(r"ORDER BY (\w+) (ASC|DESC)")


def _matches(row: dict[str, Any], cond: filters.Condition) -> bool:
    if cond.kind == filters.EQ:
        return row.get(cond.columns[0]) == cond.value
    if cond.kind == filters.SEARCH:
        term = str(cond.value).lower()
        return any(term in str(row.get(col) or "").lower() for col in cond.columns)

    current = row.get(cond.columns[0])
    if current is None:
        return False
    if cond.kind == filters.GT:
        return current > cond.value
    if cond.kind == filters.GTE:
        return current >= cond.value
    if cond.kind == filters.LT:
        return current < cond.value
    if cond.kind == filters.LTE:
        return current <= cond.value
    raise AssertionError(f"unknown condition {cond.kind}")


class FakeStore:
    """
    Rows keyed by table name, evaluated with the same `Condition`s the SQL
    builder renders.
    """

    def __init__(self) -> None:
        self.tables: dict[str, dict[int, dict[str, Any]]] = {}
        self._next_id = 1

    def table(self, name: str) -> dict[int, dict[str, Any]]:
        return self.tables.setdefault(name, {})

    def add(self, resource: crud.Resource, **values: Any) -> dict[str, Any]:
        now = datetime.now(timezone.utc)
        row = {column: None for column in resource.columns}
        row.update({key: value for key, value in _DEFAULTS.items() if key in row})
        if "created_at" in row:
            row["created_at"] = now
        if "updated_at" in row:
            row["updated_at"] = now
        row.update(values)
        row["id"] = self._next_id
        self._next_id += 1
        self.table(resource.table)[row["id"]] = row
        return dict(row)

    def rows(self, resource: crud.Resource) -> list[dict[str, Any]]:
        return [dict(row) for row in self.table(resource.table).values()]

    def select(self, resource: crud.Resource, where: filters.WhereBuilder, order_by: str = "") -> list[dict[str, Any]]:
        rows = [row for row in self.rows(resource) if all(_matches(row, cond) for cond in where.conditions)]
        match = _ORDER_RE.search(order_by or "")
        if match:
            column, direction = match.group(1), match.group(2)
            rows.sort(
                key=lambda row: (row.get(column) is None, row.get(column), row["id"]),
                reverse=direction == "DESC",
            )
        return rows

    # Replacements for core.crud

    async def insert(self, _db, resource, values):
        return self.add(resource, **values)

    async def get_by_id(self, _db, resource, item_id):
        row = self.table(resource.table).get(item_id)
        return dict(row) if row is not None else None

    async def count(self, _db, resource, where):
        return len(self.select(resource, where))

    async def list_page(self, _db, resource, where, *, params, order_by):
        rows = self.select(resource, where, order_by)
        page = rows[params.offset : params.offset + params.limit]
        return page, Pagination.build(total=len(rows), params=params)

    async def list_all(self, _db, resource, where, *, order_by, limit=None):
        rows = self.select(resource, where, order_by)
        return rows if limit is None else rows[:limit]

    async def update(self, _db, resource, item_id, changes):
        row = self.table(resource.table).get(item_id)
        if row is None:
            return None
        row.update(changes)
        row["updated_at"] = datetime.now(timezone.utc)
        return dict(row)

    async def delete(self, _db, resource, item_id):
        row = self.table(resource.table).pop(item_id, None)
        return dict(row) if row is not None else None

    # Replacements for auth.repository lookups that use raw SQL

    async def get_user_by_email(self, _db, email):
        wanted = auth_repository.normalize_email(email)
        for row in self.rows(auth_repository.USERS):
            if row["email"] == wanted:
                return row
        return None

    async def get_user_by_reset_hash(self, _db, token_hash):
        for row in self.rows(auth_repository.USERS):
            if row["reset_password_token_hash"] == token_hash:
                return row
        return None

    async def email_taken_by_other(self, _db, email, user_id):
        found = await self.get_user_by_email(_db, email)
        return found is not None and found["id"] != user_id


class FakeMailer:
    def __init__(self) -> None:
        self.sent: list[tuple[str, str, dict[str, Any]]] = []
        self.fail_with: MailDeliveryError | None = None

    async def _record(self, template: str, to: str, **context: Any) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append((template, to, context))

    def templates(self) -> list[str]:
        return [template for template, _, _ in self.sent]

    def last(self, template: str) -> tuple[str, dict[str, Any]]:
        for name, to, context in reversed(self.sent):
            if name == template:
                return to, context
        raise AssertionError(f"no {template} email sent")

    async def send_verification_email(self, email, verification_code):
        await self._record("verification", email, verification_code=verification_code)

    async def send_welcome_email(self, email):
        await self._record("welcome", email)

    async def send_password_reset_email(self, email, reset_url):
        await self._record("password-reset", email, reset_url=reset_url)

    async def send_contact_form_email(self, contact):
        await self._record("contact-form", "admin", **contact)

    async def send_contact_acknowledgement_email(self, contact):
        await self._record("contact-acknowledgement", contact["email"], **contact)

    async def send_newsletter_confirmation_email(self, email, first_name):
        await self._record("newsletter-confirmation", email, first_name=first_name)

    async def send_newsletter_issue_email(self, email, *, first_name, subject, content):
        await self._record("newsletter-issue", email, first_name=first_name, subject=subject, content=content)


class FakeStorage:
    def __init__(self) -> None:
        self.uploads: list[tuple[str, bytes, str | None]] = []
        self.fail = False

    async def upload(self, data, kind, *, filename=None, content_type=None):
        if self.fail:
            raise MediaUploadError("bucket unavailable")
        self.uploads.append((kind, data, filename))
        return f"https://cdn.test/{kind}/{len(self.uploads)}/{filename}"


@pytest.fixture
def store(monkeypatch) -> FakeStore:
    fake = FakeStore()
    for name in ("insert", "get_by_id", "count", "list_page", "list_all", "update", "delete"):
        monkeypatch.setattr(crud, name, getattr(fake, name))
    for name in ("get_user_by_email", "get_user_by_reset_hash", "email_taken_by_other"):
        monkeypatch.setattr(auth_repository, name, getattr(fake, name))
    return fake


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def app(store, mailer, storage):
    application = create_app(use_lifespan=False)
    application.dependency_overrides[get_db] = lambda: store
    application.dependency_overrides[get_mailer] = lambda: mailer
    application.dependency_overrides[get_storage] = lambda: storage
    return application


@pytest.fixture
def client(app) -> TestClient:
    with TestClient(app) as test_client:
        yield test_client


def make_user(store: FakeStore, *, role: str = auth_repository.ROLE_EDITOR, **values: Any) -> dict[str, Any]:
    defaults = {
        "email": f"{role.lower()}{store._next_id}@example.com",
        "name": role.title(),
        "password_hash": "not-a-real-hash",
        "role": role,
        "is_verified": True,
        "is_active": True,
    }
    defaults.update(values)
    return store.add(auth_repository.USERS, **defaults)


def bearer(user: dict[str, Any]) -> dict[str, str]:
    token = security.build_access_token(user_id=int(user["id"]), role=str(user["role"]))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def editor_headers(store) -> dict[str, str]:
    return bearer(make_user(store, role=auth_repository.ROLE_EDITOR))


@pytest.fixture
def admin_headers(store) -> dict[str, str]:
    return bearer(make_user(store, role=auth_repository.ROLE_ADMIN))
