"""
Async database access helpers (raw SQL) using asyncpg.

A `Database` owns one connection pool. The FastAPI lifespan creates it on
startup, stores it on `app.state.db` and closes it on shutdown (see
`api/main.py`). Handlers receive it through the `get_db` dependency instead of
reaching for a module-level pool.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg
from fastapi import Request

from .config import env_int, env_str

UniqueViolation = asyncpg.UniqueViolationError


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = env_str("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


class Database:
    def __init__(self, dsn: str | None = None) -> None:
        self._dsn = dsn
        self._pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        if self._pool is not None:
            return None
        self._pool = await asyncpg.create_pool(
            dsn=self._dsn or database_url(),
            min_size=env_int("DB_POOL_MIN_SIZE", 1),
            max_size=env_int("DB_POOL_MAX_SIZE", 5),
            command_timeout=env_int("DB_COMMAND_TIMEOUT_S", 30),
        )

    async def close(self) -> None:
        if self._pool is None:
            return None
        await self._pool.close()
        self._pool = None

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("DB pool is not initialized. Call connect() on startup.")
        return self._pool

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        row = await self.pool.fetchrow(sql, *args)
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        rows = await self.pool.fetch(sql, *args)
        return [_record_to_dict(r) for r in rows]

    async def fetch_val(self, sql: str, *args: Any) -> Any:
        return await self.pool.fetchval(sql, *args)

    async def execute(self, sql: str, *args: Any) -> str:
        """
        Run a statement (INSERT/UPDATE/DELETE/DDL). Returns the status tag.
        """
        return await self.pool.execute(sql, *args)


def get_db(request: Request) -> Database:
    return request.app.state.db
