"""
Page/limit pagination shared by every list endpoint.

Pages are 1-based: `offset = (page - 1) * limit`, `pages = ceil(total / limit)`.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass

from fastapi import Query

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# Keeps (page - 1) * limit inside a Postgres BIGINT offset.
MAX_PAGE = (2**63 - 1) // MAX_LIMIT


def offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def page_count(total: int, limit: int) -> int:
    if limit <= 0:
        return 0
    return math.ceil(total / limit)


@dataclass(frozen=True)
class PageParams:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return offset(self.page, self.limit)


@dataclass(frozen=True)
class Pagination:
    total: int
    pages: int
    page: int
    limit: int

    @classmethod
    def build(cls, *, total: int, params: PageParams) -> "Pagination":
        return cls(
            total=total,
            pages=page_count(total, params.limit),
            page=params.page,
            limit=params.limit,
        )

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


def page_params(
    page: int = Query(DEFAULT_PAGE, ge=1, le=MAX_PAGE),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
) -> PageParams:
    return PageParams(page=page, limit=limit)
