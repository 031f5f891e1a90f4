"""
BileMo API — Pagination Parameters
====================================

`page` and `limit` for every list route. Both must fit the database's
64-bit integer, and so must the derived OFFSET `(page - 1) * limit`;
anything larger is a 400 instead of a driver overflow.
"""

from dataclasses import dataclass

from fastapi import Query

from app.exceptions import ValidationFailedError

# Largest value a BIGINT / SQLite INTEGER can bind
MAX_SQL_INTEGER = 2 ** 63 - 1


@dataclass(frozen=True)
class Page:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def pagination(
    page: int = Query(
        default=1, ge=1, le=MAX_SQL_INTEGER, description="The page you want to retrieve"
    ),
    limit: int = Query(
        default=1, ge=1, le=MAX_SQL_INTEGER, description="The number of items per page"
    ),
) -> Page:
    requested = Page(page=page, limit=limit)
    if requested.offset > MAX_SQL_INTEGER:
        raise ValidationFailedError.single(
            "page", "Page is too large for this limit."
        )
    return requested
