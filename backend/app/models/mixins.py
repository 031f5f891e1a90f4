"""
BileMo API — Shared Model Columns
===================================

What:  Column mixins reused by every entity table.
Why:   Timestamps and role lists have the same shape and the same invariants
       on users, customers and admins; defining them once keeps the
       migrations and the models in step.
"""

from datetime import datetime, timezone
from typing import List

from sqlalchemy import JSON, DateTime
from sqlalchemy.orm import Mapped, mapped_column


ROLE_USER = "ROLE_USER"
ROLE_ADMIN = "ROLE_ADMIN"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def with_base_role(roles: List[str]) -> List[str]:
    """
    Returns `roles` plus ROLE_USER, de-duplicated, stored order first.

    Every authenticated principal holds the base role even when the database
    row stores an empty list.
    """
    result: List[str] = []
    for role in [*roles, ROLE_USER]:
        if role not in result:
            result.append(role)
    return result


class TimestampMixin:
    """
    created_at / updated_at pair.

    Both use Python-side defaults (not server defaults), so the values are
    on the instance right after the INSERT without a refresh query. Services
    refresh `updated_at` explicitly on every update.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    def touch(self) -> None:
        self.updated_at = utcnow()


class RolesMixin:
    """
    Stored role list plus the effective `roles` view.

    `stored_roles` maps to the `roles` column and holds exactly what was
    written. `roles` is what serializers and the authorization predicate read.
    """

    stored_roles: Mapped[List[str]] = mapped_column(
        "roles",
        JSON,
        nullable=False,
        default=list,
    )

    @property
    def roles(self) -> List[str]:
        return with_base_role(self.stored_roles or [])
