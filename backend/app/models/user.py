"""
BileMo API — User SQLAlchemy Model
====================================

What:  ORM model for the `users` table: end users registered by customers.
Who:   Used by UserService for CRUD operations, by CustomerService to link
       users to customers, and by Alembic for schema management.

Table Design Rationale:
    - Integer primary key: ids appear in HATEOAS links and Location headers
    - email: unique (UNIQ_IDENTIFIER_EMAIL); length 180 leaves room for an
      index on MySQL-family backends as well as PostgreSQL
    - roles: JSON list; the effective list always contains ROLE_USER
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.associations import customer_user
from app.models.mixins import RolesMixin, TimestampMixin

if TYPE_CHECKING:
    from app.models.customer import Customer


class User(RolesMixin, TimestampMixin, Base):
    """
    A user managed by one or more customers.

    Ownership:
        A customer "owns" a user when it appears in `user.customers`.
        Detail, update and delete on /api/users/{id} require the acting
        customer to be one of them.

    Loading:
        `customers` uses lazy="selectin" so ownership checks never trigger
        an implicit lazy load (which async sessions forbid).
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(180), nullable=False)
    firstname: Mapped[str] = mapped_column(String(255), nullable=False)
    lastname: Mapped[str] = mapped_column(String(255), nullable=False)

    customers: Mapped[List["Customer"]] = relationship(
        secondary=customer_user,
        back_populates="users",
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("email", name="UNIQ_IDENTIFIER_EMAIL"),
    )

    def is_owned_by(self, customer_id: int) -> bool:
        return any(customer.id == customer_id for customer in self.customers)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
