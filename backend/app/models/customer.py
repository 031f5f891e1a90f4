"""
BileMo API — Customer SQLAlchemy Model
========================================

What:  ORM model for the `customers` table: the B2B accounts that log in
       to the API and manage their own users.
Why:   Customers are both a resource (admins manage them under
       /api/customers) and a principal (they authenticate and own users).
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.associations import customer_user
from app.models.mixins import RolesMixin, TimestampMixin

if TYPE_CHECKING:
    from app.models.user import User


class Customer(RolesMixin, TimestampMixin, Base):
    """
    A customer account.

    `password` always holds a bcrypt hash (see app.security.passwords);
    no read view ever serializes it.
    """

    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(180), nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    users: Mapped[List["User"]] = relationship(
        secondary=customer_user,
        back_populates="customers",
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("email", name="UNIQ_CUSTOMER_EMAIL"),
    )

    def add_user(self, user: "User") -> None:
        if user not in self.users:
            self.users.append(user)

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, name='{self.name}')>"
