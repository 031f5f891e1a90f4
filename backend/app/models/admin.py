"""
BileMo API — Admin SQLAlchemy Model
=====================================

What:  Back-office accounts. Admins authenticate like customers but hold
       ROLE_ADMIN; no HTTP resource manages them (they are seeded by
       `python -m app.fixtures` or inserted directly).
"""

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.mixins import ROLE_ADMIN, RolesMixin, TimestampMixin


class Admin(RolesMixin, TimestampMixin, Base):
    __tablename__ = "admins"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(180), nullable=False)
    firstname: Mapped[str] = mapped_column(String(255), nullable=False)
    lastname: Mapped[str] = mapped_column(String(255), nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    __table_args__ = (
        UniqueConstraint("email", name="UNIQ_ADMIN_EMAIL"),
    )

    def __init__(self, **kwargs):
        kwargs.setdefault("stored_roles", [ROLE_ADMIN])
        super().__init__(**kwargs)

    def __repr__(self) -> str:
        return f"<Admin(id={self.id}, email='{self.email}')>"
