"""
BileMo API — Product SQLAlchemy Model
=======================================

What:  ORM model for the `products` catalogue table.

Price is stored as NUMERIC(10, 2) so totals never pick up binary floating
point noise; the API exposes it as a JSON number.
"""

from decimal import Decimal

from sqlalchemy import Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.mixins import TimestampMixin


class Product(TimestampMixin, Base):
    """A catalogue entry. Readable by any authenticated principal."""

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name='{self.name}', price={self.price})>"
