"""
BileMo API — Product Schemas
==============================

ProductRead is the `product:read` view. ProductWrite holds the full set of
constraints and is used both for create payloads and for re-validating a
merged update; ProductUpdate only carries types so a PUT may send any
subset of fields.

Prices mirror the NUMERIC(10, 2) column: at most 8 integer digits and 2
decimals, finite. Float input is read through its shortest repr, so 9.99
arrives as Decimal("9.99"), not its binary approximation.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional

from pydantic import BaseModel, Field

from app.schemas.common import Link


class ProductWrite(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = Field(default="", max_length=10_000)
    price: Decimal = Field(
        ge=0,
        max_digits=10,
        decimal_places=2,
        allow_inf_nan=False,
        description="Unit price, non-negative, at most 2 decimals",
    )


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, allow_inf_nan=False)


class ProductRead(BaseModel):
    id: int
    name: str
    description: str
    price: float
    created_at: datetime
    updated_at: datetime
    links: Dict[str, Link] = Field(default_factory=dict, serialization_alias="_links")

    model_config = {"from_attributes": True}
