"""
BileMo API — User Schemas
===========================

The `customer:read` view of a user. `idCustomer` on create lets an admin
attach the new user to a customer; customers creating users are attached
automatically.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, EmailStr, Field

from app.schemas.common import Link


class UserWrite(BaseModel):
    email: EmailStr = Field(max_length=180)
    firstname: str = Field(min_length=1, max_length=255)
    lastname: str = Field(min_length=1, max_length=255)


class UserCreate(UserWrite):
    roles: List[str] = Field(default_factory=list)
    id_customer: Optional[int] = Field(default=None, alias="idCustomer")

    model_config = {"populate_by_name": True}


class UserUpdate(BaseModel):
    email: Optional[str] = None
    firstname: Optional[str] = None
    lastname: Optional[str] = None


class UserRead(BaseModel):
    id: int
    email: str
    roles: List[str]
    firstname: str
    lastname: str
    created_at: datetime
    updated_at: datetime
    links: Dict[str, Link] = Field(default_factory=dict, serialization_alias="_links")

    model_config = {"from_attributes": True}


class UserSummary(BaseModel):
    """User as embedded inside a customer."""
    id: int
    email: str
    firstname: str
    lastname: str

    model_config = {"from_attributes": True}
