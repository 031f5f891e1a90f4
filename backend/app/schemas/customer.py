"""
BileMo API — Customer Schemas
===============================

The `customer:read` view embeds a summary of each linked user, which is why
a user write must also evict cached customer pages.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, EmailStr, Field

from app.schemas.common import Link
from app.schemas.user import UserSummary


class CustomerWrite(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr = Field(max_length=180)
    roles: List[str] = Field(default_factory=list)


class CustomerCreate(CustomerWrite):
    password: str = Field(min_length=8, max_length=72)
    id_user: Optional[int] = Field(default=None, alias="idUser")

    model_config = {"populate_by_name": True}


class CustomerUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    roles: Optional[List[str]] = None
    id_user: Optional[int] = Field(default=None, alias="idUser")

    model_config = {"populate_by_name": True}


class CustomerRead(BaseModel):
    id: int
    name: str
    email: str
    roles: List[str]
    created_at: datetime
    updated_at: datetime
    users: List[UserSummary] = Field(default_factory=list)
    links: Dict[str, Link] = Field(default_factory=dict, serialization_alias="_links")

    model_config = {"from_attributes": True}
