"""BileMo API — Login Schemas"""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(min_length=1, description="Account email")
    password: str = Field(min_length=1)


class TokenResponse(BaseModel):
    token: str = Field(description="Signed JWT, sent back as `Authorization: Bearer <token>`")
