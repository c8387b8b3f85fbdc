# src/storefront/schemas/user.py

from datetime import datetime

from beanie import PydanticObjectId
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from .base import CamelModel
from ..models.user import Role

# --- Token ---

class Token(BaseModel):
    access_token: str
    token_type: str

# --- Requests ---

class RegisterRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.lower()


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

# --- Responses ---

class UserPublic(CamelModel):
    """A user as returned by the API: never carries the password hash."""

    id: PydanticObjectId = Field(..., alias='_id')
    name: str
    email: str
    role: Role
    created_at: datetime


class AuthResponse(CamelModel):
    success: bool = True
    token: str
    data: UserPublic
