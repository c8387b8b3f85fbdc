# src/storefront/models/user.py

from datetime import datetime, timezone
from enum import Enum

from beanie import PydanticObjectId
from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


class UserInDB(BaseModel):
    """A document of the `users` collection."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True, validate_default=True)

    # MongoDB's '_id' is exposed as 'id'
    id: PydanticObjectId = Field(..., alias='_id')

    name: str
    email: str
    hashed_password: str
    role: Role = Role.USER
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
