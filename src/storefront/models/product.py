# src/storefront/models/product.py

from datetime import datetime, timezone
from enum import Enum

from beanie import PydanticObjectId
from pydantic import BaseModel, ConfigDict, Field


class Category(str, Enum):
    ELECTRONICS = "Electronics"
    CLOTHING = "Clothing"
    BOOKS = "Books"
    HOME = "Home"
    SPORTS = "Sports"
    TOYS = "Toys"
    OTHER = "Other"


class ProductInDB(BaseModel):
    """A document of the `products` collection."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True, validate_default=True)

    id: PydanticObjectId = Field(..., alias='_id')

    name: str
    description: str
    price: float = Field(ge=0)
    category: Category
    stock: int = Field(ge=0)
    featured: bool = False
    # external URL, data URL, or the public path of a stored upload
    image: str
    created_by: PydanticObjectId
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
