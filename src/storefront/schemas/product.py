# src/storefront/schemas/product.py

from datetime import datetime
from typing import List, Optional

from beanie import PydanticObjectId
from pydantic import BaseModel, ConfigDict, Field

from .base import CamelModel
from ..core.config import settings
from ..models.product import Category

# skip = (page - 1) * limit must fit in a signed 64-bit BSON integer
MAX_PAGE = (2**63 - 1) // settings.MAX_PAGE_SIZE

# --- Write payloads (built from multipart form fields) ---

class ProductCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=True)

    name: str = Field(..., min_length=3, max_length=100)
    description: str = Field(..., min_length=10, max_length=1000)
    price: float = Field(..., ge=0)
    category: Category
    stock: int = Field(..., ge=0)
    featured: bool = False


class ProductUpdate(BaseModel):
    """Partial overwrite: only fields that were sent are set on the model."""

    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=True)

    name: Optional[str] = Field(None, min_length=3, max_length=100)
    description: Optional[str] = Field(None, min_length=10, max_length=1000)
    price: Optional[float] = Field(None, ge=0)
    category: Optional[Category] = None
    stock: Optional[int] = Field(None, ge=0)
    featured: Optional[bool] = None

# --- Query ---

class ProductQuery(BaseModel):
    """Filter, sort and pagination options of the product listing."""

    search: Optional[str] = None
    category: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    sort_by: str = "createdAt"
    order: str = "desc"
    page: int = Field(1, ge=1, le=MAX_PAGE)
    limit: int = Field(10, ge=1)

# --- Responses ---

class Creator(CamelModel):
    id: PydanticObjectId = Field(..., alias='_id')
    name: str
    email: str


class ProductOut(CamelModel):
    id: PydanticObjectId = Field(..., alias='_id')
    name: str
    description: str
    price: float
    category: Category
    stock: int
    featured: bool
    image: str
    created_by: Optional[Creator] = None
    created_at: datetime


class ProductListResponse(CamelModel):
    success: bool = True
    count: int
    total: int
    page: int
    pages: int
    data: List[ProductOut]


class CategorySummary(CamelModel):
    category: str
    count: int
    total_value: float


class ProductStats(CamelModel):
    total_products: int
    total_users: int
    category_counts: List[CategorySummary]
    recent_products: List[ProductOut]
    low_stock_products: List[ProductOut]
