# src/storefront/services/catalog.py

"""
Product catalog use cases: the filtered/paginated listing, single-product
read/write and the admin statistics.

The listing translates a `ProductQuery` into a MongoDB filter document and a
sort document. Both are plain data so that the translation can be checked
without a database.
"""

import logging
import math
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from fastapi import UploadFile
from pymongo import ASCENDING, DESCENDING

from ..core.config import settings
from ..core.exceptions import NotFoundError
from ..crud.product import ProductRepository
from ..crud.user import UserRepository
from ..models.product import ProductInDB
from ..models.user import UserInDB
from ..schemas.product import (
    CategorySummary,
    Creator,
    ProductCreate,
    ProductOut,
    ProductQuery,
    ProductStats,
    ProductUpdate,
)
from .images import ImageStore

logger = logging.getLogger(__name__)

PRODUCT_NOT_FOUND = "Product not found"
ALL_CATEGORIES = "All"

# API sort keys -> document fields
SORT_FIELDS = {
    "createdAt": "created_at",
    "name": "name",
    "price": "price",
    "stock": "stock",
    "category": "category",
    "featured": "featured",
}
DEFAULT_SORT = "createdAt"

RECENT_PRODUCTS_LIMIT = 5
LOW_STOCK_LIMIT = 5


@dataclass
class ProductPage:
    items: List[ProductOut]
    total_count: int
    page: int
    total_pages: int


def build_product_filter(query: ProductQuery) -> Dict[str, Any]:
    conditions: Dict[str, Any] = {}

    if query.search:
        pattern = re.escape(query.search)
        conditions["$or"] = [
            {"name": {"$regex": pattern, "$options": "i"}},
            {"description": {"$regex": pattern, "$options": "i"}},
        ]

    if query.category and query.category != ALL_CATEGORIES:
        conditions["category"] = query.category

    price_range = {}
    if query.min_price is not None:
        price_range["$gte"] = query.min_price
    if query.max_price is not None:
        price_range["$lte"] = query.max_price
    if price_range:
        conditions["price"] = price_range

    return conditions


def build_sort(query: ProductQuery) -> List[Tuple[str, int]]:
    sort_by = query.sort_by
    if sort_by not in SORT_FIELDS:
        logger.warning(f"Unsupported sortBy '{sort_by}', falling back to '{DEFAULT_SORT}'")
        sort_by = DEFAULT_SORT

    direction = ASCENDING if query.order == "asc" else DESCENDING
    # _id keeps the order stable across pages when the sort field has ties
    return [(SORT_FIELDS[sort_by], direction), ("_id", direction)]


def page_count(total_count: int, limit: int) -> int:
    return math.ceil(total_count / limit)


def parse_object_id(product_id: str) -> ObjectId:
    """Malformed ids cannot match any product, so they are reported as not found."""
    if not ObjectId.is_valid(product_id):
        raise NotFoundError(PRODUCT_NOT_FOUND)
    return ObjectId(product_id)


async def join_creators(products: List[ProductInDB], users: UserRepository) -> List[ProductOut]:
    """Attaches the creator's name and email to each product."""
    creators = await users.find_by_ids(product.created_by for product in products)
    return [to_product_out(product, creators.get(product.created_by)) for product in products]


def to_product_out(product: ProductInDB, creator: Optional[dict]) -> ProductOut:
    fields = product.model_dump(exclude={"created_by"})
    if creator is not None:
        fields["created_by"] = Creator(id=creator["_id"], name=creator["name"], email=creator["email"])
    return ProductOut(**fields)


# --- Listing ---

async def list_products(query: ProductQuery, products: ProductRepository, users: UserRepository) -> ProductPage:
    conditions = build_product_filter(query)
    skip = (query.page - 1) * query.limit

    found = await products.find(conditions, build_sort(query), skip=skip, limit=query.limit)
    total_count = await products.count(conditions)

    return ProductPage(
        items=await join_creators(found, users),
        total_count=total_count,
        page=query.page,
        total_pages=page_count(total_count, query.limit),
    )

# --- Single product ---

async def get_product(product_id: str, products: ProductRepository, users: UserRepository) -> ProductOut:
    product = await products.get(parse_object_id(product_id))
    if product is None:
        raise NotFoundError(PRODUCT_NOT_FOUND)
    return (await join_creators([product], users))[0]


async def create_product(
    payload: ProductCreate,
    image: Optional[UploadFile],
    actor: UserInDB,
    products: ProductRepository,
    image_store: ImageStore,
) -> ProductOut:
    image_ref = await image_store.save(image) if image else settings.PLACEHOLDER_IMAGE_URL

    new_product = ProductInDB(
        id=ObjectId(),
        **payload.model_dump(),
        image=image_ref,
        created_by=actor.id,
        created_at=datetime.now(timezone.utc),
    )
    product = await products.insert(new_product)
    logger.info(f"Product {product.id} '{product.name}' created by {actor.email}")

    return to_product_out(product, {"_id": actor.id, "name": actor.name, "email": actor.email})


async def update_product(
    product_id: str,
    changes: ProductUpdate,
    image: Optional[UploadFile],
    actor: UserInDB,
    products: ProductRepository,
    users: UserRepository,
    image_store: ImageStore,
) -> ProductOut:
    object_id = parse_object_id(product_id)
    product = await products.get(object_id)
    if product is None:
        raise NotFoundError(PRODUCT_NOT_FOUND)

    fields = changes.model_dump(exclude_unset=True)
    if image:
        fields["image"] = await image_store.save(image)

    if fields:
        product = await products.update(object_id, fields)
        if product is None:
            # deleted between the read and the write
            raise NotFoundError(PRODUCT_NOT_FOUND)
        logger.info(f"Product {object_id} updated by {actor.email}: {sorted(fields)}")

    return (await join_creators([product], users))[0]


async def delete_product(product_id: str, actor: UserInDB, products: ProductRepository) -> None:
    object_id = parse_object_id(product_id)
    if not await products.delete(object_id):
        raise NotFoundError(PRODUCT_NOT_FOUND)
    logger.info(f"Product {object_id} deleted by {actor.email}")

# --- Statistics ---

async def get_stats(products: ProductRepository, users: UserRepository) -> ProductStats:
    total_products = await products.count({})
    total_users = await users.count()
    categories = await products.category_summary()

    recent = await products.find({}, [("created_at", DESCENDING), ("_id", DESCENDING)], limit=RECENT_PRODUCTS_LIMIT)
    low_stock = await products.find(
        {"stock": {"$lt": settings.LOW_STOCK_THRESHOLD}},
        [("stock", ASCENDING), ("_id", ASCENDING)],
        limit=LOW_STOCK_LIMIT,
    )

    return ProductStats(
        total_products=total_products,
        total_users=total_users,
        category_counts=[CategorySummary(**group) for group in categories],
        recent_products=await join_creators(recent, users),
        low_stock_products=await join_creators(low_stock, users),
    )
