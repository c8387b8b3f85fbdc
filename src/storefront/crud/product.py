# src/storefront/crud/product.py

from typing import Any, Dict, List, Optional, Sequence, Tuple

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from ..db import PRODUCTS_COLLECTION
from ..models.product import ProductInDB

SortSpec = Sequence[Tuple[str, int]]


class ProductRepository:
    """Access to the `products` collection."""

    def __init__(self, database: AsyncIOMotorDatabase):
        self.collection = database[PRODUCTS_COLLECTION]

    async def find(
        self,
        query: Dict[str, Any],
        sort: SortSpec,
        skip: int = 0,
        limit: int = 0,
    ) -> List[ProductInDB]:
        cursor = self.collection.find(query).sort(list(sort)).skip(skip).limit(limit)
        products_data = await cursor.to_list(length=None)
        return [ProductInDB.model_validate(product) for product in products_data]

    async def count(self, query: Dict[str, Any]) -> int:
        return await self.collection.count_documents(query)

    async def get(self, product_id: ObjectId) -> Optional[ProductInDB]:
        product_data = await self.collection.find_one({"_id": product_id})
        if product_data:
            return ProductInDB.model_validate(product_data)
        return None

    async def insert(self, product: ProductInDB) -> ProductInDB:
        """Inserts the product and returns it as stored (timestamps at storage precision)."""
        result = await self.collection.insert_one(product.model_dump(by_alias=True))
        created_product_data = await self.collection.find_one({"_id": result.inserted_id})
        return ProductInDB.model_validate(created_product_data)

    async def insert_many(self, products: List[ProductInDB]) -> int:
        if not products:
            return 0
        result = await self.collection.insert_many([p.model_dump(by_alias=True) for p in products])
        return len(result.inserted_ids)

    async def update(self, product_id: ObjectId, fields: Dict[str, Any]) -> Optional[ProductInDB]:
        """Overwrites only the given fields; returns None when the id is unknown."""
        result = await self.collection.find_one_and_update(
            {"_id": product_id},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )
        if result:
            return ProductInDB.model_validate(result)
        return None

    async def delete(self, product_id: ObjectId) -> bool:
        result = await self.collection.delete_one({"_id": product_id})
        return result.deleted_count == 1

    async def delete_all(self) -> int:
        result = await self.collection.delete_many({})
        return result.deleted_count

    async def category_summary(self) -> List[dict]:
        """Per-category product count and inventory value (price x stock), largest first."""
        pipeline = [
            {"$group": {
                "_id": "$category",
                "count": {"$sum": 1},
                "total_value": {"$sum": {"$multiply": ["$price", "$stock"]}},
            }},
            {"$sort": {"count": -1, "_id": 1}},
        ]
        cursor = self.collection.aggregate(pipeline)
        groups = await cursor.to_list(length=None)
        return [
            {"category": group["_id"], "count": group["count"], "total_value": group["total_value"]}
            for group in groups
        ]
