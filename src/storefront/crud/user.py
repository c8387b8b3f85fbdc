# src/storefront/crud/user.py

from typing import Dict, Iterable, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..db import USERS_COLLECTION
from ..models.user import UserInDB


class UserRepository:
    """Access to the `users` collection."""

    def __init__(self, database: AsyncIOMotorDatabase):
        self.collection = database[USERS_COLLECTION]

    async def get_by_email(self, email: str) -> Optional[UserInDB]:
        user_data = await self.collection.find_one({"email": email.lower()})
        if user_data:
            return UserInDB.model_validate(user_data)
        return None

    async def get_by_id(self, user_id: ObjectId) -> Optional[UserInDB]:
        user_data = await self.collection.find_one({"_id": user_id})
        if user_data:
            return UserInDB.model_validate(user_data)
        return None

    async def create(self, user: UserInDB) -> UserInDB:
        """Inserts the user and returns the stored document."""
        result = await self.collection.insert_one(user.model_dump(by_alias=True))
        created_user_data = await self.collection.find_one({"_id": result.inserted_id})
        return UserInDB.model_validate(created_user_data)

    async def count(self) -> int:
        return await self.collection.count_documents({})

    async def find_by_ids(self, user_ids: Iterable[ObjectId]) -> Dict[ObjectId, dict]:
        """Returns `{_id: {_id, name, email}}` for the given ids; unknown ids are skipped."""
        ids = list(set(user_ids))
        if not ids:
            return {}
        cursor = self.collection.find({"_id": {"$in": ids}}, {"name": 1, "email": 1})
        users = await cursor.to_list(length=None)
        return {user["_id"]: user for user in users}

    async def delete_all(self) -> int:
        result = await self.collection.delete_many({})
        return result.deleted_count
