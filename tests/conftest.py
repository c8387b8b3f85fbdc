from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError

from storefront.api.deps import get_product_repository, get_user_repository
from storefront.core.security import get_password_hash
from storefront.main import create_app
from storefront.models.product import ProductInDB
from storefront.models.user import Role, UserInDB
from storefront.services.auth import issue_token

ADMIN_PASSWORD = "admin123"
USER_PASSWORD = "user123"


def matches(document: dict, conditions: dict) -> bool:
    """Evaluates the subset of the MongoDB query language the catalog produces."""
    for key, condition in conditions.items():
        if key == "$or":
            if not any(matches(document, branch) for branch in condition):
                return False
            continue

        value = document.get(key)
        if not isinstance(condition, dict):
            if value != condition:
                return False
            continue

        for operator, operand in condition.items():
            if operator == "$options":
                continue
            if operator == "$regex":
                flags = re.IGNORECASE if "i" in condition.get("$options", "") else 0
                if value is None or not re.search(operand, value, flags):
                    return False
            elif operator == "$gte":
                if value is None or value < operand:
                    return False
            elif operator == "$lte":
                if value is None or value > operand:
                    return False
            elif operator == "$lt":
                if value is None or value >= operand:
                    return False
            elif operator == "$in":
                if value not in operand:
                    return False
            else:
                raise NotImplementedError(operator)
    return True


class InMemoryUsers:
    def __init__(self):
        self.documents: dict[ObjectId, dict] = {}

    def add(self, user: UserInDB) -> UserInDB:
        if any(doc["email"] == user.email for doc in self.documents.values()):
            raise DuplicateKeyError("E11000 duplicate key error collection: users index: email_1")
        self.documents[user.id] = user.model_dump(by_alias=True)
        return UserInDB.model_validate(self.documents[user.id])

    async def get_by_email(self, email: str) -> Optional[UserInDB]:
        for doc in self.documents.values():
            if doc["email"] == email.lower():
                return UserInDB.model_validate(doc)
        return None

    async def get_by_id(self, user_id: ObjectId) -> Optional[UserInDB]:
        doc = self.documents.get(user_id)
        return UserInDB.model_validate(doc) if doc else None

    async def create(self, user: UserInDB) -> UserInDB:
        return self.add(user)

    async def count(self) -> int:
        return len(self.documents)

    async def find_by_ids(self, user_ids) -> dict:
        found = {}
        for user_id in user_ids:
            doc = self.documents.get(user_id)
            if doc:
                found[user_id] = {"_id": doc["_id"], "name": doc["name"], "email": doc["email"]}
        return found

    async def delete_all(self) -> int:
        deleted = len(self.documents)
        self.documents.clear()
        return deleted


class InMemoryProducts:
    def __init__(self):
        self.documents: dict[ObjectId, dict] = {}

    def add(self, product: ProductInDB) -> ProductInDB:
        self.documents[product.id] = product.model_dump(by_alias=True)
        return ProductInDB.model_validate(self.documents[product.id])

    async def find(self, query, sort, skip=0, limit=0):
        rows = [doc for doc in self.documents.values() if matches(doc, query)]
        for field, direction in reversed(list(sort)):
            rows.sort(key=lambda doc: doc[field], reverse=direction == DESCENDING)
        rows = rows[skip:skip + limit] if limit else rows[skip:]
        return [ProductInDB.model_validate(doc) for doc in rows]

    async def count(self, query) -> int:
        return sum(1 for doc in self.documents.values() if matches(doc, query))

    async def get(self, product_id: ObjectId) -> Optional[ProductInDB]:
        doc = self.documents.get(product_id)
        return ProductInDB.model_validate(doc) if doc else None

    async def insert(self, product: ProductInDB) -> ProductInDB:
        return self.add(product)

    async def insert_many(self, products) -> int:
        for product in products:
            self.add(product)
        return len(products)

    async def update(self, product_id: ObjectId, fields: dict) -> Optional[ProductInDB]:
        doc = self.documents.get(product_id)
        if doc is None:
            return None
        doc.update(fields)
        return ProductInDB.model_validate(doc)

    async def delete(self, product_id: ObjectId) -> bool:
        return self.documents.pop(product_id, None) is not None

    async def delete_all(self) -> int:
        deleted = len(self.documents)
        self.documents.clear()
        return deleted

    async def category_summary(self) -> list:
        groups: dict[str, dict] = {}
        for doc in self.documents.values():
            group = groups.setdefault(doc["category"], {"category": doc["category"], "count": 0, "total_value": 0.0})
            group["count"] += 1
            group["total_value"] += doc["price"] * doc["stock"]
        return sorted(groups.values(), key=lambda group: (-group["count"], group["category"]))


@lru_cache(maxsize=None)
def password_hash(password: str) -> str:
    return get_password_hash(password)


def make_user(name: str, email: str, password: str, role: Role) -> UserInDB:
    return UserInDB(
        id=ObjectId(),
        name=name,
        email=email,
        hashed_password=password_hash(password),
        role=role,
    )


# (name, description, price, category, stock)
CATALOG = [
    ("Laptop Pro 15", "High-performance laptop for developers and creators.", 1299.99, "Electronics", 25),
    ("Wireless Mouse", "Ergonomic wireless mouse with long battery life.", 29.99, "Electronics", 150),
    ("Mechanical Keyboard", "Backlit keyboard for gaming and fast typing.", 89.99, "Electronics", 5),
    ("Cotton T-Shirt", "Comfortable cotton shirt, pre-shrunk and durable.", 19.99, "Clothing", 200),
    ("Winter Jacket", "Waterproof jacket with a warm fleece lining.", 75.00, "Clothing", 2),
    ("Desk Organizer", "Keeps your LAPTOP accessories tidy on any desk.", 50.00, "Home", 8),
    ("Yoga Mat", "Non-slip mat with extra padding for yoga.", 34.99, "Sports", 0),
    ("Puzzle 1000", "A thousand piece landscape puzzle for families.", 100.00, "Toys", 40),
]


@pytest.fixture
def users() -> InMemoryUsers:
    return InMemoryUsers()


@pytest.fixture
def products() -> InMemoryProducts:
    return InMemoryProducts()


@pytest.fixture
def admin_user(users) -> UserInDB:
    return users.add(make_user("Admin User", "admin@example.com", ADMIN_PASSWORD, Role.ADMIN))


@pytest.fixture
def regular_user(users) -> UserInDB:
    return users.add(make_user("Jane Doe", "user@example.com", USER_PASSWORD, Role.USER))


@pytest.fixture
def admin_headers(admin_user) -> dict:
    return {"Authorization": f"Bearer {issue_token(admin_user)}"}


@pytest.fixture
def user_headers(regular_user) -> dict:
    return {"Authorization": f"Bearer {issue_token(regular_user)}"}


@pytest.fixture
def catalog(products, admin_user) -> list[ProductInDB]:
    """Products in creation order; the last one is the newest."""
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    return [
        products.add(ProductInDB(
            id=ObjectId(),
            name=name,
            description=description,
            price=price,
            category=category,
            stock=stock,
            image="https://example.com/image.png",
            created_by=admin_user.id,
            created_at=start + timedelta(minutes=index),
        ))
        for index, (name, description, price, category, stock) in enumerate(CATALOG)
    ]


@pytest.fixture
def app(users, products):
    application = create_app()
    application.dependency_overrides[get_user_repository] = lambda: users
    application.dependency_overrides[get_product_repository] = lambda: products
    return application


@pytest.fixture
def client(app) -> TestClient:
    # not used as a context manager, so the MongoDB lifespan never runs
    return TestClient(app)
