# src/storefront/seed.py

"""
Resets the database to a demo state: one admin, one regular user and a sample
catalog covering every category.

    python -m storefront.seed
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import List, Tuple

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient

from .core.config import settings, logger
from .core.security import get_password_hash
from .crud.product import ProductRepository
from .crud.user import UserRepository
from .db import ensure_indexes
from .models.product import Category, ProductInDB
from .models.user import Role, UserInDB

SEED_USERS = [
    {"name": "Admin User", "email": "admin@example.com", "password": "admin123", "role": Role.ADMIN},
    {"name": "Jane Doe", "email": "user@example.com", "password": "user123", "role": Role.USER},
]

# (name, description, price, category, stock, featured)
SEED_PRODUCTS: List[Tuple[str, str, float, Category, int, bool]] = [
    ("Laptop Pro 15", "High-performance laptop with 16 GB RAM and a 512 GB SSD, built for developers.", 1299.99, Category.ELECTRONICS, 25, True),
    ("Wireless Ergonomic Mouse", "Ergonomic wireless mouse with precise tracking and long battery life.", 29.99, Category.ELECTRONICS, 150, False),
    ("Mechanical RGB Keyboard", "Backlit mechanical keyboard with blue switches for gaming and fast typing.", 89.99, Category.ELECTRONICS, 45, False),
    ("Noise Cancelling Headphones", "Wireless headphones with active noise cancelling and 30 hours of battery.", 149.99, Category.ELECTRONICS, 8, True),
    ("Classic Cotton T-Shirt", "Comfortable pre-shrunk cotton t-shirt available in several colours.", 19.99, Category.CLOTHING, 200, False),
    ("Warm Winter Jacket", "Waterproof winter jacket with a fleece lining for cold and rainy days.", 129.99, Category.CLOTHING, 55, True),
    ("Merino Wool Sweater", "Soft and warm merino wool sweater with a timeless cut.", 79.99, Category.CLOTHING, 6, False),
    ("Modern JavaScript Guide", "Complete guide to modern JavaScript covering ES6+ features and good practices.", 39.99, Category.BOOKS, 80, True),
    ("The Little Prince", "Illustrated deluxe edition of the classic by Antoine de Saint-Exupery.", 15.99, Category.BOOKS, 150, False),
    ("Introduction to Cybersecurity", "Handbook on cybersecurity fundamentals: threats, defences and practices.", 49.99, Category.BOOKS, 3, False),
    ("Ergonomic Office Chair", "Office chair with lumbar support and adjustable height for long work days.", 249.99, Category.HOME, 30, True),
    ("LED Desk Lamp", "Modern LED desk lamp with adjustable brightness and colour temperature.", 45.99, Category.HOME, 60, False),
    ("Robot Vacuum Cleaner", "Robot vacuum with smart navigation and app-controlled scheduled cleaning.", 299.99, Category.HOME, 15, True),
    ("Lightweight Running Shoes", "Running shoes with excellent cushioning and a breathable upper.", 79.99, Category.SPORTS, 100, False),
    ("Premium Yoga Mat", "Non-slip yoga mat with extra padding, eco-friendly and durable.", 34.99, Category.SPORTS, 75, False),
    ("Adjustable Dumbbells 20 kg", "Pair of dumbbells adjustable from 2 to 20 kg with a quick lock system.", 159.99, Category.SPORTS, 9, True),
    ("Programmable Robot Kit", "Educational robot that teaches programming, compatible with Scratch and Python.", 89.99, Category.TOYS, 40, True),
    ("1000 Piece Puzzle", "A 1000 piece landscape puzzle, perfect for family evenings.", 19.99, Category.TOYS, 90, False),
    ("Kids Magic Kit", "Magic set with 50 tricks explained step by step, for ages 8 and up.", 24.99, Category.TOYS, 0, False),
    ("Travel Backpack", "Spacious travel backpack with several compartments and a laptop sleeve.", 59.99, Category.OTHER, 55, False),
    ("Insulated Bottle 750 ml", "Stainless steel bottle keeping drinks hot for 12 hours and cold for 24.", 27.99, Category.OTHER, 130, False),
    ("Compact Automatic Umbrella", "Wind-resistant compact umbrella with automatic open and close.", 18.99, Category.OTHER, 0, False),
]


def build_seed_users() -> List[UserInDB]:
    return [
        UserInDB(
            id=ObjectId(),
            name=user["name"],
            email=user["email"],
            hashed_password=get_password_hash(user["password"]),
            role=user["role"],
        )
        for user in SEED_USERS
    ]


def build_seed_products(owner: UserInDB) -> List[ProductInDB]:
    # spread creation times so the "recent products" ordering is deterministic
    start = datetime.now(timezone.utc) - timedelta(minutes=len(SEED_PRODUCTS))
    return [
        ProductInDB(
            id=ObjectId(),
            name=name,
            description=description,
            price=price,
            category=category,
            stock=stock,
            featured=featured,
            image=settings.PLACEHOLDER_IMAGE_URL,
            created_by=owner.id,
            created_at=start + timedelta(minutes=index),
        )
        for index, (name, description, price, category, stock, featured) in enumerate(SEED_PRODUCTS)
    ]


async def seed_database(users: UserRepository, products: ProductRepository) -> Tuple[int, int]:
    """Deletes every user and product, then inserts the demo data."""
    await users.delete_all()
    await products.delete_all()
    logger.info("Cleared existing users and products.")

    created_users = [await users.create(user) for user in build_seed_users()]
    admin = next(user for user in created_users if user.role == Role.ADMIN)

    inserted = await products.insert_many(build_seed_products(admin))
    logger.info(f"Created {len(created_users)} users and {inserted} products.")
    return len(created_users), inserted


async def main() -> None:
    print("--- [Seed] Resetting the storefront database ---")
    client = AsyncIOMotorClient(settings.MONGO_DB_URL, tz_aware=True)
    try:
        database = client[settings.MONGO_DB_NAME]
        await ensure_indexes(database)
        user_count, product_count = await seed_database(UserRepository(database), ProductRepository(database))
    finally:
        client.close()

    print(f"✅ Database '{settings.MONGO_DB_NAME}' seeded: {user_count} users, {product_count} products.")
    print("Login credentials:")
    for user in SEED_USERS:
        print(f"   {user['role'].value:<5}  {user['email']} / {user['password']}")


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
