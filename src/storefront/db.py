# src/storefront/db.py

from fastapi import FastAPI
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from .core.config import settings, logger

USERS_COLLECTION = "users"
PRODUCTS_COLLECTION = "products"


async def ensure_indexes(database: AsyncIOMotorDatabase) -> None:
    """Creates the indexes both collections rely on. Safe to call repeatedly."""
    await database[USERS_COLLECTION].create_index([("email", ASCENDING)], unique=True)
    await database[PRODUCTS_COLLECTION].create_index([("created_at", DESCENDING)])
    await database[PRODUCTS_COLLECTION].create_index([("category", ASCENDING)])
    await database[PRODUCTS_COLLECTION].create_index([("price", ASCENDING)])


async def init_db_connections(app: FastAPI) -> None:
    """Opens the MongoDB client and attaches it to the application state."""
    app.state.mongo_client = None
    app.state.database = None

    logger.info(f"--- [DB-INIT] Connecting to MongoDB database '{settings.MONGO_DB_NAME}'... ---")
    try:
        mongo_client = AsyncIOMotorClient(settings.MONGO_DB_URL, tz_aware=True)
        await mongo_client.server_info()

        database = mongo_client[settings.MONGO_DB_NAME]
        await ensure_indexes(database)

        app.state.mongo_client = mongo_client
        app.state.database = database
        logger.info("--- [DB-INIT] MongoDB connection successful. ---")
    except Exception as e:
        # Requests fail with a server error until the database is reachable.
        logger.error(f"--- [DB-INIT-ERROR] Failed during MongoDB initialization: {e} ---", exc_info=True)


async def close_db_connections(app: FastAPI) -> None:
    mongo_client = getattr(app.state, "mongo_client", None)
    if mongo_client:
        mongo_client.close()
        app.state.mongo_client = None
        app.state.database = None
        logger.info("MongoDB connection closed.")
