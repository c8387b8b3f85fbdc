# src/storefront/main.py

from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from motor.motor_asyncio import AsyncIOMotorDatabase

from . import db
from .api import auth, products
from .api.deps import get_database
from .api.errors import ERROR_RESPONSES, register_exception_handlers
from .core.config import settings, logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    await db.init_db_connections(app)
    yield
    await db.close_db_connections(app)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_TITLE,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )

    # --- Middleware ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # --- API routers ---
    app.include_router(auth.router, prefix=f"{settings.API_PREFIX}/auth", tags=["Auth"], responses=ERROR_RESPONSES)
    app.include_router(products.router, prefix=f"{settings.API_PREFIX}/products", tags=["Products"], responses=ERROR_RESPONSES)

    # --- Uploaded images (filesystem image storage only) ---
    if settings.IMAGE_STORAGE == "filesystem":
        upload_dir = Path(settings.UPLOAD_DIR)
        upload_dir.mkdir(parents=True, exist_ok=True)
        app.mount(settings.UPLOAD_URL_PATH, StaticFiles(directory=upload_dir), name="uploads")

    @app.get("/", tags=["Root"])
    async def read_root():
        """Lists the available endpoints."""
        prefix = settings.API_PREFIX
        return {
            "success": True,
            "message": f"Welcome to {settings.APP_TITLE}",
            "version": settings.APP_VERSION,
            "endpoints": {
                "auth": {
                    "register": f"POST {prefix}/auth/register",
                    "login": f"POST {prefix}/auth/login",
                    "profile": f"GET {prefix}/auth/me",
                },
                "products": {
                    "getAll": f"GET {prefix}/products",
                    "getOne": f"GET {prefix}/products/{id}",
                    "create": f"POST {prefix}/products (Admin)",
                    "update": f"PUT {prefix}/products/{id} (Admin)",
                    "delete": f"DELETE {prefix}/products/{id} (Admin)",
                    "stats": f"GET {prefix}/products/stats (Admin)",
                },
            },
        }

    @app.get(f"{settings.API_PREFIX}/health", tags=["Root"])
    async def health_check(database: AsyncIOMotorDatabase = Depends(get_database)):
        """Checks the MongoDB connection."""
        await database.command("ping")
        return {"success": True, "server_status": "ok", "mongo_connection": "ok"}

    logger.info(f"{settings.APP_TITLE} v{settings.APP_VERSION} application created.")
    return app


app = create_app()


def run() -> None:
    uvicorn.run("storefront.main:app", host=settings.HOST, port=settings.PORT)
