# src/storefront/core/config.py

import logging
from typing import List, Literal

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Values from .env are used unless the same variable is set in the process environment.
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra='ignore')

    APP_TITLE: str = "Storefront API"
    APP_DESCRIPTION: str = "Product catalog and authentication backend"
    APP_VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"

    MONGO_DB_URL: str = "mongodb://localhost:27017/storefront"

    # JWT signing key. Override in every deployed environment.
    SECRET_KEY: str = "a_very_secret_key_that_should_be_changed"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    CORS_ORIGINS: List[str] = ["*"]

    # "inline" keeps uploads as data URLs inside the product document,
    # "filesystem" writes them under UPLOAD_DIR and stores only the public path.
    IMAGE_STORAGE: Literal["inline", "filesystem"] = "inline"
    UPLOAD_DIR: str = "uploads"
    UPLOAD_URL_PATH: str = "/uploads"
    MAX_IMAGE_BYTES: int = 5 * 1024 * 1024
    PLACEHOLDER_IMAGE_URL: str = "https://via.placeholder.com/400x400?text=No+Image"

    LOW_STOCK_THRESHOLD: int = 10
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    @computed_field
    @property
    def MONGO_DB_NAME(self) -> str:
        # mongodb://host:port/<db>?options
        address = self.MONGO_DB_URL.split("://", 1)[-1]
        if "/" not in address:
            return "storefront"
        return address.split("/", 1)[1].split("?")[0] or "storefront"


settings = Settings()

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

logger.info("Configuration loaded successfully.")
logger.info(f"Application Title: {settings.APP_TITLE}")
