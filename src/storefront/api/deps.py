# src/storefront/api/deps.py

from typing import Callable, Optional

from fastapi import Depends, Query, Request
from fastapi.security import OAuth2PasswordBearer
from motor.motor_asyncio import AsyncIOMotorDatabase

from ..core.config import settings
from ..core.exceptions import AuthenticationError, AuthorizationError, DatabaseUnavailableError
from ..crud.product import ProductRepository
from ..crud.user import UserRepository
from ..models.user import Role, UserInDB
from ..schemas.product import MAX_PAGE, ProductQuery
from ..services import auth as auth_service
from ..services.images import ImageStore, build_image_store

# auto_error=False so that a missing token is reported with the API's own 401 envelope
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/token", auto_error=False)


def get_database(request: Request) -> AsyncIOMotorDatabase:
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise DatabaseUnavailableError()
    return database


def get_user_repository(database: AsyncIOMotorDatabase = Depends(get_database)) -> UserRepository:
    return UserRepository(database)


def get_product_repository(database: AsyncIOMotorDatabase = Depends(get_database)) -> ProductRepository:
    return ProductRepository(database)


def get_image_store() -> ImageStore:
    return build_image_store()


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    users: UserRepository = Depends(get_user_repository),
) -> UserInDB:
    """Resolves the bearer token to the user it was issued for."""
    if not token:
        raise AuthenticationError("Not authorized, no token provided")
    return await auth_service.resolve_token(token, users)


def require_role(*roles: Role) -> Callable:
    """Builds a dependency that admits only users holding one of `roles`."""
    allowed = tuple(role.value for role in roles)

    async def role_checker(current_user: UserInDB = Depends(get_current_user)) -> UserInDB:
        if current_user.role not in allowed:
            raise AuthorizationError(f"User role '{current_user.role}' is not authorized to access this route")
        return current_user

    return role_checker


get_current_admin_user = require_role(Role.ADMIN)


def get_product_query(
    search: Optional[str] = Query(None, description="Case-insensitive text matched against name or description"),
    category: Optional[str] = Query(None, description="Exact category, 'All' disables the filter"),
    min_price: Optional[float] = Query(None, alias="minPrice"),
    max_price: Optional[float] = Query(None, alias="maxPrice"),
    sort_by: str = Query("createdAt", alias="sortBy"),
    order: str = Query("desc", description="'asc' or 'desc'"),
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
) -> ProductQuery:
    return ProductQuery(
        search=search,
        category=category,
        min_price=min_price,
        max_price=max_price,
        sort_by=sort_by,
        order=order,
        page=page,
        limit=limit,
    )
