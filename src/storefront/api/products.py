# src/storefront/api/products.py

from typing import Optional, Type, TypeVar

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .deps import (
    get_current_admin_user,
    get_image_store,
    get_product_query,
    get_product_repository,
    get_user_repository,
)
from .errors import validation_error_from
from ..crud.product import ProductRepository
from ..crud.user import UserRepository
from ..models.user import UserInDB
from ..schemas.base import DataResponse, MessageResponse
from ..schemas.product import (
    ProductCreate,
    ProductListResponse,
    ProductOut,
    ProductQuery,
    ProductStats,
    ProductUpdate,
)
from ..services import catalog
from ..services.images import ImageStore

router = APIRouter()

PayloadT = TypeVar("PayloadT", bound=BaseModel)


def parse_form(model: Type[PayloadT], fields: dict) -> PayloadT:
    """Validates multipart form values with the same rules as a JSON body."""
    try:
        return model(**fields)
    except PydanticValidationError as e:
        raise validation_error_from(e)


def uploaded(image: Optional[UploadFile]) -> Optional[UploadFile]:
    # browsers send an empty part with no filename when no file was picked
    if image is None or not image.filename:
        return None
    return image


@router.get("", response_model=ProductListResponse)
async def list_products(
    query: ProductQuery = Depends(get_product_query),
    products: ProductRepository = Depends(get_product_repository),
    users: UserRepository = Depends(get_user_repository),
):
    """Public listing with optional search, category, price range, sorting and pagination."""
    result = await catalog.list_products(query, products, users)
    return ProductListResponse(
        count=len(result.items),
        total=result.total_count,
        page=result.page,
        pages=result.total_pages,
        data=result.items,
    )


# declared before "/{product_id}" so that "stats" is not taken for an id
@router.get("/stats", response_model=DataResponse[ProductStats], response_model_exclude_none=True)
async def read_stats(
    admin_user: UserInDB = Depends(get_current_admin_user),
    products: ProductRepository = Depends(get_product_repository),
    users: UserRepository = Depends(get_user_repository),
):
    """(Admin Only) Catalog totals, per-category value, newest and low-stock products."""
    return DataResponse(data=await catalog.get_stats(products, users))


@router.get("/{product_id}", response_model=DataResponse[ProductOut], response_model_exclude_none=True)
async def read_product(
    product_id: str,
    products: ProductRepository = Depends(get_product_repository),
    users: UserRepository = Depends(get_user_repository),
):
    return DataResponse(data=await catalog.get_product(product_id, products, users))


@router.post(
    "",
    response_model=DataResponse[ProductOut],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
async def create_product(
    admin_user: UserInDB = Depends(get_current_admin_user),
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    stock: Optional[str] = Form(None),
    featured: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    products: ProductRepository = Depends(get_product_repository),
    image_store: ImageStore = Depends(get_image_store),
):
    """(Admin Only) Creates a product from multipart form data with an optional `image` file."""
    fields = {
        "name": name,
        "description": description,
        "price": price,
        "category": category,
        "stock": stock,
        "featured": featured,
    }
    payload = parse_form(ProductCreate, {key: value for key, value in fields.items() if value is not None})
    product = await catalog.create_product(payload, uploaded(image), admin_user, products, image_store)
    return DataResponse(message="Product created successfully", data=product)


@router.put("/{product_id}", response_model=DataResponse[ProductOut], response_model_exclude_none=True)
async def update_product(
    product_id: str,
    admin_user: UserInDB = Depends(get_current_admin_user),
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    stock: Optional[str] = Form(None),
    featured: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    products: ProductRepository = Depends(get_product_repository),
    users: UserRepository = Depends(get_user_repository),
    image_store: ImageStore = Depends(get_image_store),
):
    """(Admin Only) Overwrites only the fields that were sent; blank fields keep their value."""
    fields = {
        "name": name,
        "description": description,
        "price": price,
        "category": category,
        "stock": stock,
        "featured": featured,
    }
    changes = parse_form(
        ProductUpdate,
        {key: value for key, value in fields.items() if value is not None and value.strip() != ""},
    )
    product = await catalog.update_product(
        product_id, changes, uploaded(image), admin_user, products, users, image_store
    )
    return DataResponse(message="Product updated successfully", data=product)


@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(
    product_id: str,
    admin_user: UserInDB = Depends(get_current_admin_user),
    products: ProductRepository = Depends(get_product_repository),
):
    """(Admin Only) Removes the product."""
    await catalog.delete_product(product_id, admin_user, products)
    return MessageResponse(message="Product deleted successfully")
