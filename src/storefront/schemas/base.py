# src/storefront/schemas/base.py

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """API schema serialized with camelCase keys (createdAt, minPrice, ...)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageResponse(CamelModel):
    success: bool = True
    message: str


class DataResponse(CamelModel, Generic[DataT]):
    """The `{success, message?, data}` envelope returned by every read/write route."""

    success: bool = True
    message: Optional[str] = None
    data: DataT


class ErrorResponse(CamelModel):
    success: bool = False
    message: str
