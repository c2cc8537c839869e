"""Response envelope shared by every endpoint.

Successful responses are ``{success: true, message?, data}``; list
endpoints add ``pagination``. Errors use the same ``success`` flag (see
app.core.exception_handlers).
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base for wire models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str | None = None
    data: T | None = None


class Pagination(BaseModel):
    current: int = Field(..., description="Current page (1-based)")
    pages: int = Field(..., description="Number of pages")
    total: int = Field(..., description="Total number of items")


class PaginatedResponse(BaseModel, Generic[T]):
    success: bool = True
    data: list[T]
    pagination: Pagination


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Documented shape of error responses."""

    success: bool = False
    error: str
    message: str
    details: dict | list | None = None
