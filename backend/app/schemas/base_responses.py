"""
Base response schemas for standardized API responses.

Every list endpoint answers ``{data: [...], pagination: {...}}``.
"""

from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from ..repositories.base_repository import Page

T = TypeVar("T")


class PaginationMeta(BaseModel):
    page: int = Field(ge=1, description="Current page number")
    limit: int = Field(ge=1, description="Items per page")
    total: int = Field(ge=0, description="Total number of items")
    total_pages: int = Field(ge=0, description="Number of pages")


class PaginatedResponse(BaseModel, Generic[T]):
    """Standard paginated response for all list endpoints."""

    data: List[T] = Field(description="Items on this page")
    pagination: PaginationMeta

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "data": ["..."],
                "pagination": {"page": 1, "limit": 10, "total": 42, "total_pages": 5},
            }
        }
    )

    @classmethod
    def from_page(cls, page: Page[Any], convert: Callable[[Any], T]) -> "PaginatedResponse[T]":
        return cls(
            data=[convert(item) for item in page.items],
            pagination=PaginationMeta(
                page=page.page,
                limit=page.limit,
                total=page.total,
                total_pages=page.total_pages,
            ),
        )


class SuccessResponse(BaseModel):
    """Standard success response for operations."""

    success: bool = Field(default=True, description="Operation success status")
    message: str = Field(description="Human-readable success message")
    data: Optional[Dict[str, Any]] = Field(default=None, description="Optional additional data")


class DeleteResponse(BaseModel):
    """Standard response for delete operations."""

    success: bool = Field(default=True, description="Deletion success status")
    message: str = Field(description="Human-readable deletion message")
