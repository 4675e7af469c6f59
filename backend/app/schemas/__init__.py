"""Request and response schemas."""

from .base import Money, StandardizedModel, UtcDatetime
from .base_responses import DeleteResponse, PaginatedResponse, PaginationMeta, SuccessResponse

__all__ = [
    "DeleteResponse",
    "Money",
    "PaginatedResponse",
    "PaginationMeta",
    "StandardizedModel",
    "SuccessResponse",
    "UtcDatetime",
]
