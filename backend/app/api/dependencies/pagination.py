"""Shared ``page``/``limit`` query parameters."""

from dataclasses import dataclass

from fastapi import Query

from ...core.config import settings


@dataclass(frozen=True)
class PageParams:
    page: int
    limit: int


def get_page_params(
    page: int = Query(1, ge=1, description="Page number, starting at 1"),
    limit: int = Query(
        settings.default_page_size,
        ge=1,
        le=settings.max_page_size,
        description="Items per page",
    ),
) -> PageParams:
    return PageParams(page=page, limit=limit)
