# backend/app/routes/v1/reviews.py
"""
Reviews routes - API v1

Versioned review endpoints under /api/v1/reviews.
All business logic delegated to ReviewService.

    GET    /               → List reviews (public; filter by teacher and rating range)
    POST   /               → Review a completed booking (student)
    PATCH  /{review_id}    → Edit own review (student)
    DELETE /{review_id}    → Delete review (owner student or admin)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies.auth import get_current_principal
from ...api.dependencies.pagination import PageParams, get_page_params
from ...api.dependencies.services import get_review_service
from ...principal import Principal
from ...schemas.base_responses import DeleteResponse, PaginatedResponse
from ...schemas.review import ReviewCreate, ReviewResponse, ReviewUpdate
from ...services.review_service import ReviewService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["reviews-v1"])


@router.get("", response_model=PaginatedResponse[ReviewResponse])
def list_reviews(
    teacher_id: Optional[str] = Query(None),
    min_rating: Optional[int] = Query(None, ge=1, le=5),
    max_rating: Optional[int] = Query(None, ge=1, le=5),
    paging: PageParams = Depends(get_page_params),
    service: ReviewService = Depends(get_review_service),
) -> PaginatedResponse[ReviewResponse]:
    page = service.list_reviews(
        teacher_id=teacher_id,
        min_rating=min_rating,
        max_rating=max_rating,
        page=paging.page,
        limit=paging.limit,
    )
    return PaginatedResponse[ReviewResponse].from_page(page, ReviewResponse.from_review)


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    payload: ReviewCreate,
    principal: Principal = Depends(get_current_principal),
    service: ReviewService = Depends(get_review_service),
) -> ReviewResponse:
    review = service.create_review(principal, payload.booking_id, payload.rating, payload.comment)
    return ReviewResponse.from_review(review)


@router.patch("/{review_id}", response_model=ReviewResponse)
def update_review(
    review_id: str,
    payload: ReviewUpdate,
    principal: Principal = Depends(get_current_principal),
    service: ReviewService = Depends(get_review_service),
) -> ReviewResponse:
    review = service.update_review(
        principal, review_id, rating=payload.rating, comment=payload.comment
    )
    return ReviewResponse.from_review(review)


@router.delete("/{review_id}", response_model=DeleteResponse)
def delete_review(
    review_id: str,
    principal: Principal = Depends(get_current_principal),
    service: ReviewService = Depends(get_review_service),
) -> DeleteResponse:
    service.delete_review(principal, review_id)
    return DeleteResponse(message="Review deleted")
