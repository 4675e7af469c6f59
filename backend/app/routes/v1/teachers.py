# backend/app/routes/v1/teachers.py
"""
Teacher catalog routes - API v1

    GET   /              → Search teachers (public)
    PATCH /me            → Update own teacher profile and skills (teacher)
    GET   /{teacher_id}  → Teacher detail (public)
"""

from decimal import Decimal
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ...api.dependencies.auth import get_current_principal
from ...api.dependencies.pagination import PageParams, get_page_params
from ...api.dependencies.services import get_teacher_service
from ...principal import Principal
from ...schemas.base_responses import PaginatedResponse
from ...schemas.teacher import TeacherProfileUpdate, TeacherResponse
from ...services.teacher_service import TeacherService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["teachers-v1"])


@router.get("", response_model=PaginatedResponse[TeacherResponse])
def search_teachers(
    search: Optional[str] = Query(None, max_length=200),
    city: Optional[str] = Query(None, max_length=120),
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    min_rating: Optional[Decimal] = Query(None, ge=0, le=5),
    skill_ids: Optional[List[str]] = Query(None),
    paging: PageParams = Depends(get_page_params),
    service: TeacherService = Depends(get_teacher_service),
) -> PaginatedResponse[TeacherResponse]:
    page = service.search_teachers(
        search=search,
        city=city,
        min_price=min_price,
        max_price=max_price,
        min_rating=min_rating,
        skill_ids=skill_ids or (),
        page=paging.page,
        limit=paging.limit,
    )
    return PaginatedResponse[TeacherResponse].from_page(page, TeacherResponse.from_teacher)


# Static routes first (before dynamic routes with path parameters)
@router.patch("/me", response_model=TeacherResponse)
def update_my_profile(
    payload: TeacherProfileUpdate,
    principal: Principal = Depends(get_current_principal),
    service: TeacherService = Depends(get_teacher_service),
) -> TeacherResponse:
    changes = payload.model_dump(exclude_unset=True)
    skill_ids = changes.pop("skill_ids", None)
    teacher = service.update_my_profile(principal, skill_ids=skill_ids, **changes)
    return TeacherResponse.from_teacher(service.get_teacher(teacher.id))


@router.get("/{teacher_id}", response_model=TeacherResponse)
def get_teacher(
    teacher_id: str,
    service: TeacherService = Depends(get_teacher_service),
) -> TeacherResponse:
    return TeacherResponse.from_teacher(service.get_teacher(teacher_id))
