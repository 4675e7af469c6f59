# backend/app/routes/v1/materials.py
"""
Material routes - API v1

    GET    /                 → Published materials (public)
    POST   /                 → Create a draft material (teacher)
    GET    /{material_id}    → Material detail (drafts visible to owner and admin)
    PATCH  /{material_id}    → Edit or publish (owner teacher)
    DELETE /{material_id}    → Delete (owner teacher, admin)
"""

from decimal import Decimal
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies.auth import get_current_principal, get_optional_principal
from ...api.dependencies.pagination import PageParams, get_page_params
from ...api.dependencies.services import get_material_service
from ...principal import Principal
from ...schemas.base_responses import DeleteResponse, PaginatedResponse
from ...schemas.material import MaterialCreate, MaterialResponse, MaterialUpdate
from ...services.material_service import MaterialService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["materials-v1"])


@router.get("", response_model=PaginatedResponse[MaterialResponse])
def list_materials(
    search: Optional[str] = Query(None, max_length=200),
    teacher_id: Optional[str] = Query(None),
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    paging: PageParams = Depends(get_page_params),
    service: MaterialService = Depends(get_material_service),
) -> PaginatedResponse[MaterialResponse]:
    page = service.list_published(
        search=search,
        teacher_id=teacher_id,
        min_price=min_price,
        max_price=max_price,
        page=paging.page,
        limit=paging.limit,
    )
    return PaginatedResponse[MaterialResponse].from_page(page, MaterialResponse.from_material)


@router.post("", response_model=MaterialResponse, status_code=status.HTTP_201_CREATED)
def create_material(
    payload: MaterialCreate,
    principal: Principal = Depends(get_current_principal),
    service: MaterialService = Depends(get_material_service),
) -> MaterialResponse:
    material = service.create_material(
        principal,
        title=payload.title,
        price=payload.price,
        description=payload.description,
        file_key=payload.file_key,
    )
    return MaterialResponse.from_material(service.get_material(material.id, principal))


@router.get("/{material_id}", response_model=MaterialResponse)
def get_material(
    material_id: str,
    principal: Optional[Principal] = Depends(get_optional_principal),
    service: MaterialService = Depends(get_material_service),
) -> MaterialResponse:
    return MaterialResponse.from_material(service.get_material(material_id, principal))


@router.patch("/{material_id}", response_model=MaterialResponse)
def update_material(
    material_id: str,
    payload: MaterialUpdate,
    principal: Principal = Depends(get_current_principal),
    service: MaterialService = Depends(get_material_service),
) -> MaterialResponse:
    service.update_material(principal, material_id, **payload.model_dump(exclude_unset=True))
    return MaterialResponse.from_material(service.get_material(material_id, principal))


@router.delete("/{material_id}", response_model=DeleteResponse)
def delete_material(
    material_id: str,
    principal: Principal = Depends(get_current_principal),
    service: MaterialService = Depends(get_material_service),
) -> DeleteResponse:
    service.delete_material(principal, material_id)
    return DeleteResponse(message="Material deleted")
