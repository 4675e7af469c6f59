# backend/app/routes/v1/orders.py
"""
Order routes - API v1

    GET   /                        → Caller's orders (student) or all (admin)
    POST  /                        → Order a published material (student)
    GET   /{order_id}              → Order detail
    PATCH /{order_id}/status       → Cancel own pending order (student) or set any status (admin)
    GET   /{order_id}/download     → Download link for a paid order (owner)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies.auth import get_current_principal
from ...api.dependencies.pagination import PageParams, get_page_params
from ...api.dependencies.services import get_order_service
from ...models.material import OrderStatus
from ...principal import Principal
from ...schemas.base_responses import PaginatedResponse
from ...schemas.material import DownloadResponse, OrderCreate, OrderResponse, OrderStatusUpdate
from ...services.order_service import OrderService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["orders-v1"])


@router.get("", response_model=PaginatedResponse[OrderResponse])
def list_orders(
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    paging: PageParams = Depends(get_page_params),
    principal: Principal = Depends(get_current_principal),
    service: OrderService = Depends(get_order_service),
) -> PaginatedResponse[OrderResponse]:
    page = service.list_orders(principal, status=status_filter, page=paging.page, limit=paging.limit)
    return PaginatedResponse[OrderResponse].from_page(page, OrderResponse.from_order)


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    payload: OrderCreate,
    principal: Principal = Depends(get_current_principal),
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    order = service.create_order(principal, payload.material_id)
    return OrderResponse.from_order(service.get_order(principal, order.id))


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: str,
    principal: Principal = Depends(get_current_principal),
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    return OrderResponse.from_order(service.get_order(principal, order_id))


@router.patch("/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: str,
    payload: OrderStatusUpdate,
    principal: Principal = Depends(get_current_principal),
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    return OrderResponse.from_order(service.update_status(principal, order_id, payload.status))


@router.get("/{order_id}/download", response_model=DownloadResponse)
def download_order(
    order_id: str,
    principal: Principal = Depends(get_current_principal),
    service: OrderService = Depends(get_order_service),
) -> DownloadResponse:
    return DownloadResponse(**service.download(principal, order_id))
