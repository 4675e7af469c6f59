# backend/app/routes/v1/admin.py
"""
Admin routes - API v1

Every route depends on ``require_admin``; the services authorize again
through the permission matrix.

    GET   /settings                          → Platform settings
    PUT   /settings                          → Update platform settings
    GET   /transactions                      → Payment ledger with filters
    GET   /transactions/stats                → Totals and revenue
    GET   /transactions/{payment_id}         → Payment detail
    PATCH /transactions/{payment_id}/status  → Override to SUCCESS or FAILED
    GET   /users                             → Users with role filter
    PATCH /users/{user_id}/active            → Activate or deactivate
    DELETE /users/{user_id}                  → Delete a user
"""

from dataclasses import asdict
from datetime import date
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...api.dependencies.auth import require_admin
from ...api.dependencies.pagination import PageParams, get_page_params
from ...api.dependencies.services import get_admin_service
from ...core.enums import RoleName
from ...models.payment import PaymentGateway, PaymentStatus
from ...principal import Principal
from ...schemas.admin import (
    PlatformSettingsResponse,
    PlatformSettingsUpdate,
    UserActiveUpdate,
    UserResponse,
)
from ...schemas.base_responses import DeleteResponse, PaginatedResponse
from ...schemas.payment import PaymentResponse, PaymentStatusOverride, TransactionStatsResponse
from ...services.admin_service import AdminService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin-v1"])


@router.get("/settings", response_model=PlatformSettingsResponse)
def get_settings(
    principal: Principal = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
) -> PlatformSettingsResponse:
    return PlatformSettingsResponse(**asdict(service.get_settings(principal)))


@router.put("/settings", response_model=PlatformSettingsResponse)
def update_settings(
    payload: PlatformSettingsUpdate,
    principal: Principal = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
) -> PlatformSettingsResponse:
    updated = service.update_settings(principal, payload.model_dump(exclude_none=True))
    return PlatformSettingsResponse(**asdict(updated))


@router.get("/transactions", response_model=PaginatedResponse[PaymentResponse])
def list_transactions(
    status_filter: Optional[PaymentStatus] = Query(None, alias="status"),
    gateway: Optional[PaymentGateway] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    paging: PageParams = Depends(get_page_params),
    principal: Principal = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
) -> PaginatedResponse[PaymentResponse]:
    page = service.list_transactions(
        principal,
        status=status_filter,
        gateway=gateway,
        start_date=start_date,
        end_date=end_date,
        page=paging.page,
        limit=paging.limit,
    )
    return PaginatedResponse[PaymentResponse].from_page(page, PaymentResponse.from_payment)


@router.get("/transactions/stats", response_model=TransactionStatsResponse)
def transaction_stats(
    principal: Principal = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
) -> TransactionStatsResponse:
    return TransactionStatsResponse(**service.transaction_stats(principal))


@router.get("/transactions/{payment_id}", response_model=PaymentResponse)
def get_transaction(
    payment_id: str,
    principal: Principal = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
) -> PaymentResponse:
    return PaymentResponse.from_payment(service.get_transaction(principal, payment_id))


@router.patch("/transactions/{payment_id}/status", response_model=PaymentResponse)
def override_transaction(
    payment_id: str,
    payload: PaymentStatusOverride,
    principal: Principal = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
) -> PaymentResponse:
    payment = service.override_transaction(principal, payment_id, payload.status)
    return PaymentResponse.from_payment(payment)


@router.get("/users", response_model=PaginatedResponse[UserResponse])
def list_users(
    role: Optional[RoleName] = Query(None),
    paging: PageParams = Depends(get_page_params),
    principal: Principal = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
) -> PaginatedResponse[UserResponse]:
    page = service.list_users(principal, role=role, page=paging.page, limit=paging.limit)
    return PaginatedResponse[UserResponse].from_page(page, UserResponse.from_user)


@router.patch("/users/{user_id}/active", response_model=UserResponse)
def set_user_active(
    user_id: str,
    payload: UserActiveUpdate,
    principal: Principal = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
) -> UserResponse:
    return UserResponse.from_user(service.set_user_active(principal, user_id, payload.is_active))


@router.delete("/users/{user_id}", response_model=DeleteResponse)
def delete_user(
    user_id: str,
    principal: Principal = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
) -> DeleteResponse:
    service.delete_user(principal, user_id)
    return DeleteResponse(message="User deleted")
