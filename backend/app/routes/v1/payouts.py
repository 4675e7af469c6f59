# backend/app/routes/v1/payouts.py
"""
Payout routes - API v1

    GET   /                      → Own payouts (teacher) or all (admin)
    POST  /                      → Request a payout (teacher)
    GET   /stats                 → Earnings and balance (teacher)
    PATCH /{payout_id}/status    → Process a payout (admin)
"""

from dataclasses import asdict
from datetime import date
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies.auth import get_current_principal
from ...api.dependencies.pagination import PageParams, get_page_params
from ...api.dependencies.services import get_payout_service
from ...models.payout import PayoutStatus
from ...principal import Principal
from ...schemas.base_responses import PaginatedResponse
from ...schemas.payout import (
    PayoutRequest,
    PayoutResponse,
    PayoutStatsResponse,
    PayoutStatusUpdate,
)
from ...services.payout_service import PayoutService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["payouts-v1"])


@router.get("", response_model=PaginatedResponse[PayoutResponse])
def list_payouts(
    status_filter: Optional[PayoutStatus] = Query(None, alias="status"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    paging: PageParams = Depends(get_page_params),
    principal: Principal = Depends(get_current_principal),
    service: PayoutService = Depends(get_payout_service),
) -> PaginatedResponse[PayoutResponse]:
    page = service.list_payouts(
        principal,
        status=status_filter,
        start_date=start_date,
        end_date=end_date,
        page=paging.page,
        limit=paging.limit,
    )
    return PaginatedResponse[PayoutResponse].from_page(page, PayoutResponse.model_validate)


@router.post("", response_model=PayoutResponse, status_code=status.HTTP_201_CREATED)
def request_payout(
    payload: PayoutRequest,
    principal: Principal = Depends(get_current_principal),
    service: PayoutService = Depends(get_payout_service),
) -> PayoutResponse:
    return PayoutResponse.model_validate(
        service.request_payout(principal, payload.amount, payload.notes)
    )


@router.get("/stats", response_model=PayoutStatsResponse)
def payout_stats(
    principal: Principal = Depends(get_current_principal),
    service: PayoutService = Depends(get_payout_service),
) -> PayoutStatsResponse:
    return PayoutStatsResponse(**asdict(service.stats(principal)))


@router.patch("/{payout_id}/status", response_model=PayoutResponse)
def update_payout_status(
    payout_id: str,
    payload: PayoutStatusUpdate,
    principal: Principal = Depends(get_current_principal),
    service: PayoutService = Depends(get_payout_service),
) -> PayoutResponse:
    return PayoutResponse.model_validate(
        service.update_status(principal, payout_id, payload.status, payload.notes)
    )
