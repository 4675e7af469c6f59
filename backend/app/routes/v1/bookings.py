# backend/app/routes/v1/bookings.py
"""
Booking routes - API v1

    GET   /                       → Caller's bookings (student/teacher scoped, admin all)
    POST  /                       → Book a free slot (student)
    GET   /{booking_id}           → Booking detail (party or admin)
    PATCH /{booking_id}/status    → Request a status change
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies.auth import get_current_principal
from ...api.dependencies.pagination import PageParams, get_page_params
from ...api.dependencies.services import get_booking_service
from ...models.booking import BookingStatus
from ...principal import Principal
from ...schemas.base_responses import PaginatedResponse
from ...schemas.booking import BookingCreate, BookingResponse, BookingStatusUpdate
from ...services.booking_service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bookings-v1"])


@router.get("", response_model=PaginatedResponse[BookingResponse])
def list_bookings(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    paging: PageParams = Depends(get_page_params),
    principal: Principal = Depends(get_current_principal),
    service: BookingService = Depends(get_booking_service),
) -> PaginatedResponse[BookingResponse]:
    page = service.list_bookings(
        principal, status=status_filter, page=paging.page, limit=paging.limit
    )
    return PaginatedResponse[BookingResponse].from_page(page, BookingResponse.from_booking)


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingCreate,
    principal: Principal = Depends(get_current_principal),
    service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    booking = service.create_booking(principal, payload.slot_id, payload.mode, payload.notes)
    return BookingResponse.from_booking(service.get_booking(principal, booking.id))


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: str,
    principal: Principal = Depends(get_current_principal),
    service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    return BookingResponse.from_booking(service.get_booking(principal, booking_id))


@router.patch("/{booking_id}/status", response_model=BookingResponse)
def update_booking_status(
    booking_id: str,
    payload: BookingStatusUpdate,
    principal: Principal = Depends(get_current_principal),
    service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    booking = service.update_status(principal, booking_id, payload.status)
    return BookingResponse.from_booking(booking)
