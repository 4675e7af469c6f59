# backend/app/routes/v1/sessions.py
"""
Tutoring session routes - API v1

    GET  /                      → Caller's sessions
    POST /                      → Create or update a booking's session (owner teacher)
    POST /{session_id}/start    → Start the lesson (owner teacher)
    POST /{session_id}/end      → End the lesson (owner teacher)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...api.dependencies.auth import get_current_principal
from ...api.dependencies.pagination import PageParams, get_page_params
from ...api.dependencies.services import get_booking_service, get_tutoring_session_service
from ...models.booking import BookingStatus
from ...principal import Principal
from ...schemas.base_responses import PaginatedResponse
from ...schemas.booking import SessionResponse, SessionUpsert
from ...services.booking_service import BookingService
from ...services.tutoring_session_service import TutoringSessionService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["sessions-v1"])


@router.get("", response_model=PaginatedResponse[SessionResponse])
def list_sessions(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    paging: PageParams = Depends(get_page_params),
    principal: Principal = Depends(get_current_principal),
    service: TutoringSessionService = Depends(get_tutoring_session_service),
) -> PaginatedResponse[SessionResponse]:
    page = service.list_sessions(
        principal, status=status_filter, page=paging.page, limit=paging.limit
    )
    return PaginatedResponse[SessionResponse].from_page(page, SessionResponse.from_session)


@router.post("", response_model=SessionResponse)
def upsert_session(
    payload: SessionUpsert,
    principal: Principal = Depends(get_current_principal),
    service: TutoringSessionService = Depends(get_tutoring_session_service),
) -> SessionResponse:
    session = service.upsert_session(
        principal,
        payload.booking_id,
        meeting_link=payload.meeting_link,
        location=payload.location,
    )
    return SessionResponse.from_session(session)


@router.post("/{session_id}/start", response_model=SessionResponse)
def start_session(
    session_id: str,
    principal: Principal = Depends(get_current_principal),
    service: BookingService = Depends(get_booking_service),
) -> SessionResponse:
    return SessionResponse.from_session(service.start_session(principal, session_id))


@router.post("/{session_id}/end", response_model=SessionResponse)
def end_session(
    session_id: str,
    principal: Principal = Depends(get_current_principal),
    service: BookingService = Depends(get_booking_service),
) -> SessionResponse:
    return SessionResponse.from_session(service.end_session(principal, session_id))
