# backend/app/routes/v1/dashboard.py
"""Role-specific dashboard (GET /api/v1/dashboard)."""

from dataclasses import asdict
import logging
from typing import Any, Dict, Union

from fastapi import APIRouter, Depends

from ...api.dependencies.auth import get_current_principal
from ...api.dependencies.services import get_dashboard_service
from ...core.enums import RoleName
from ...principal import Principal
from ...schemas.admin import (
    AdminDashboardResponse,
    StudentDashboardResponse,
    TeacherDashboardResponse,
)
from ...schemas.booking import BookingResponse
from ...schemas.material import OrderResponse
from ...schemas.payout import PayoutStatsResponse
from ...schemas.review import ReviewResponse
from ...services.dashboard_service import DashboardService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dashboard-v1"])

DashboardResponse = Union[
    StudentDashboardResponse, TeacherDashboardResponse, AdminDashboardResponse
]


def _bookings(items: Any) -> list:
    return [BookingResponse.from_booking(booking) for booking in items]


def _reviews(items: Any) -> list:
    return [ReviewResponse.from_review(review) for review in items]


def _render(data: Dict[str, Any]) -> DashboardResponse:
    role = data["role"]
    if role == RoleName.STUDENT.value:
        return StudentDashboardResponse(
            role=role,
            upcoming_bookings=_bookings(data["upcoming_bookings"]),
            recent_bookings=_bookings(data["recent_bookings"]),
            recent_orders=[OrderResponse.from_order(order) for order in data["recent_orders"]],
            recent_reviews=_reviews(data["recent_reviews"]),
        )
    if role == RoleName.TEACHER.value:
        return TeacherDashboardResponse(
            role=role,
            upcoming_bookings=_bookings(data["upcoming_bookings"]),
            recent_reviews=_reviews(data["recent_reviews"]),
            avg_rating=data["avg_rating"],
            review_count=data["review_count"],
            booking_counts=data["booking_counts"],
            payout_stats=PayoutStatsResponse(**asdict(data["payout_stats"])),
        )
    return AdminDashboardResponse(
        role=role,
        total_users=data["total_users"],
        total_bookings=data["total_bookings"],
        total_materials=data["total_materials"],
        total_revenue=data["total_revenue"],
        booking_counts=data["booking_counts"],
        recent_bookings=_bookings(data["recent_bookings"]),
    )


@router.get("", response_model=DashboardResponse)
def get_dashboard(
    principal: Principal = Depends(get_current_principal),
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardResponse:
    return _render(service.for_principal(principal))
