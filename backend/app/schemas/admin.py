# backend/app/schemas/admin.py
"""Admin settings, user management and dashboard schemas."""

from typing import Any, Dict, List, Optional

from pydantic import Field

from ..core.enums import RoleName
from ._strict_base import StrictModel, StrictRequestModel
from .base import Money, StandardizedModel, UtcDatetime
from .booking import BookingResponse
from .material import OrderResponse
from .payout import PayoutStatsResponse
from .review import ReviewResponse


class PlatformSettingsResponse(StrictModel):
    commission_rate: float
    min_payout_amount: int
    payout_processing_days: int


class PlatformSettingsUpdate(StrictRequestModel):
    commission_rate: Optional[float] = Field(None, ge=0, le=1)
    min_payout_amount: Optional[int] = Field(None, ge=0)
    payout_processing_days: Optional[int] = Field(None, ge=0)


class UserResponse(StandardizedModel):
    id: str
    email: str
    is_active: bool
    role: Optional[RoleName] = None
    full_name: Optional[str] = None
    created_at: UtcDatetime

    @classmethod
    def from_user(cls, user: Any) -> "UserResponse":
        profile = user.profile
        return cls(
            id=user.id,
            email=user.email,
            is_active=bool(user.is_active),
            role=profile.role if profile is not None else None,
            full_name=profile.full_name if profile is not None else None,
            created_at=user.created_at,
        )


class UserActiveUpdate(StrictRequestModel):
    is_active: bool


class StudentDashboardResponse(StrictModel):
    role: str
    upcoming_bookings: List[BookingResponse]
    recent_bookings: List[BookingResponse]
    recent_orders: List[OrderResponse]
    recent_reviews: List[ReviewResponse]


class TeacherDashboardResponse(StrictModel):
    role: str
    upcoming_bookings: List[BookingResponse]
    recent_reviews: List[ReviewResponse]
    avg_rating: Money
    review_count: int
    booking_counts: Dict[str, int]
    payout_stats: PayoutStatsResponse


class AdminDashboardResponse(StrictModel):
    role: str
    total_users: int
    total_bookings: int
    total_materials: int
    total_revenue: Money
    booking_counts: Dict[str, int]
    recent_bookings: List[BookingResponse]
