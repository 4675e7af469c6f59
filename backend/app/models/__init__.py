"""
Database models for the tutoring marketplace.

The models are organized by functionality:
- Users, profiles and teacher extensions
- Availability and bookings
- Payments, sessions and reviews
- Materials, orders and payouts
- Platform settings
"""

from .availability import AvailabilitySlot
from .booking import Booking, BookingMode, BookingStatus
from .material import Material, Order, OrderStatus
from .payment import Payment, PaymentGateway, PaymentStatus
from .payout import Payout, PayoutStatus
from .platform_setting import PlatformSetting
from .review import Review
from .teacher import Skill, Teacher, teacher_skills
from .tutoring_session import TutoringSession
from .user import Profile, User

__all__ = [
    "AvailabilitySlot",
    "Booking",
    "BookingMode",
    "BookingStatus",
    "Material",
    "Order",
    "OrderStatus",
    "Payment",
    "PaymentGateway",
    "PaymentStatus",
    "Payout",
    "PayoutStatus",
    "PlatformSetting",
    "Profile",
    "Review",
    "Skill",
    "Teacher",
    "TutoringSession",
    "User",
    "teacher_skills",
]
