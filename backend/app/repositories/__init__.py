"""
Repository layer for data access, separating business logic from queries.

Usage:
    from app.repositories import RepositoryFactory

    # In a service:
    booking_repo = RepositoryFactory.create_booking_repository(db)
    conflicts = booking_repo.find_confirmed_overlapping(teacher_id, start, end)
"""

from .availability_repository import AvailabilityRepository
from .base_repository import BaseRepository, IRepository, Page
from .booking_repository import BookingRepository
from .factory import RepositoryFactory
from .material_repository import MaterialRepository, OrderRepository
from .payment_repository import PaymentRepository
from .payout_repository import PayoutRepository
from .review_repository import ReviewRepository
from .teacher_repository import SkillRepository, TeacherRepository
from .tutoring_session_repository import TutoringSessionRepository
from .user_repository import PlatformSettingRepository, ProfileRepository, UserRepository

__all__ = [
    "AvailabilityRepository",
    "BaseRepository",
    "BookingRepository",
    "IRepository",
    "MaterialRepository",
    "OrderRepository",
    "Page",
    "PaymentRepository",
    "PayoutRepository",
    "PlatformSettingRepository",
    "ProfileRepository",
    "RepositoryFactory",
    "ReviewRepository",
    "SkillRepository",
    "TeacherRepository",
    "TutoringSessionRepository",
    "UserRepository",
]
