# backend/app/repositories/factory.py
"""
Repository Factory.

Centralizes repository creation so services construct their data access
the same way and tests can patch a single seam.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

# Avoid circular imports
if TYPE_CHECKING:
    from .availability_repository import AvailabilityRepository
    from .booking_repository import BookingRepository
    from .material_repository import MaterialRepository, OrderRepository
    from .payment_repository import PaymentRepository
    from .payout_repository import PayoutRepository
    from .review_repository import ReviewRepository
    from .teacher_repository import SkillRepository, TeacherRepository
    from .tutoring_session_repository import TutoringSessionRepository
    from .user_repository import PlatformSettingRepository, ProfileRepository, UserRepository


class RepositoryFactory:
    @staticmethod
    def create_availability_repository(db: Session) -> "AvailabilityRepository":
        from .availability_repository import AvailabilityRepository

        return AvailabilityRepository(db)

    @staticmethod
    def create_booking_repository(db: Session) -> "BookingRepository":
        from .booking_repository import BookingRepository

        return BookingRepository(db)

    @staticmethod
    def create_payment_repository(db: Session) -> "PaymentRepository":
        from .payment_repository import PaymentRepository

        return PaymentRepository(db)

    @staticmethod
    def create_review_repository(db: Session) -> "ReviewRepository":
        from .review_repository import ReviewRepository

        return ReviewRepository(db)

    @staticmethod
    def create_tutoring_session_repository(db: Session) -> "TutoringSessionRepository":
        from .tutoring_session_repository import TutoringSessionRepository

        return TutoringSessionRepository(db)

    @staticmethod
    def create_teacher_repository(db: Session) -> "TeacherRepository":
        from .teacher_repository import TeacherRepository

        return TeacherRepository(db)

    @staticmethod
    def create_skill_repository(db: Session) -> "SkillRepository":
        from .teacher_repository import SkillRepository

        return SkillRepository(db)

    @staticmethod
    def create_material_repository(db: Session) -> "MaterialRepository":
        from .material_repository import MaterialRepository

        return MaterialRepository(db)

    @staticmethod
    def create_order_repository(db: Session) -> "OrderRepository":
        from .material_repository import OrderRepository

        return OrderRepository(db)

    @staticmethod
    def create_payout_repository(db: Session) -> "PayoutRepository":
        from .payout_repository import PayoutRepository

        return PayoutRepository(db)

    @staticmethod
    def create_user_repository(db: Session) -> "UserRepository":
        from .user_repository import UserRepository

        return UserRepository(db)

    @staticmethod
    def create_profile_repository(db: Session) -> "ProfileRepository":
        from .user_repository import ProfileRepository

        return ProfileRepository(db)

    @staticmethod
    def create_platform_setting_repository(db: Session) -> "PlatformSettingRepository":
        from .user_repository import PlatformSettingRepository

        return PlatformSettingRepository(db)
