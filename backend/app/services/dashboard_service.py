# backend/app/services/dashboard_service.py
"""Role-specific dashboard summaries. Read-only; nothing here opens a transaction."""

from datetime import datetime, timezone
import logging
from typing import Any, Dict

from sqlalchemy.orm import Session

from ..core.enums import RoleName
from ..core.exceptions import ForbiddenException
from ..principal import Principal
from ..repositories.factory import RepositoryFactory
from .base import BaseService
from .payout_service import PayoutService

logger = logging.getLogger(__name__)

RECENT_LIMIT = 5


class DashboardService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.review_repository = RepositoryFactory.create_review_repository(db)
        self.order_repository = RepositoryFactory.create_order_repository(db)
        self.teacher_repository = RepositoryFactory.create_teacher_repository(db)
        self.payment_repository = RepositoryFactory.create_payment_repository(db)
        self.user_repository = RepositoryFactory.create_user_repository(db)
        self.material_repository = RepositoryFactory.create_material_repository(db)
        self.payout_service = PayoutService(db)

    @BaseService.measure_operation("dashboard")
    def for_principal(self, principal: Principal) -> Dict[str, Any]:
        if principal.role is RoleName.STUDENT:
            return self.student_dashboard(principal)
        if principal.role is RoleName.TEACHER:
            return self.teacher_dashboard(principal)
        if principal.role is RoleName.ADMIN:
            return self.admin_dashboard(principal)
        raise ForbiddenException("No dashboard for this role")

    def student_dashboard(self, principal: Principal) -> Dict[str, Any]:
        profile_id = principal.profile_id
        return {
            "role": RoleName.STUDENT.value,
            "upcoming_bookings": self.booking_repository.upcoming(
                now=datetime.now(timezone.utc), student_profile_id=profile_id, limit=RECENT_LIMIT
            ),
            "recent_bookings": self.booking_repository.recent(
                student_profile_id=profile_id, limit=RECENT_LIMIT
            ),
            "recent_orders": self.order_repository.recent(
                buyer_profile_id=profile_id, limit=RECENT_LIMIT
            ),
            "recent_reviews": self.review_repository.recent(
                student_profile_id=profile_id, limit=RECENT_LIMIT
            ),
        }

    def teacher_dashboard(self, principal: Principal) -> Dict[str, Any]:
        teacher_id = self.require_teacher_id(principal)
        teacher = self.teacher_repository.get_by_id(teacher_id)
        return {
            "role": RoleName.TEACHER.value,
            "upcoming_bookings": self.booking_repository.upcoming(
                now=datetime.now(timezone.utc), teacher_id=teacher_id, limit=RECENT_LIMIT
            ),
            "recent_reviews": self.review_repository.recent(
                teacher_id=teacher_id, limit=RECENT_LIMIT
            ),
            "avg_rating": teacher.avg_rating if teacher else 0,
            "review_count": teacher.review_count if teacher else 0,
            "booking_counts": self.booking_repository.count_by_status(teacher_id=teacher_id),
            "payout_stats": self.payout_service.stats_for_teacher(teacher_id),
        }

    def admin_dashboard(self, principal: Principal) -> Dict[str, Any]:
        if not principal.is_admin:
            raise ForbiddenException("Admin access required", code="FORBIDDEN")
        stats = self.payment_repository.transaction_stats()
        return {
            "role": RoleName.ADMIN.value,
            "total_users": self.user_repository.count(),
            "total_bookings": self.booking_repository.count(),
            "total_materials": self.material_repository.count(),
            "total_revenue": stats["total_revenue"],
            "booking_counts": self.booking_repository.count_by_status(),
            "recent_bookings": self.booking_repository.recent(limit=RECENT_LIMIT),
        }
