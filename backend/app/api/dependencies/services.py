# backend/app/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected.
"""

from functools import lru_cache
import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from ...integrations import PaymentGatewayClient
from ...services.admin_service import AdminService
from ...services.availability_service import AvailabilityService
from ...services.booking_service import BookingService
from ...services.dashboard_service import DashboardService
from ...services.material_service import MaterialService
from ...services.onboarding_service import OnboardingService
from ...services.order_service import OrderService
from ...services.payment_service import PaymentService, build_default_gateway
from ...services.payout_service import PayoutService
from ...services.review_service import ReviewService
from ...services.teacher_service import TeacherService
from ...services.tutoring_session_service import TutoringSessionService
from .database import get_db

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_payment_gateway_singleton() -> PaymentGatewayClient:
    """One gateway client (and HTTP connection pool) per process."""
    return build_default_gateway()


def get_payment_gateway() -> PaymentGatewayClient:
    return get_payment_gateway_singleton()


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    return AvailabilityService(db)


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    return BookingService(db)


def get_payment_service(
    db: Session = Depends(get_db),
    gateway: PaymentGatewayClient = Depends(get_payment_gateway),
) -> PaymentService:
    """
    Get payment service instance with its gateway client.

    Args:
        db: Database session
        gateway: Payment gateway client (overridden in tests)

    Returns:
        PaymentService instance
    """
    return PaymentService(db, gateway=gateway, booking_service=BookingService(db))


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    return ReviewService(db)


def get_tutoring_session_service(db: Session = Depends(get_db)) -> TutoringSessionService:
    return TutoringSessionService(db)


def get_teacher_service(db: Session = Depends(get_db)) -> TeacherService:
    return TeacherService(db)


def get_onboarding_service(db: Session = Depends(get_db)) -> OnboardingService:
    return OnboardingService(db)


def get_material_service(db: Session = Depends(get_db)) -> MaterialService:
    return MaterialService(db)


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    return OrderService(db)


def get_payout_service(db: Session = Depends(get_db)) -> PayoutService:
    return PayoutService(db)


def get_admin_service(
    payment_service: PaymentService = Depends(get_payment_service),
) -> AdminService:
    return AdminService(payment_service.db, payment_service=payment_service)


def get_dashboard_service(db: Session = Depends(get_db)) -> DashboardService:
    return DashboardService(db)
