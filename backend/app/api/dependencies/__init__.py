"""
Central export point for all dependencies.

This module re-exports all dependencies from submodules
for convenient access throughout the application.
"""

from .auth import get_current_principal, get_optional_principal, require_admin
from .database import get_db
from .pagination import PageParams, get_page_params
from .services import (
    get_admin_service,
    get_availability_service,
    get_booking_service,
    get_dashboard_service,
    get_material_service,
    get_onboarding_service,
    get_order_service,
    get_payment_gateway,
    get_payment_service,
    get_payout_service,
    get_review_service,
    get_teacher_service,
    get_tutoring_session_service,
)

__all__ = [
    # Auth
    "get_current_principal",
    "get_optional_principal",
    "require_admin",
    # Database
    "get_db",
    # Pagination
    "PageParams",
    "get_page_params",
    # Services
    "get_admin_service",
    "get_availability_service",
    "get_booking_service",
    "get_dashboard_service",
    "get_material_service",
    "get_onboarding_service",
    "get_order_service",
    "get_payment_gateway",
    "get_payment_service",
    "get_payout_service",
    "get_review_service",
    "get_teacher_service",
    "get_tutoring_session_service",
]
