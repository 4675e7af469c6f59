# backend/app/routes/v1/__init__.py
"""
API v1 Routes

Versioned API endpoints under /api/v1.
"""

from . import (
    admin,
    availability,
    bookings,
    dashboard,
    materials,
    onboarding,
    orders,
    payments,
    payouts,
    prometheus,
    reviews,
    sessions,
    skills,
    teachers,
    webhooks_midtrans,
)

__all__ = [
    "admin",
    "availability",
    "bookings",
    "dashboard",
    "materials",
    "onboarding",
    "orders",
    "payments",
    "payouts",
    "prometheus",
    "reviews",
    "sessions",
    "skills",
    "teachers",
    "webhooks_midtrans",
]
