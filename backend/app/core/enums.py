# backend/app/core/enums.py
"""
Core enums shared by models, permissions and schemas.
"""

from enum import Enum


class RoleName(str, Enum):
    """Profile roles. A profile has exactly one role."""

    STUDENT = "STUDENT"
    TEACHER = "TEACHER"
    ADMIN = "ADMIN"


class Action(str, Enum):
    """
    Mutating operations subject to the permission matrix.

    Names follow ``<resource>_<verb>`` so the matrix reads as a table.
    """

    SLOT_CREATE = "slot_create"
    SLOT_DELETE = "slot_delete"

    BOOKING_CREATE = "booking_create"
    BOOKING_CANCEL = "booking_cancel"
    BOOKING_CONFIRM = "booking_confirm"
    BOOKING_OVERRIDE = "booking_override"

    SESSION_MANAGE = "session_manage"

    PAYMENT_INITIATE = "payment_initiate"
    PAYMENT_VIEW = "payment_view"
    PAYMENT_OVERRIDE = "payment_override"

    REVIEW_CREATE = "review_create"
    REVIEW_UPDATE = "review_update"
    REVIEW_DELETE = "review_delete"

    MATERIAL_CREATE = "material_create"
    MATERIAL_UPDATE = "material_update"
    MATERIAL_DELETE = "material_delete"

    ORDER_CREATE = "order_create"
    ORDER_CANCEL = "order_cancel"
    ORDER_OVERRIDE = "order_override"
    ORDER_DOWNLOAD = "order_download"

    PAYOUT_REQUEST = "payout_request"
    PAYOUT_PROCESS = "payout_process"

    TEACHER_PROFILE_UPDATE = "teacher_profile_update"
    SKILL_CREATE = "skill_create"

    SETTINGS_MANAGE = "settings_manage"
    USER_MANAGE = "user_manage"


class Ownership(str, Enum):
    """Scope of a grant: only resources the principal owns, or any resource."""

    OWNER = "owner"
    ANY = "any"
