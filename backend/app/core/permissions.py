# backend/app/core/permissions.py
"""
Declarative permission matrix.

Every mutating service operation asks ``authorize`` whether the principal's
role may perform an action, given whether the principal owns the target
resource. A missing entry means deny.
"""

import logging
from typing import Mapping, Optional, Tuple

from .enums import Action, Ownership, RoleName
from .exceptions import ForbiddenException

logger = logging.getLogger(__name__)

_S = RoleName.STUDENT
_T = RoleName.TEACHER
_A = RoleName.ADMIN

PERMISSION_MATRIX: Mapping[Tuple[RoleName, Action], Ownership] = {
    # Availability
    (_T, Action.SLOT_CREATE): Ownership.OWNER,
    (_T, Action.SLOT_DELETE): Ownership.OWNER,
    (_A, Action.SLOT_DELETE): Ownership.ANY,
    # Bookings
    (_S, Action.BOOKING_CREATE): Ownership.OWNER,
    (_S, Action.BOOKING_CANCEL): Ownership.OWNER,
    (_T, Action.BOOKING_CONFIRM): Ownership.OWNER,
    (_A, Action.BOOKING_CANCEL): Ownership.ANY,
    (_A, Action.BOOKING_CONFIRM): Ownership.ANY,
    (_A, Action.BOOKING_OVERRIDE): Ownership.ANY,
    # Sessions
    (_T, Action.SESSION_MANAGE): Ownership.OWNER,
    # Payments
    (_S, Action.PAYMENT_INITIATE): Ownership.OWNER,
    (_S, Action.PAYMENT_VIEW): Ownership.OWNER,
    (_T, Action.PAYMENT_VIEW): Ownership.OWNER,
    (_A, Action.PAYMENT_VIEW): Ownership.ANY,
    (_A, Action.PAYMENT_OVERRIDE): Ownership.ANY,
    # Reviews
    (_S, Action.REVIEW_CREATE): Ownership.OWNER,
    (_S, Action.REVIEW_UPDATE): Ownership.OWNER,
    (_S, Action.REVIEW_DELETE): Ownership.OWNER,
    (_A, Action.REVIEW_DELETE): Ownership.ANY,
    # Materials
    (_T, Action.MATERIAL_CREATE): Ownership.OWNER,
    (_T, Action.MATERIAL_UPDATE): Ownership.OWNER,
    (_T, Action.MATERIAL_DELETE): Ownership.OWNER,
    (_A, Action.MATERIAL_DELETE): Ownership.ANY,
    # Orders
    (_S, Action.ORDER_CREATE): Ownership.OWNER,
    (_S, Action.ORDER_CANCEL): Ownership.OWNER,
    (_S, Action.ORDER_DOWNLOAD): Ownership.OWNER,
    (_A, Action.ORDER_CANCEL): Ownership.ANY,
    (_A, Action.ORDER_OVERRIDE): Ownership.ANY,
    # Payouts
    (_T, Action.PAYOUT_REQUEST): Ownership.OWNER,
    (_A, Action.PAYOUT_PROCESS): Ownership.ANY,
    # Catalog
    (_T, Action.TEACHER_PROFILE_UPDATE): Ownership.OWNER,
    (_A, Action.SKILL_CREATE): Ownership.ANY,
    # Administration
    (_A, Action.SETTINGS_MANAGE): Ownership.ANY,
    (_A, Action.USER_MANAGE): Ownership.ANY,
}


def is_allowed(role: RoleName, action: Action, *, is_owner: bool) -> bool:
    grant: Optional[Ownership] = PERMISSION_MATRIX.get((role, action))
    if grant is None:
        return False
    if grant is Ownership.ANY:
        return True
    return is_owner


def authorize(principal, action: Action, *, is_owner: bool = True) -> None:
    """
    Raise ForbiddenException unless the matrix grants ``action``.

    ``is_owner`` defaults to True for actions whose target is created by the
    caller (e.g. creating a slot for oneself).
    """
    if not is_allowed(principal.role, action, is_owner=is_owner):
        logger.info(
            f"Denied {action.value} for user {principal.user_id} "
            f"(role={principal.role.value}, owner={is_owner})"
        )
        raise ForbiddenException(
            f"Not allowed to perform {action.value}",
            code="FORBIDDEN",
            details={"action": action.value, "role": principal.role.value},
        )
