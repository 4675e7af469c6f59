# backend/tests/core/test_permissions.py
"""Permission matrix behaviour."""

import pytest

from app.core.enums import Action, Ownership, RoleName
from app.core.exceptions import ForbiddenException
from app.core.permissions import PERMISSION_MATRIX, authorize, is_allowed
from app.principal import Principal


def principal_for(role: RoleName, teacher_id=None) -> Principal:
    return Principal(
        user_id=f"user-{role.value}",
        email=f"{role.value.lower()}@example.com",
        role=role,
        profile_id=f"profile-{role.value}",
        teacher_id=teacher_id,
    )


class TestIsAllowed:
    def test_missing_entry_denies(self):
        assert (RoleName.STUDENT, Action.SLOT_CREATE) not in PERMISSION_MATRIX
        assert not is_allowed(RoleName.STUDENT, Action.SLOT_CREATE, is_owner=True)

    def test_owner_grant_requires_ownership(self):
        assert PERMISSION_MATRIX[(RoleName.STUDENT, Action.BOOKING_CANCEL)] is Ownership.OWNER
        assert is_allowed(RoleName.STUDENT, Action.BOOKING_CANCEL, is_owner=True)
        assert not is_allowed(RoleName.STUDENT, Action.BOOKING_CANCEL, is_owner=False)

    def test_any_grant_ignores_ownership(self):
        assert is_allowed(RoleName.ADMIN, Action.BOOKING_CANCEL, is_owner=False)

    @pytest.mark.parametrize(
        "role,action,allowed",
        [
            (RoleName.TEACHER, Action.BOOKING_CONFIRM, True),
            (RoleName.STUDENT, Action.BOOKING_CONFIRM, False),
            (RoleName.TEACHER, Action.BOOKING_CANCEL, False),
            (RoleName.TEACHER, Action.REVIEW_CREATE, False),
            (RoleName.STUDENT, Action.PAYOUT_REQUEST, False),
            (RoleName.TEACHER, Action.PAYMENT_OVERRIDE, False),
            (RoleName.ADMIN, Action.PAYMENT_OVERRIDE, True),
            (RoleName.ADMIN, Action.SLOT_CREATE, False),
        ],
    )
    def test_role_action_pairs(self, role, action, allowed):
        assert is_allowed(role, action, is_owner=True) is allowed


class TestAuthorize:
    def test_allowed_action_returns_none(self):
        assert authorize(principal_for(RoleName.TEACHER, "t1"), Action.SLOT_CREATE) is None

    def test_denied_action_raises_forbidden_with_details(self):
        with pytest.raises(ForbiddenException) as exc_info:
            authorize(principal_for(RoleName.STUDENT), Action.SLOT_CREATE)

        exc = exc_info.value
        assert exc.status_code == 403
        assert exc.code == "FORBIDDEN"
        assert exc.details == {"action": "slot_create", "role": "STUDENT"}

    def test_non_owner_is_denied_owner_scoped_action(self):
        with pytest.raises(ForbiddenException):
            authorize(principal_for(RoleName.STUDENT), Action.REVIEW_UPDATE, is_owner=False)


def test_principal_is_immutable():
    principal = principal_for(RoleName.STUDENT)
    with pytest.raises(AttributeError):
        principal.role = RoleName.ADMIN  # type: ignore[misc]
    assert principal.is_student and not principal.is_admin
