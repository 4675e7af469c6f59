# backend/tests/services/test_catalog_admin_services.py
"""Onboarding, teacher catalog, sessions, admin settings and dashboards."""

from decimal import Decimal

import pytest

from app.core.enums import RoleName
from app.core.exceptions import (
    ConflictException,
    ForbiddenException,
    InvalidStateException,
    NotFoundException,
    ValidationException,
)
from app.models.booking import BookingStatus
from app.services.admin_service import AdminService, PlatformSettings
from app.services.dashboard_service import DashboardService
from app.services.onboarding_service import OnboardingService
from app.services.teacher_service import TeacherService
from app.services.tutoring_session_service import TutoringSessionService


class TestOnboarding:
    @pytest.fixture
    def service(self, db):
        return OnboardingService(db)

    def test_teacher_onboarding_creates_teacher_row(self, service, make_account):
        account = make_account(with_profile=False)
        profile = service.onboard(
            account.user.id, RoleName.TEACHER, "Rina Guru", price_per_hour=Decimal("120000")
        )
        assert profile.role == RoleName.TEACHER.value
        assert profile.teacher is not None
        assert profile.teacher.price_per_hour == Decimal("120000")

    def test_student_onboarding_has_no_teacher_row(self, service, make_account):
        account = make_account(with_profile=False)
        profile = service.onboard(account.user.id, RoleName.STUDENT, "Sari Murid", city="Bandung")
        assert profile.teacher is None
        assert service.get_profile(account.user.id).city == "Bandung"

    def test_admin_role_cannot_be_self_assigned(self, service, make_account):
        account = make_account(with_profile=False)
        with pytest.raises(ValidationException):
            service.onboard(account.user.id, RoleName.ADMIN, "Sneaky")

    def test_onboarding_twice_conflicts(self, service, student):
        with pytest.raises(ConflictException):
            service.onboard(student.user.id, RoleName.TEACHER, "Again")

    def test_inactive_account_is_forbidden(self, service, make_account):
        account = make_account(with_profile=False, is_active=False)
        with pytest.raises(ForbiddenException):
            service.onboard(account.user.id, RoleName.STUDENT, "Dormant")


class TestTeacherCatalog:
    @pytest.fixture
    def service(self, db):
        return TeacherService(db)

    def test_skills_replace_and_unknown_skills_fail(self, service, admin, teacher):
        math = service.create_skill(admin.principal, " Math ")
        physics = service.create_skill(admin.principal, "Physics")

        updated = service.update_my_profile(
            teacher.principal, skill_ids=[math.id, physics.id], bio="Olympiad coach"
        )
        assert {s.name for s in updated.skills} == {"Math", "Physics"}
        assert updated.profile.bio == "Olympiad coach"

        updated = service.update_my_profile(teacher.principal, skill_ids=[physics.id])
        assert [s.name for s in updated.skills] == ["Physics"]

        with pytest.raises(ValidationException) as exc_info:
            service.update_my_profile(teacher.principal, skill_ids=["missing"])
        assert exc_info.value.code == "UNKNOWN_SKILL"

    def test_duplicate_skill(self, service, admin):
        service.create_skill(admin.principal, "Chemistry")
        with pytest.raises(ConflictException):
            service.create_skill(admin.principal, "Chemistry")

    def test_only_admins_create_skills(self, service, teacher):
        with pytest.raises(ForbiddenException):
            service.create_skill(teacher.principal, "Biology")

    def test_search_by_price_and_skill(self, service, admin, make_account):
        cheap = make_account(RoleName.TEACHER, price_per_hour=Decimal("50000"))
        pricey = make_account(RoleName.TEACHER, price_per_hour=Decimal("250000"))
        math = service.create_skill(admin.principal, "Math")
        service.update_my_profile(pricey.principal, skill_ids=[math.id])

        by_price = service.search_teachers(max_price=Decimal("100000"))
        assert [t.id for t in by_price.items] == [cheap.teacher.id]
        by_skill = service.search_teachers(skill_ids=[math.id])
        assert [t.id for t in by_skill.items] == [pricey.teacher.id]

    def test_search_rejects_inverted_price_range(self, service):
        with pytest.raises(ValidationException):
            service.search_teachers(min_price=Decimal("10"), max_price=Decimal("5"))

    def test_unknown_teacher(self, service):
        with pytest.raises(NotFoundException):
            service.get_teacher("missing")


class TestSessions:
    @pytest.fixture
    def service(self, db):
        return TutoringSessionService(db)

    def test_teacher_upserts_single_session(self, service, student, teacher, make_booking):
        booking = make_booking(student, teacher, status=BookingStatus.PAID)

        created = service.upsert_session(
            teacher.principal, booking.id, meeting_link="https://meet.example.com/a"
        )
        updated = service.upsert_session(teacher.principal, booking.id, location="Room 2")

        assert updated.id == created.id
        assert updated.meeting_link == "https://meet.example.com/a"
        assert updated.location == "Room 2"
        assert service.list_sessions(student.principal).total == 1

    def test_closed_bookings_cannot_be_scheduled(self, service, student, teacher, make_booking):
        booking = make_booking(student, teacher, status=BookingStatus.CANCELLED)
        with pytest.raises(InvalidStateException):
            service.upsert_session(teacher.principal, booking.id, meeting_link="https://x")

    def test_students_cannot_manage_sessions(self, service, student, teacher, make_booking):
        booking = make_booking(student, teacher, status=BookingStatus.PAID)
        with pytest.raises(ForbiddenException):
            service.upsert_session(student.principal, booking.id, meeting_link="https://x")


class TestAdmin:
    @pytest.fixture
    def service(self, db):
        return AdminService(db)

    def test_settings_default_then_override(self, service, admin):
        assert service.get_settings(admin.principal) == PlatformSettings.defaults()

        updated = service.update_settings(admin.principal, {"commission_rate": 0.15})
        assert updated.commission_rate == 0.15
        assert updated.min_payout_amount == PlatformSettings.defaults().min_payout_amount

    @pytest.mark.parametrize(
        "changes",
        [{"commission_rate": 1.5}, {"min_payout_amount": -1}, {"unknown": 1}, {"payout_processing_days": True}],
    )
    def test_invalid_settings(self, service, admin, changes):
        with pytest.raises(ValidationException):
            service.update_settings(admin.principal, changes)

    def test_settings_are_admin_only(self, service, teacher):
        with pytest.raises(ForbiddenException):
            service.get_settings(teacher.principal)

    def test_user_management(self, service, admin, student):
        assert service.list_users(admin.principal).total == 2
        assert service.list_users(admin.principal, role=RoleName.STUDENT).total == 1

        user = service.set_user_active(admin.principal, student.user.id, False)
        assert user.is_active is False

        with pytest.raises(ConflictException):
            service.set_user_active(admin.principal, admin.user.id, False)
        with pytest.raises(ConflictException):
            service.delete_user(admin.principal, admin.user.id)

        service.delete_user(admin.principal, student.user.id)
        with pytest.raises(NotFoundException):
            service.set_user_active(admin.principal, student.user.id, True)


class TestDashboards:
    def test_each_role_gets_its_own_shape(self, db, admin, student, teacher, make_booking):
        make_booking(student, teacher, status=BookingStatus.COMPLETED)
        service = DashboardService(db)

        student_view = service.for_principal(student.principal)
        assert student_view["role"] == "STUDENT"
        assert len(student_view["recent_bookings"]) == 1

        teacher_view = service.for_principal(teacher.principal)
        assert teacher_view["booking_counts"] == {"COMPLETED": 1}
        assert teacher_view["payout_stats"].total_earnings == Decimal("100000")

        admin_view = service.for_principal(admin.principal)
        assert admin_view["total_users"] == 3
        assert admin_view["total_bookings"] == 1
