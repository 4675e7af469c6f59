# backend/tests/services/test_payout_service.py
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.core.exceptions import (
    BusinessRuleException,
    ForbiddenException,
    InvalidStateException,
    ValidationException,
)
from app.models.booking import BookingStatus
from app.models.payout import PayoutStatus
from app.services.admin_service import AdminService
from app.services.payout_service import PayoutService

BASE_TIME = datetime(2030, 1, 7, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def service(db):
    return PayoutService(db)


@pytest.fixture
def earned(student, teacher, make_booking):
    """Teacher has 300000 earned from two completed lessons and one unfinished one."""
    make_booking(
        student, teacher, status=BookingStatus.COMPLETED, start=BASE_TIME, total_price=Decimal("100000")
    )
    make_booking(
        student,
        teacher,
        status=BookingStatus.COMPLETED,
        start=BASE_TIME + timedelta(days=1),
        total_price=Decimal("200000"),
    )
    make_booking(
        student,
        teacher,
        status=BookingStatus.PAID,
        start=BASE_TIME + timedelta(days=2),
        total_price=Decimal("500000"),
    )


class TestBalance:
    def test_only_completed_bookings_count_as_earnings(self, service, teacher, earned):
        stats = service.stats(teacher.principal)
        assert stats.total_earnings == Decimal("300000")
        assert stats.available_balance == Decimal("300000")

    def test_pending_and_paid_payouts_reduce_balance(self, service, admin, teacher, earned):
        first = service.request_payout(teacher.principal, Decimal("100000"))
        second = service.request_payout(teacher.principal, Decimal("50000"))
        service.update_status(admin.principal, first.id, PayoutStatus.PAID)

        stats = service.stats(teacher.principal)
        assert stats.total_paid_out == Decimal("100000")
        assert stats.pending_payouts == Decimal("50000")
        assert stats.available_balance == Decimal("150000")

        service.update_status(admin.principal, second.id, PayoutStatus.FAILED)
        assert service.stats(teacher.principal).available_balance == Decimal("200000")


class TestRequestPayout:
    def test_request_is_recorded_as_requested(self, service, teacher, earned):
        payout = service.request_payout(teacher.principal, Decimal("60000"), notes="January")
        assert payout.status == PayoutStatus.REQUESTED.value
        assert payout.amount == Decimal("60000")
        assert payout.teacher_id == teacher.teacher.id

    def test_non_positive_amount(self, service, teacher, earned):
        with pytest.raises(ValidationException):
            service.request_payout(teacher.principal, Decimal("0"))

    def test_below_platform_minimum(self, service, teacher, earned):
        with pytest.raises(BusinessRuleException) as exc_info:
            service.request_payout(teacher.principal, Decimal("10000"))
        assert exc_info.value.code == "BELOW_MINIMUM_PAYOUT"

    def test_minimum_follows_admin_setting(self, service, db, admin, teacher, earned):
        AdminService(db).update_settings(admin.principal, {"min_payout_amount": 5000})
        payout = service.request_payout(teacher.principal, Decimal("10000"))
        assert payout.amount == Decimal("10000")

    def test_cannot_exceed_balance(self, service, teacher, earned):
        with pytest.raises(BusinessRuleException) as exc_info:
            service.request_payout(teacher.principal, Decimal("300001"))
        assert exc_info.value.code == "INSUFFICIENT_BALANCE"

    def test_students_cannot_request(self, service, student):
        with pytest.raises(ForbiddenException):
            service.request_payout(student.principal, Decimal("60000"))


class TestProcessing:
    def test_settled_payouts_are_final(self, service, admin, teacher, earned):
        payout = service.request_payout(teacher.principal, Decimal("60000"))
        service.update_status(admin.principal, payout.id, PayoutStatus.PROCESSING)
        service.update_status(admin.principal, payout.id, PayoutStatus.PAID)
        assert payout.processed_at is not None

        with pytest.raises(InvalidStateException):
            service.update_status(admin.principal, payout.id, PayoutStatus.FAILED)

    def test_requested_is_not_an_admin_target(self, service, admin, teacher, earned):
        payout = service.request_payout(teacher.principal, Decimal("60000"))
        with pytest.raises(ValidationException):
            service.update_status(admin.principal, payout.id, PayoutStatus.REQUESTED)

    def test_teachers_cannot_process(self, service, teacher, earned):
        payout = service.request_payout(teacher.principal, Decimal("60000"))
        with pytest.raises(ForbiddenException):
            service.update_status(teacher.principal, payout.id, PayoutStatus.PAID)

    def test_listing_is_scoped(self, service, admin, student, teacher, other_teacher, earned):
        service.request_payout(teacher.principal, Decimal("60000"))

        assert service.list_payouts(teacher.principal).total == 1
        assert service.list_payouts(other_teacher.principal).total == 0
        assert service.list_payouts(admin.principal).total == 1
        with pytest.raises(ForbiddenException):
            service.list_payouts(student.principal)
