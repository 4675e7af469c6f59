# backend/tests/services/test_booking_service.py
"""
Booking lifecycle: creation, pricing, transitions and slot side effects.

Run with: pytest backend/tests/services/test_booking_service.py -v
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.core.exceptions import (
    AlreadyBookedException,
    BookingConflictException,
    ForbiddenException,
    InvalidStateException,
    NotFoundException,
)
from app.models.availability import AvailabilitySlot
from app.models.booking import BookingMode, BookingStatus
from app.models.tutoring_session import TutoringSession
from app.services.booking_service import BookingService, calculate_total_price

BASE_TIME = datetime(2030, 1, 7, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def service(db):
    return BookingService(db)


def test_calculate_total_price_rounds_to_cents():
    start = BASE_TIME
    assert calculate_total_price(Decimal("100000"), start, start + timedelta(hours=2)) == Decimal(
        "200000.00"
    )
    assert calculate_total_price(Decimal("100.01"), start, start + timedelta(minutes=30)) == Decimal(
        "50.01"
    )


class TestCreateBooking:
    def test_books_slot_and_prices_from_hourly_rate(self, service, db, student, teacher, make_slot):
        slot = make_slot(teacher, BASE_TIME, hours=2)

        booking = service.create_booking(student.principal, slot.id, BookingMode.OFFLINE, "Algebra")

        assert booking.status == BookingStatus.PENDING.value
        assert booking.total_price == Decimal("200000.00")
        assert booking.student_profile_id == student.profile.id
        assert booking.teacher_id == teacher.teacher.id
        assert booking.mode == BookingMode.OFFLINE.value
        db.refresh(slot)
        assert slot.is_booked is True

    def test_booked_slot_is_rejected(self, service, student, other_student, teacher, make_slot):
        slot = make_slot(teacher)
        service.create_booking(student.principal, slot.id)

        with pytest.raises(AlreadyBookedException):
            service.create_booking(other_student.principal, slot.id)

    def test_overlapping_confirmed_booking_blocks_new_booking(
        self, service, db, student, other_student, teacher, make_slot, make_booking
    ):
        make_booking(other_student, teacher, status=BookingStatus.CONFIRMED, start=BASE_TIME)
        overlapping = make_slot(teacher, BASE_TIME + timedelta(minutes=30))

        with pytest.raises(BookingConflictException):
            service.create_booking(student.principal, overlapping.id)

        db.refresh(overlapping)
        assert overlapping.is_booked is False

    def test_adjacent_confirmed_booking_does_not_conflict(
        self, service, student, other_student, teacher, make_slot, make_booking
    ):
        make_booking(other_student, teacher, status=BookingStatus.CONFIRMED, start=BASE_TIME)
        adjacent = make_slot(teacher, BASE_TIME + timedelta(hours=1))

        booking = service.create_booking(student.principal, adjacent.id)
        assert booking.status == BookingStatus.PENDING.value

    def test_only_students_book(self, service, teacher, other_teacher, make_slot):
        slot = make_slot(teacher)
        with pytest.raises(ForbiddenException):
            service.create_booking(other_teacher.principal, slot.id)

    def test_unknown_slot(self, service, student):
        with pytest.raises(NotFoundException):
            service.create_booking(student.principal, "01HZZZZZZZZZZZZZZZZZZZZZZZ")


class TestStatusTransitions:
    def test_student_cancel_releases_slot(self, service, db, student, teacher, make_slot):
        slot = make_slot(teacher)
        booking = service.create_booking(student.principal, slot.id)

        service.update_status(student.principal, booking.id, BookingStatus.CANCELLED)

        db.refresh(slot)
        assert booking.status == BookingStatus.CANCELLED.value
        assert slot.is_booked is False

    def test_cancelled_window_can_be_rebooked(self, service, student, other_student, teacher, make_slot):
        slot = make_slot(teacher)
        first = service.create_booking(student.principal, slot.id)
        service.update_status(student.principal, first.id, BookingStatus.CANCELLED)

        second = service.create_booking(other_student.principal, slot.id)
        assert second.status == BookingStatus.PENDING.value

    def test_teacher_confirms_paid_booking(self, service, student, teacher, make_booking):
        booking = make_booking(student, teacher, status=BookingStatus.PAID)

        service.update_status(teacher.principal, booking.id, BookingStatus.CONFIRMED)
        assert booking.status == BookingStatus.CONFIRMED.value

    def test_teacher_cannot_confirm_unpaid_booking(self, service, student, teacher, make_booking):
        booking = make_booking(student, teacher, status=BookingStatus.PENDING)

        with pytest.raises(InvalidStateException):
            service.update_status(teacher.principal, booking.id, BookingStatus.CONFIRMED)

    def test_teacher_cannot_cancel(self, service, student, teacher, make_booking):
        booking = make_booking(student, teacher)
        with pytest.raises(ForbiddenException):
            service.update_status(teacher.principal, booking.id, BookingStatus.CANCELLED)

    def test_other_student_cannot_cancel(self, service, student, other_student, teacher, make_booking):
        booking = make_booking(student, teacher)
        with pytest.raises(ForbiddenException):
            service.update_status(other_student.principal, booking.id, BookingStatus.CANCELLED)

    def test_student_cannot_mark_paid(self, service, student, teacher, make_booking):
        booking = make_booking(student, teacher)
        with pytest.raises(ForbiddenException):
            service.update_status(student.principal, booking.id, BookingStatus.PAID)

    def test_admin_may_force_any_transition(self, service, admin, student, teacher, make_booking):
        booking = make_booking(student, teacher, status=BookingStatus.PENDING)

        service.update_status(admin.principal, booking.id, BookingStatus.COMPLETED)
        assert booking.status == BookingStatus.COMPLETED.value

    def test_confirm_rejected_when_overlapping_confirmed_exists(
        self, service, admin, student, other_student, teacher, make_booking
    ):
        make_booking(other_student, teacher, status=BookingStatus.CONFIRMED, start=BASE_TIME)
        paid = make_booking(
            student, teacher, status=BookingStatus.PAID, start=BASE_TIME + timedelta(minutes=30)
        )

        with pytest.raises(BookingConflictException):
            service.update_status(admin.principal, paid.id, BookingStatus.CONFIRMED)
        assert paid.status == BookingStatus.PAID.value

    def test_completed_booking_cannot_be_cancelled_by_student(
        self, service, student, teacher, make_booking
    ):
        booking = make_booking(student, teacher, status=BookingStatus.COMPLETED)

        with pytest.raises(InvalidStateException):
            service.update_status(student.principal, booking.id, BookingStatus.CANCELLED)
        assert booking.status == BookingStatus.COMPLETED.value

    def test_completed_booking_cannot_be_reconfirmed_by_teacher(
        self, service, student, teacher, make_booking
    ):
        booking = make_booking(student, teacher, status=BookingStatus.COMPLETED)

        with pytest.raises(InvalidStateException):
            service.update_status(teacher.principal, booking.id, BookingStatus.CONFIRMED)
        assert booking.status == BookingStatus.COMPLETED.value

    def test_admin_may_cancel_completed_booking(
        self, service, db, admin, student, teacher, make_booking
    ):
        booking = make_booking(student, teacher, status=BookingStatus.COMPLETED)

        service.update_status(admin.principal, booking.id, BookingStatus.CANCELLED)

        assert booking.status == BookingStatus.CANCELLED.value
        slot = db.get(AvailabilitySlot, booking.slot_id)
        assert slot.is_booked is False

    def test_same_status_is_a_no_op(self, service, student, teacher, make_booking):
        booking = make_booking(student, teacher, status=BookingStatus.CANCELLED)
        result = service.update_status(student.principal, booking.id, BookingStatus.CANCELLED)
        assert result.status == BookingStatus.CANCELLED.value


class TestVisibility:
    def test_lists_are_scoped_by_role(
        self, service, admin, student, other_student, teacher, other_teacher, make_booking
    ):
        mine = make_booking(student, teacher, start=BASE_TIME)
        make_booking(other_student, other_teacher, start=BASE_TIME)

        assert [b.id for b in service.list_bookings(student.principal).items] == [mine.id]
        assert [b.id for b in service.list_bookings(teacher.principal).items] == [mine.id]
        assert service.list_bookings(admin.principal).total == 2

    def test_status_filter(self, service, student, teacher, make_booking):
        make_booking(student, teacher, status=BookingStatus.PENDING, start=BASE_TIME)
        paid = make_booking(
            student, teacher, status=BookingStatus.PAID, start=BASE_TIME + timedelta(hours=2)
        )

        page = service.list_bookings(student.principal, status=BookingStatus.PAID)
        assert [b.id for b in page.items] == [paid.id]

    def test_strangers_get_not_found(self, service, student, other_student, teacher, make_booking):
        booking = make_booking(student, teacher)
        with pytest.raises(NotFoundException):
            service.get_booking(other_student.principal, booking.id)


class TestSessionLifecycle:
    def test_start_then_end_completes_booking(self, service, db, student, teacher, make_booking):
        booking = make_booking(student, teacher, status=BookingStatus.PAID)
        session = TutoringSession(booking_id=booking.id, meeting_link="https://meet.example.com/x")
        db.add(session)
        db.commit()

        service.start_session(teacher.principal, session.id)
        assert booking.status == BookingStatus.CONFIRMED.value
        assert session.started_at is not None

        service.end_session(teacher.principal, session.id)
        assert booking.status == BookingStatus.COMPLETED.value
        assert session.ended_at is not None

    def test_cannot_end_before_start(self, service, db, student, teacher, make_booking):
        booking = make_booking(student, teacher, status=BookingStatus.PAID)
        session = TutoringSession(booking_id=booking.id)
        db.add(session)
        db.commit()

        with pytest.raises(InvalidStateException):
            service.end_session(teacher.principal, session.id)

    def test_cannot_start_unpaid_booking(self, service, db, student, teacher, make_booking):
        booking = make_booking(student, teacher, status=BookingStatus.PENDING)
        session = TutoringSession(booking_id=booking.id)
        db.add(session)
        db.commit()

        with pytest.raises(InvalidStateException):
            service.start_session(teacher.principal, session.id)

    def test_slot_stays_held_through_completion(
        self, service, db, admin, student, teacher, make_booking
    ):
        booking = make_booking(student, teacher, status=BookingStatus.CONFIRMED)
        slot = db.get(AvailabilitySlot, booking.slot_id)
        service.update_status(admin.principal, booking.id, BookingStatus.COMPLETED)
        assert slot.is_booked is True
