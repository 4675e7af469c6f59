# backend/tests/services/test_availability_service.py
"""
AvailabilityService against a real (SQLite) session.

Run with: pytest backend/tests/services/test_availability_service.py -v
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.core.exceptions import (
    ConflictException,
    ForbiddenException,
    NotFoundException,
    SlotConflictException,
    ValidationException,
)
from app.models.availability import AvailabilitySlot
from app.services.availability_service import MAX_SLOTS_PER_BATCH, AvailabilityService

BASE_TIME = datetime(2030, 1, 7, 9, 0, tzinfo=timezone.utc)


def window(offset_hours: float, length_hours: float = 1):
    start = BASE_TIME + timedelta(hours=offset_hours)
    return start, start + timedelta(hours=length_hours)


class TestCreateSlots:
    @pytest.fixture
    def service(self, db):
        return AvailabilityService(db)

    def test_creates_back_to_back_slots(self, service, db, teacher):
        created = service.create_slots(teacher.principal, [window(0), window(1), window(2)])

        assert len(created) == 3
        assert db.query(AvailabilitySlot).count() == 3
        assert all(slot.teacher_id == teacher.teacher.id for slot in created)
        assert not any(slot.is_booked for slot in created)

    def test_overlap_within_batch_inserts_nothing(self, service, db, teacher):
        with pytest.raises(SlotConflictException) as exc_info:
            service.create_slots(teacher.principal, [window(0), window(2), window(0.5)])

        assert exc_info.value.code == "SLOT_CONFLICT"
        assert db.query(AvailabilitySlot).count() == 0

    def test_overlap_with_existing_slot_inserts_nothing(self, service, db, teacher, make_slot):
        make_slot(teacher, BASE_TIME + timedelta(hours=3))

        with pytest.raises(SlotConflictException):
            service.create_slots(teacher.principal, [window(0), window(3.5)])

        # Only the pre-existing slot remains; the non-conflicting one was rolled back.
        assert db.query(AvailabilitySlot).count() == 1

    def test_other_teachers_slots_do_not_conflict(self, service, teacher, other_teacher, make_slot):
        make_slot(other_teacher, BASE_TIME)

        created = service.create_slots(teacher.principal, [window(0)])
        assert len(created) == 1

    def test_rejects_empty_batch(self, service, teacher):
        with pytest.raises(ValidationException):
            service.create_slots(teacher.principal, [])

    def test_rejects_oversized_batch(self, service, teacher):
        slots = [window(i) for i in range(MAX_SLOTS_PER_BATCH + 1)]
        with pytest.raises(ValidationException):
            service.create_slots(teacher.principal, slots)

    def test_rejects_zero_length_slot(self, service, teacher):
        start = BASE_TIME
        with pytest.raises(ValidationException):
            service.create_slots(teacher.principal, [(start, start)])

    def test_students_cannot_create_slots(self, service, student):
        with pytest.raises(ForbiddenException):
            service.create_slots(student.principal, [window(0)])


class TestListAndDelete:
    @pytest.fixture
    def service(self, db):
        return AvailabilityService(db)

    def test_lists_in_start_order_with_date_filter(self, service, teacher, make_slot):
        later = make_slot(teacher, BASE_TIME + timedelta(days=1))
        first = make_slot(teacher, BASE_TIME)

        assert [s.id for s in service.list_slots(teacher.teacher.id)] == [first.id, later.id]
        only_first_day = service.list_slots(
            teacher.teacher.id, start_date=BASE_TIME.date(), end_date=BASE_TIME.date()
        )
        assert [s.id for s in only_first_day] == [first.id]

    def test_list_requires_teacher_id(self, service):
        with pytest.raises(ValidationException):
            service.list_slots("")

    def test_owner_deletes_free_slot(self, service, db, teacher, make_slot):
        slot = make_slot(teacher)
        service.delete_slot(teacher.principal, slot.id)
        assert db.query(AvailabilitySlot).count() == 0

    def test_booked_slot_cannot_be_deleted(self, service, teacher, make_slot):
        slot = make_slot(teacher, is_booked=True)
        with pytest.raises(ConflictException) as exc_info:
            service.delete_slot(teacher.principal, slot.id)
        assert exc_info.value.code == "SLOT_BOOKED"

    def test_other_teacher_cannot_delete(self, service, teacher, other_teacher, make_slot):
        slot = make_slot(teacher)
        with pytest.raises(ForbiddenException):
            service.delete_slot(other_teacher.principal, slot.id)

    def test_admin_can_delete_any_free_slot(self, service, db, teacher, admin, make_slot):
        slot = make_slot(teacher)
        service.delete_slot(admin.principal, slot.id)
        assert db.query(AvailabilitySlot).count() == 0

    def test_missing_slot(self, service, teacher):
        with pytest.raises(NotFoundException):
            service.delete_slot(teacher.principal, "01HZZZZZZZZZZZZZZZZZZZZZZZ")
