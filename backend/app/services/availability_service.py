# backend/app/services/availability_service.py
"""
Availability Service.

Teachers publish bookable windows as half-open intervals. A batch of new
slots is validated against itself and against the teacher's unbooked slots,
then inserted in one transaction: either every slot is created or none is.
"""

from datetime import date, datetime
import logging
from typing import List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from ..core.enums import Action
from ..core.exceptions import (
    ConflictException,
    NotFoundException,
    SlotConflictException,
    ValidationException,
)
from ..core.permissions import authorize
from ..models.availability import AvailabilitySlot
from ..principal import Principal
from ..repositories.factory import RepositoryFactory
from ..repositories.filters import day_end, day_start
from ..utils.intervals import as_utc, first_overlapping_pair, format_interval
from .base import BaseService

logger = logging.getLogger(__name__)

MAX_SLOTS_PER_BATCH = 100


class AvailabilityService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.availability_repository = RepositoryFactory.create_availability_repository(db)
        self.teacher_repository = RepositoryFactory.create_teacher_repository(db)

    @BaseService.measure_operation("list_slots")
    def list_slots(
        self,
        teacher_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[AvailabilitySlot]:
        if not teacher_id:
            raise ValidationException("teacher_id is required", code="TEACHER_ID_REQUIRED")
        if start_date and end_date and start_date > end_date:
            raise ValidationException("start_date must not be after end_date")
        return self.availability_repository.list_for_teacher(
            teacher_id,
            starts_from=day_start(start_date),
            ends_by=day_end(end_date),
        )

    @BaseService.measure_operation("create_slots")
    def create_slots(
        self, principal: Principal, slots: Sequence[Tuple[datetime, datetime]]
    ) -> List[AvailabilitySlot]:
        """
        Create a batch of availability slots for the calling teacher.

        Raises:
            ValidationException: empty batch, too many slots, or start >= end
            SlotConflictException: a slot overlaps another in the batch or an
                existing unbooked slot; nothing is inserted
        """
        authorize(principal, Action.SLOT_CREATE)
        teacher_id = self.require_teacher_id(principal)

        if not slots:
            raise ValidationException("At least one slot is required")
        if len(slots) > MAX_SLOTS_PER_BATCH:
            raise ValidationException(f"At most {MAX_SLOTS_PER_BATCH} slots per request")

        intervals = [(as_utc(start), as_utc(end)) for start, end in slots]
        for start, end in intervals:
            if start >= end:
                raise ValidationException(
                    "Slot start must be before its end",
                    details={"slot": format_interval(start, end)},
                )

        pair = first_overlapping_pair(intervals)
        if pair is not None:
            left, right = intervals[pair[0]], intervals[pair[1]]
            raise SlotConflictException(format_interval(*right), format_interval(*left))

        with self.transaction():
            for start, end in intervals:
                clashes = self.availability_repository.find_unbooked_overlapping(
                    teacher_id, start, end
                )
                if clashes:
                    clash = clashes[0]
                    raise SlotConflictException(
                        format_interval(start, end),
                        format_interval(clash.start_time, clash.end_time),
                    )
            created = self.availability_repository.bulk_create(
                [
                    {"teacher_id": teacher_id, "start_time": start, "end_time": end}
                    for start, end in intervals
                ]
            )

        self.logger.info(f"Created {len(created)} availability slots for teacher {teacher_id}")
        return created

    @BaseService.measure_operation("delete_slot")
    def delete_slot(self, principal: Principal, slot_id: str) -> None:
        slot = self.availability_repository.get_by_id(slot_id)
        if slot is None:
            raise NotFoundException("Availability slot not found", code="SLOT_NOT_FOUND")

        authorize(
            principal,
            Action.SLOT_DELETE,
            is_owner=principal.teacher_id is not None and slot.teacher_id == principal.teacher_id,
        )
        if slot.is_booked:
            raise ConflictException("Booked slots cannot be deleted", code="SLOT_BOOKED")

        with self.transaction():
            self.availability_repository.delete(slot_id)
        self.logger.info(f"Deleted availability slot {slot_id}")
