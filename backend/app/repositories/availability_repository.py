# backend/app/repositories/availability_repository.py
"""
Availability Repository.

Data access for teacher availability slots. Overlap filtering delegates to
``app.utils.intervals`` so there is one definition of overlap.
"""

from datetime import datetime
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.availability import AvailabilitySlot
from ..utils.intervals import overlap_clause
from .base_repository import BaseRepository
from .filters import build_predicates

logger = logging.getLogger(__name__)


class AvailabilityRepository(BaseRepository[AvailabilitySlot]):
    def __init__(self, db: Session):
        super().__init__(db, AvailabilitySlot)

    def list_for_teacher(
        self,
        teacher_id: str,
        *,
        starts_from: Optional[datetime] = None,
        ends_by: Optional[datetime] = None,
    ) -> List[AvailabilitySlot]:
        """Slots for a teacher ordered by start, optionally restricted to a date window."""
        predicates = build_predicates(
            AvailabilitySlot.teacher_id == teacher_id,
            AvailabilitySlot.start_time >= starts_from if starts_from else None,
            AvailabilitySlot.end_time <= ends_by if ends_by else None,
        )
        try:
            return (
                self.db.query(AvailabilitySlot)
                .filter(*predicates)
                .order_by(AvailabilitySlot.start_time)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing slots for teacher {teacher_id}: {str(e)}")
            raise RepositoryException(f"Failed to list availability: {str(e)}")

    def find_unbooked_overlapping(
        self, teacher_id: str, start: datetime, end: datetime
    ) -> List[AvailabilitySlot]:
        """Unbooked slots of ``teacher_id`` whose window overlaps ``[start, end)``."""
        predicates = build_predicates(
            AvailabilitySlot.teacher_id == teacher_id,
            AvailabilitySlot.is_booked.is_(False),
            overlap_clause(AvailabilitySlot.start_time, AvailabilitySlot.end_time, start, end),
        )
        try:
            return (
                self.db.query(AvailabilitySlot)
                .filter(*predicates)
                .order_by(AvailabilitySlot.start_time)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking slot overlap for teacher {teacher_id}: {str(e)}")
            raise RepositoryException(f"Failed to check slot overlap: {str(e)}")

    def get_for_update(self, slot_id: str) -> Optional[AvailabilitySlot]:
        """Load a slot with a row lock (no-op on SQLite) for the booking transaction."""
        try:
            return (
                self.db.query(AvailabilitySlot)
                .filter(AvailabilitySlot.id == slot_id)
                .with_for_update()
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error locking slot {slot_id}: {str(e)}")
            raise RepositoryException(f"Failed to load slot: {str(e)}")

    def release(self, slot_id: Optional[str]) -> None:
        """Mark a slot bookable again (used when its booking is cancelled)."""
        if not slot_id:
            return
        slot = self.get_by_id(slot_id)
        if slot is not None and slot.is_booked:
            slot.is_booked = False
            self._flush(f"release slot {slot_id}")
