# backend/app/models/availability.py
"""
Bookable availability windows published by teachers.

Slots are half-open intervals ``[start_time, end_time)``. The
``(teacher_id, start_time)`` unique constraint is the storage-level backstop
against two concurrent requests creating the same slot.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
import ulid

from ..database import Base


class AvailabilitySlot(Base):
    __tablename__ = "availability_slots"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    teacher_id = Column(
        String(26), ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    is_booked = Column(Boolean, nullable=False, default=False)
    created_at = Column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    teacher = relationship("Teacher")

    __table_args__ = (
        UniqueConstraint("teacher_id", "start_time", name="uq_availability_teacher_start"),
        CheckConstraint("start_time < end_time", name="ck_availability_time_order"),
        Index("idx_availability_teacher_window", "teacher_id", "start_time", "end_time"),
    )

    def __repr__(self) -> str:
        return (
            f"<AvailabilitySlot {self.id} teacher={self.teacher_id} "
            f"{self.start_time}-{self.end_time} booked={self.is_booked}>"
        )
