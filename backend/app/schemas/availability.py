# backend/app/schemas/availability.py
"""Availability slot schemas."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import Field, model_validator

from ._strict_base import StrictRequestModel
from .base import StandardizedModel, UtcDatetime


class SlotWindow(StrictRequestModel):
    start_time: datetime = Field(..., description="Slot start (ISO 8601, UTC if no offset)")
    end_time: datetime = Field(..., description="Slot end, exclusive")

    @model_validator(mode="after")
    def _start_before_end(self) -> "SlotWindow":
        if self.start_time.tzinfo is None and self.end_time.tzinfo is not None:
            raise ValueError("start_time and end_time must both carry an offset or neither")
        if self.start_time.tzinfo is not None and self.end_time.tzinfo is None:
            raise ValueError("start_time and end_time must both carry an offset or neither")
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class SlotBatchCreate(StrictRequestModel):
    slots: List[SlotWindow] = Field(..., min_length=1, max_length=100)


class SlotQuery(StrictRequestModel):
    teacher_id: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class SlotResponse(StandardizedModel):
    id: str
    teacher_id: str
    start_time: UtcDatetime
    end_time: UtcDatetime
    is_booked: bool
