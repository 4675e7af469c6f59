# backend/app/routes/v1/availability.py
"""
Availability routes - API v1

    GET    /?teacher_id=...&start_date=&end_date=  → Teacher's slots (public)
    POST   /                                       → Create a batch of slots (teacher)
    DELETE /{slot_id}                              → Delete an unbooked slot (owner teacher, admin)
"""

from datetime import date
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies.auth import get_current_principal
from ...api.dependencies.services import get_availability_service
from ...principal import Principal
from ...schemas.availability import SlotBatchCreate, SlotResponse
from ...schemas.base_responses import DeleteResponse
from ...services.availability_service import AvailabilityService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["availability-v1"])


@router.get("", response_model=List[SlotResponse])
def list_slots(
    teacher_id: str = Query(..., min_length=1),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    service: AvailabilityService = Depends(get_availability_service),
) -> List[SlotResponse]:
    slots = service.list_slots(teacher_id, start_date, end_date)
    return [SlotResponse.model_validate(slot) for slot in slots]


@router.post("", response_model=List[SlotResponse], status_code=status.HTTP_201_CREATED)
def create_slots(
    payload: SlotBatchCreate,
    principal: Principal = Depends(get_current_principal),
    service: AvailabilityService = Depends(get_availability_service),
) -> List[SlotResponse]:
    created = service.create_slots(
        principal, [(slot.start_time, slot.end_time) for slot in payload.slots]
    )
    return [SlotResponse.model_validate(slot) for slot in created]


@router.delete("/{slot_id}", response_model=DeleteResponse)
def delete_slot(
    slot_id: str,
    principal: Principal = Depends(get_current_principal),
    service: AvailabilityService = Depends(get_availability_service),
) -> DeleteResponse:
    service.delete_slot(principal, slot_id)
    return DeleteResponse(message="Availability slot deleted")
