# backend/app/routes/v1/skills.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies.auth import get_current_principal
from ...api.dependencies.services import get_teacher_service
from ...principal import Principal
from ...schemas.teacher import SkillCreate, SkillResponse
from ...services.teacher_service import TeacherService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["skills-v1"])


@router.get("", response_model=List[SkillResponse])
def list_skills(
    search: Optional[str] = Query(None, max_length=120),
    service: TeacherService = Depends(get_teacher_service),
) -> List[SkillResponse]:
    return [SkillResponse.model_validate(skill) for skill in service.list_skills(search)]


@router.post("", response_model=SkillResponse, status_code=status.HTTP_201_CREATED)
def create_skill(
    payload: SkillCreate,
    principal: Principal = Depends(get_current_principal),
    service: TeacherService = Depends(get_teacher_service),
) -> SkillResponse:
    return SkillResponse.model_validate(service.create_skill(principal, payload.name))
