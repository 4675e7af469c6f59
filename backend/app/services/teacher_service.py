# backend/app/services/teacher_service.py
"""
Teacher catalog service.

Search, public teacher detail, the teacher's own profile edits, and the
skill vocabulary teachers tag themselves with.
"""

from decimal import Decimal
import logging
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from ..core.enums import Action
from ..core.exceptions import ConflictException, NotFoundException, ValidationException
from ..core.permissions import authorize
from ..models.teacher import Skill, Teacher
from ..principal import Principal
from ..repositories.base_repository import Page
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)

_PROFILE_FIELDS = ("full_name", "bio", "city", "avatar_url")
_TEACHER_FIELDS = ("experience_years", "price_per_hour")


class TeacherService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.teacher_repository = RepositoryFactory.create_teacher_repository(db)
        self.skill_repository = RepositoryFactory.create_skill_repository(db)
        self.profile_repository = RepositoryFactory.create_profile_repository(db)

    @BaseService.measure_operation("search_teachers")
    def search_teachers(
        self,
        *,
        search: Optional[str] = None,
        city: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        min_rating: Optional[Decimal] = None,
        skill_ids: Sequence[str] = (),
        page: int = 1,
        limit: int = 10,
    ) -> Page[Teacher]:
        if min_price is not None and max_price is not None and min_price > max_price:
            raise ValidationException("min_price must not exceed max_price")
        return self.teacher_repository.search(
            search=search,
            city=city,
            min_price=min_price,
            max_price=max_price,
            min_rating=min_rating,
            skill_ids=skill_ids,
            page=page,
            limit=limit,
        )

    def get_teacher(self, teacher_id: str) -> Teacher:
        teacher = self.teacher_repository.get_with_profile(teacher_id)
        if teacher is None:
            raise NotFoundException("Teacher not found", code="TEACHER_NOT_FOUND")
        return teacher

    @BaseService.measure_operation("update_teacher_profile")
    def update_my_profile(
        self,
        principal: Principal,
        *,
        skill_ids: Optional[Sequence[str]] = None,
        **changes,
    ) -> Teacher:
        """
        Update the calling teacher's profile and teacher fields.

        ``skill_ids``, when given, replaces the teacher's skills entirely.
        Unknown skill ids are rejected rather than silently dropped.
        """
        authorize(principal, Action.TEACHER_PROFILE_UPDATE)
        teacher = self.get_teacher(self.require_teacher_id(principal))

        price = changes.get("price_per_hour")
        if price is not None and Decimal(str(price)) < 0:
            raise ValidationException("price_per_hour must not be negative")
        years = changes.get("experience_years")
        if years is not None and years < 0:
            raise ValidationException("experience_years must not be negative")

        skills: Optional[List[Skill]] = None
        if skill_ids is not None:
            unique_ids = list(dict.fromkeys(skill_ids))
            skills = self.skill_repository.get_many(unique_ids)
            if len(skills) != len(unique_ids):
                missing = sorted(set(unique_ids) - {skill.id for skill in skills})
                raise ValidationException(
                    "Unknown skills", code="UNKNOWN_SKILL", details={"skill_ids": missing}
                )

        with self.transaction():
            profile_changes = {
                key: changes[key] for key in _PROFILE_FIELDS if changes.get(key) is not None
            }
            if profile_changes:
                self.profile_repository.update(teacher.profile_id, **profile_changes)
            teacher_changes = {
                key: changes[key] for key in _TEACHER_FIELDS if changes.get(key) is not None
            }
            if teacher_changes:
                self.teacher_repository.update(teacher.id, **teacher_changes)
            if skills is not None:
                teacher.skills = skills
                self.db.flush()

        self.logger.info(f"Teacher {teacher.id} updated profile fields {sorted(changes)}")
        return teacher

    def list_skills(self, search: Optional[str] = None) -> List[Skill]:
        return self.skill_repository.list_skills(search)

    @BaseService.measure_operation("create_skill")
    def create_skill(self, principal: Principal, name: str) -> Skill:
        authorize(principal, Action.SKILL_CREATE, is_owner=False)
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationException("Skill name is required")
        if self.skill_repository.get_by_name(cleaned) is not None:
            raise ConflictException(f"Skill '{cleaned}' already exists", code="SKILL_EXISTS")

        with self.transaction():
            skill = self.skill_repository.create(name=cleaned)
        self.logger.info(f"Skill {skill.id} ({cleaned}) created")
        return skill
