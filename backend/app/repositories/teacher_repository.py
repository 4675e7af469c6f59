# backend/app/repositories/teacher_repository.py
"""
Teacher and Skill repositories.

Teacher search composes its optional filters as one predicate list.
"""

from decimal import Decimal
import logging
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from ..core.exceptions import RepositoryException
from ..models.teacher import Skill, Teacher
from ..models.user import Profile, User
from .base_repository import BaseRepository, Page
from .filters import build_predicates, ilike_any

logger = logging.getLogger(__name__)


class TeacherRepository(BaseRepository[Teacher]):
    def __init__(self, db: Session):
        super().__init__(db, Teacher)

    def get_with_profile(self, teacher_id: str) -> Optional[Teacher]:
        return (
            self.db.query(Teacher)
            .options(joinedload(Teacher.profile), selectinload(Teacher.skills))
            .filter(Teacher.id == teacher_id)
            .first()
        )

    def get_by_profile_id(self, profile_id: str) -> Optional[Teacher]:
        return self.find_one_by(profile_id=profile_id)

    def search(
        self,
        *,
        search: Optional[str] = None,
        city: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        min_rating: Optional[Decimal] = None,
        skill_ids: Sequence[str] = (),
        page: int,
        limit: int,
    ) -> Page[Teacher]:
        predicates = build_predicates(
            User.is_active.is_(True),
            ilike_any(search, Profile.full_name, Profile.bio),
            ilike_any(city, Profile.city),
            Teacher.price_per_hour >= min_price if min_price is not None else None,
            Teacher.price_per_hour <= max_price if max_price is not None else None,
            Teacher.avg_rating >= min_rating if min_rating is not None else None,
            Teacher.skills.any(Skill.id.in_(list(skill_ids))) if skill_ids else None,
        )
        query = (
            self.db.query(Teacher)
            .join(Profile, Teacher.profile_id == Profile.id)
            .join(User, Profile.user_id == User.id)
            .options(joinedload(Teacher.profile), selectinload(Teacher.skills))
            .filter(*predicates)
            .order_by(Teacher.avg_rating.desc(), Profile.full_name)
        )
        return self.paginate(query, page=page, limit=limit)

    def set_rating(self, teacher_id: str, avg_rating: Decimal, review_count: int) -> Optional[Teacher]:
        teacher = self.update(teacher_id, avg_rating=avg_rating, review_count=review_count)
        if teacher is None:
            self.logger.warning(f"Rating update for unknown teacher {teacher_id}")
        return teacher


class SkillRepository(BaseRepository[Skill]):
    def __init__(self, db: Session):
        super().__init__(db, Skill)

    def list_skills(self, search: Optional[str] = None) -> List[Skill]:
        predicates = build_predicates(ilike_any(search, Skill.name))
        try:
            return self.db.query(Skill).filter(*predicates).order_by(Skill.name).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing skills: {str(e)}")
            raise RepositoryException(f"Failed to list skills: {str(e)}")

    def get_by_name(self, name: str) -> Optional[Skill]:
        return self.db.query(Skill).filter(Skill.name.ilike(name.strip())).first()

    def get_many(self, skill_ids: Sequence[str]) -> List[Skill]:
        if not skill_ids:
            return []
        return self.db.query(Skill).filter(Skill.id.in_(list(skill_ids))).all()
