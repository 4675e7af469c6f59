# backend/app/schemas/teacher.py
"""Teacher, skill and onboarding schemas."""

from decimal import Decimal
from typing import Any, List, Optional

from pydantic import Field

from ..core.enums import RoleName
from ._strict_base import StrictRequestModel
from .base import Money, StandardizedModel, UtcDatetime


class SkillResponse(StandardizedModel):
    id: str
    name: str


class SkillCreate(StrictRequestModel):
    name: str = Field(..., min_length=1, max_length=120)


class TeacherResponse(StandardizedModel):
    id: str
    profile_id: str
    full_name: str
    bio: Optional[str] = None
    city: Optional[str] = None
    avatar_url: Optional[str] = None
    experience_years: Optional[int] = None
    price_per_hour: Money
    avg_rating: Money
    review_count: int
    is_verified: bool
    skills: List[SkillResponse] = Field(default_factory=list)

    @classmethod
    def from_teacher(cls, teacher: Any) -> "TeacherResponse":
        profile = teacher.profile
        return cls(
            id=teacher.id,
            profile_id=teacher.profile_id,
            full_name=profile.full_name,
            bio=profile.bio,
            city=profile.city,
            avatar_url=profile.avatar_url,
            experience_years=teacher.experience_years,
            price_per_hour=Decimal(str(teacher.price_per_hour or 0)),
            avg_rating=Decimal(str(teacher.avg_rating or 0)),
            review_count=teacher.review_count or 0,
            is_verified=bool(teacher.is_verified),
            skills=[SkillResponse.model_validate(skill) for skill in teacher.skills],
        )


class TeacherProfileUpdate(StrictRequestModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    bio: Optional[str] = Field(None, max_length=5000)
    city: Optional[str] = Field(None, max_length=120)
    avatar_url: Optional[str] = Field(None, max_length=500)
    experience_years: Optional[int] = Field(None, ge=0, le=80)
    price_per_hour: Optional[Decimal] = Field(None, ge=0)
    skill_ids: Optional[List[str]] = Field(None, description="Replaces the teacher's skills")


class OnboardingRequest(StrictRequestModel):
    role: RoleName
    full_name: str = Field(..., min_length=1, max_length=255)
    bio: Optional[str] = Field(None, max_length=5000)
    city: Optional[str] = Field(None, max_length=120)
    avatar_url: Optional[str] = Field(None, max_length=500)
    price_per_hour: Optional[Decimal] = Field(None, ge=0)
    experience_years: Optional[int] = Field(None, ge=0, le=80)


class ProfileResponse(StandardizedModel):
    id: str
    user_id: str
    role: RoleName
    full_name: str
    bio: Optional[str] = None
    city: Optional[str] = None
    avatar_url: Optional[str] = None
    teacher_id: Optional[str] = None
    created_at: UtcDatetime

    @classmethod
    def from_profile(cls, profile: Any) -> "ProfileResponse":
        return cls(
            id=profile.id,
            user_id=profile.user_id,
            role=profile.role,
            full_name=profile.full_name,
            bio=profile.bio,
            city=profile.city,
            avatar_url=profile.avatar_url,
            teacher_id=profile.teacher.id if profile.teacher is not None else None,
            created_at=profile.created_at,
        )
