# backend/app/services/onboarding_service.py
"""
Onboarding Service.

Turns an authenticated account (issued by the external identity provider)
into a marketplace participant: one profile per user, plus the teacher row
for teachers. Admin profiles are never self-assigned.
"""

from decimal import Decimal
import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..core.enums import RoleName
from ..core.exceptions import (
    ConflictException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from ..models.user import Profile
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)

ONBOARDABLE_ROLES = frozenset({RoleName.STUDENT, RoleName.TEACHER})


class OnboardingService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.user_repository = RepositoryFactory.create_user_repository(db)
        self.profile_repository = RepositoryFactory.create_profile_repository(db)
        self.teacher_repository = RepositoryFactory.create_teacher_repository(db)

    @BaseService.measure_operation("onboard")
    def onboard(
        self,
        user_id: str,
        role: RoleName,
        full_name: str,
        *,
        bio: Optional[str] = None,
        city: Optional[str] = None,
        avatar_url: Optional[str] = None,
        price_per_hour: Optional[Decimal] = None,
        experience_years: Optional[int] = None,
    ) -> Profile:
        """
        Create the caller's profile.

        Raises:
            ValidationException: role is not STUDENT or TEACHER, or name is blank
            ForbiddenException: account is deactivated
            ConflictException: the user already has a profile
        """
        if role not in ONBOARDABLE_ROLES:
            raise ValidationException(
                "Role must be STUDENT or TEACHER", code="INVALID_ROLE", details={"role": role.value}
            )
        if not full_name or not full_name.strip():
            raise ValidationException("full_name is required")

        user = self.user_repository.get_by_id(user_id)
        if user is None:
            raise NotFoundException("User not found", code="USER_NOT_FOUND")
        if not user.is_active:
            raise ForbiddenException("Account is deactivated", code="ACCOUNT_INACTIVE")
        if self.profile_repository.get_by_user_id(user_id) is not None:
            raise ConflictException("User is already onboarded", code="ALREADY_ONBOARDED")

        with self.transaction():
            profile = self.profile_repository.create(
                user_id=user_id,
                role=role.value,
                full_name=full_name.strip(),
                bio=bio,
                city=city,
                avatar_url=avatar_url,
            )
            if role is RoleName.TEACHER:
                self.teacher_repository.create(
                    profile_id=profile.id,
                    price_per_hour=price_per_hour or Decimal("0"),
                    experience_years=experience_years,
                )

        self.logger.info(f"User {user_id} onboarded as {role.value} (profile {profile.id})")
        return profile

    def get_profile(self, user_id: str) -> Profile:
        profile = self.profile_repository.get_by_user_id(user_id)
        if profile is None:
            raise NotFoundException("Profile not found", code="PROFILE_NOT_FOUND")
        return profile
