# backend/app/api/dependencies/auth.py
"""
Authentication and claims-enrichment dependencies.

A verified token yields a user id; one query then loads the user, profile
and teacher row and freezes them into a ``Principal``. No credential (or a
bad one) is 401; a real account that may not act is 403.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from ...auth import get_current_user_id, oauth2_scheme_optional, user_id_from_token
from ...core.enums import RoleName
from ...core.exceptions import ForbiddenException
from ...principal import Principal
from ...repositories.factory import RepositoryFactory
from .database import get_db

logger = logging.getLogger(__name__)


def get_authenticated_user_id(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> str:
    """User id of an existing, active account that may not have a profile yet."""
    user = RepositoryFactory.create_user_repository(db).get_by_id(user_id)
    if user is None:
        logger.warning(f"Token subject {user_id} does not match any user")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise ForbiddenException("Account is deactivated", code="ACCOUNT_INACTIVE").to_http_exception()
    return user.id


def get_current_principal(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> Principal:
    """
    Resolve the caller into a Principal.

    Raises:
        HTTPException: 401 for an unknown subject, 403 for a deactivated
            account or a user who has not onboarded
    """
    user = RepositoryFactory.create_user_repository(db).get_with_profile(user_id)
    if user is None:
        logger.warning(f"Token subject {user_id} does not match any user")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise ForbiddenException("Account is deactivated", code="ACCOUNT_INACTIVE").to_http_exception()

    profile = user.profile
    if profile is None:
        raise ForbiddenException(
            "Complete onboarding before using this endpoint", code="PROFILE_REQUIRED"
        ).to_http_exception()

    return Principal(
        user_id=user.id,
        email=user.email,
        role=RoleName(profile.role),
        profile_id=profile.id,
        teacher_id=profile.teacher.id if profile.teacher is not None else None,
    )


def get_optional_principal(
    token: Optional[str] = Depends(oauth2_scheme_optional),
    db: Session = Depends(get_db),
) -> Optional[Principal]:
    """Principal for public endpoints that show more to owners; None when anonymous."""
    if not token:
        return None
    return get_current_principal(user_id=user_id_from_token(token), db=db)


def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    if not principal.is_admin:
        raise ForbiddenException("Admin access required", code="ADMIN_REQUIRED").to_http_exception()
    return principal
