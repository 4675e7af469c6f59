# backend/app/routes/v1/onboarding.py
"""
Onboarding routes - API v1

Authenticated accounts without a profile may call these; every other
endpoint requires a completed profile.

    POST /   → Create the caller's student or teacher profile
    GET  /me → The caller's profile
"""

import logging

from fastapi import APIRouter, Depends, status

from ...api.dependencies.auth import get_authenticated_user_id
from ...api.dependencies.services import get_onboarding_service
from ...schemas.teacher import OnboardingRequest, ProfileResponse
from ...services.onboarding_service import OnboardingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["onboarding-v1"])


@router.post("", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
def onboard(
    payload: OnboardingRequest,
    user_id: str = Depends(get_authenticated_user_id),
    service: OnboardingService = Depends(get_onboarding_service),
) -> ProfileResponse:
    service.onboard(
        user_id,
        payload.role,
        payload.full_name,
        bio=payload.bio,
        city=payload.city,
        avatar_url=payload.avatar_url,
        price_per_hour=payload.price_per_hour,
        experience_years=payload.experience_years,
    )
    return ProfileResponse.from_profile(service.get_profile(user_id))


@router.get("/me", response_model=ProfileResponse)
def get_my_profile(
    user_id: str = Depends(get_authenticated_user_id),
    service: OnboardingService = Depends(get_onboarding_service),
) -> ProfileResponse:
    return ProfileResponse.from_profile(service.get_profile(user_id))
