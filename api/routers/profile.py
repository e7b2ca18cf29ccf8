"""
Profile router: plan, usage, preferences and account data.

Endpoints:
- GET /api/profile - Profile, plan usage and stats
- GET /api/profile/preferences - Stored preferences
- PUT /api/profile/preferences - Update preferences
- DELETE /api/profile/history - Delete all projects and messages
- DELETE /api/profile - Delete account data
"""

import logging

from fastapi import APIRouter, Depends

from api.dependencies import ensure_profile, get_profile_repository, get_project_service, get_quota
from api.schemas.common import MessageResponse
from api.schemas.profile import (
    ClearHistoryResponse,
    Preferences,
    PreferencesUpdate,
    ProfileResponse,
    ProfileStats,
    UsageInfo,
)
from core.exceptions import DatabaseUnavailableError
from database.models import Profile
from database.repositories import ProfileRepository
from services.project_service import ProjectService
from services.quota_service import QuotaService, utc_today

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])


def load_preferences(profile: Profile) -> Preferences:
    """Stored preferences with defaults filled in."""
    return Preferences.model_validate(profile.preferences or {})


@router.get("", response_model=ProfileResponse)
async def get_profile(
    profile: Profile = Depends(ensure_profile),
    service: ProjectService = Depends(get_project_service),
    quota: QuotaService = Depends(get_quota),
):
    """Get the current profile with plan usage and account stats."""
    stats = await service.usage_stats(profile)
    today = utc_today()
    daily_count = profile.daily_image_count if profile.last_image_reset == today else 0

    usage = UsageInfo(
        project_count=stats.project_count,
        project_limit=None if profile.is_pro else quota.project_limit,
        daily_image_count=daily_count,
        daily_image_limit=None if profile.is_pro else quota.daily_image_limit,
        images_remaining=quota.images_remaining(profile, today),
    )

    return ProfileResponse(
        id=str(profile.id),
        email=profile.email,
        is_pro=profile.is_pro,
        plan="pro" if profile.is_pro else "free",
        usage=usage,
        stats=ProfileStats(
            project_count=stats.project_count,
            message_count=stats.message_count,
            account_age_days=stats.account_age_days,
        ),
        preferences=load_preferences(profile),
        created_at=profile.created_at,
    )


@router.get("/preferences", response_model=Preferences)
async def get_preferences(profile: Profile = Depends(ensure_profile)):
    """Get the current preferences."""
    return load_preferences(profile)


@router.put("/preferences", response_model=Preferences)
async def update_preferences(
    request: PreferencesUpdate,
    profile: Profile = Depends(ensure_profile),
    profile_repo: ProfileRepository | None = Depends(get_profile_repository),
):
    """Update the given preference fields."""
    if not profile_repo:
        raise DatabaseUnavailableError()

    updated = load_preferences(profile).model_copy(update=request.model_dump(exclude_none=True))
    await profile_repo.update_preferences(profile.id, updated.model_dump(mode="json"))
    return updated


@router.delete("/history", response_model=ClearHistoryResponse)
async def clear_history(
    profile: Profile = Depends(ensure_profile),
    service: ProjectService = Depends(get_project_service),
):
    """Delete every project and message of the current user."""
    deleted = await service.clear_history(profile)
    return ClearHistoryResponse(success=True, deleted_projects=deleted)


@router.delete("", response_model=MessageResponse)
async def delete_account(
    profile: Profile = Depends(ensure_profile),
    service: ProjectService = Depends(get_project_service),
):
    """Delete all projects, messages and the profile itself."""
    await service.delete_account(profile)
    return MessageResponse(message="Account data deleted")
