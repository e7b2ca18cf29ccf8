"""
Plan limit enforcement.

Free-plan project and daily image limits live in the database. The per-user
generation slot lives in Redis:
- generation:slot:{user_id} -> holder token (expires after generation_slot_ttl)
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

from core.config import get_settings
from core.exceptions import GenerationInProgressError, PlanLimitError
from database.models import Profile
from database.repositories import ProfileRepository, ProjectRepository

logger = logging.getLogger(__name__)

PROJECT_LIMIT_MESSAGE = (
    "Free plan is limited to {limit} projects. Please upgrade to Pro for unlimited generation!"
)
IMAGE_LIMIT_MESSAGE = (
    "Free plan is limited to {limit} images per day. Upgrade to Pro for unlimited images!"
)

# Delete the slot only if it still holds the caller's token
RELEASE_SLOT_SCRIPT = """
if redis.call("GET", KEYS[1]) == ARGV[1] then
    return redis.call("DEL", KEYS[1])
end
return 0
"""


def utc_today() -> date:
    """Current date in UTC."""
    return datetime.now(UTC).date()


class QuotaService:
    """
    Service for plan limits and the per-user generation slot.

    Pro profiles bypass the project and image limits. The generation slot
    applies to everyone.
    """

    def __init__(
        self,
        redis_client=None,
        project_limit: int | None = None,
        daily_image_limit: int | None = None,
        slot_ttl: int | None = None,
    ):
        settings = get_settings()
        self._redis = redis_client
        self.project_limit = project_limit if project_limit is not None else settings.free_project_limit
        self.daily_image_limit = (
            daily_image_limit if daily_image_limit is not None else settings.free_daily_image_limit
        )
        self.slot_ttl = slot_ttl if slot_ttl is not None else settings.generation_slot_ttl

    def _get_slot_key(self, user_id: UUID | str) -> str:
        """Get Redis key for a user's generation slot."""
        return f"generation:slot:{user_id}"

    # ============ Plan limits ============

    async def check_project_limit(self, profile: Profile, project_repo: ProjectRepository) -> None:
        """Raise PlanLimitError if a free profile already has the maximum number of projects."""
        if profile.is_pro:
            return

        count = await project_repo.count_by_user(profile.id)
        if count >= self.project_limit:
            raise PlanLimitError(
                message=PROJECT_LIMIT_MESSAGE.format(limit=self.project_limit),
                details={"limit": self.project_limit, "used": count},
            )

    async def consume_images(
        self,
        profile: Profile,
        count: int,
        profile_repo: ProfileRepository,
        today: date | None = None,
    ) -> int | None:
        """
        Count `count` attached images against today's allowance.

        Returns:
            The new daily count, or None when nothing was counted
            (no images or a Pro profile)

        Raises:
            PlanLimitError: If the allowance would be exceeded
        """
        if count <= 0 or profile.is_pro:
            return None

        today = today or utc_today()
        new_count = await profile_repo.consume_daily_images(
            profile.id,
            count=count,
            limit=self.daily_image_limit,
            today=today,
        )
        if new_count is None:
            raise PlanLimitError(
                message=IMAGE_LIMIT_MESSAGE.format(limit=self.daily_image_limit),
                details={"limit": self.daily_image_limit, "requested": count},
            )

        logger.debug(f"Consumed {count} image(s) for profile {profile.id}: {new_count} today")
        return new_count

    def images_remaining(self, profile: Profile, today: date | None = None) -> int | None:
        """Images a profile may still attach today. None means unlimited."""
        if profile.is_pro:
            return None

        today = today or utc_today()
        used = profile.daily_image_count if profile.last_image_reset == today else 0
        return max(0, self.daily_image_limit - used)

    # ============ Generation slot ============

    async def acquire_generation_slot(self, user_id: UUID | str) -> str | None:
        """
        Try to take the user's generation slot.

        Returns:
            A holder token to pass to release_generation_slot, or None if
            another generation holds the slot. Without Redis a token is
            always returned and nothing is enforced.
        """
        token = uuid4().hex
        if not self._redis:
            return token

        acquired = await self._redis.set(self._get_slot_key(user_id), token, nx=True, ex=self.slot_ttl)
        return token if acquired else None

    async def release_generation_slot(self, user_id: UUID | str, token: str) -> bool:
        """
        Give the slot back if `token` still holds it.

        A slot that expired and was taken by a newer request is left alone.
        """
        if not self._redis:
            return False
        released = await self._redis.eval(RELEASE_SLOT_SCRIPT, 1, self._get_slot_key(user_id), token)
        if not released:
            logger.warning(f"Generation slot for {user_id} expired before release")
        return bool(released)

    @asynccontextmanager
    async def generation_slot(self, user_id: UUID | str) -> AsyncIterator[None]:
        """Hold the user's generation slot for the duration of the block."""
        token = await self.acquire_generation_slot(user_id)
        if token is None:
            raise GenerationInProgressError()
        try:
            yield
        finally:
            await self.release_generation_slot(user_id, token)


# Singleton instance
_quota_service: QuotaService | None = None


def get_quota_service(redis_client=None) -> QuotaService:
    """Get or create the quota service instance."""
    global _quota_service
    if _quota_service is None:
        _quota_service = QuotaService(redis_client=redis_client)
    elif redis_client and _quota_service._redis is None:
        _quota_service._redis = redis_client
    return _quota_service
