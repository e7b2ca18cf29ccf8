"""
Profile repository for profile CRUD and usage counters.
"""

from datetime import date
from uuid import UUID

from sqlalchemy import case, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from database.models import Profile


class ProfileRepository:
    """Repository for Profile model operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, profile_id: UUID) -> Profile | None:
        """Get profile by ID."""
        result = await self.session.execute(select(Profile).where(Profile.id == profile_id))
        return result.scalar_one_or_none()

    async def get_by_auth_id(self, auth_id: str) -> Profile | None:
        """Get profile by auth provider ID."""
        result = await self.session.execute(select(Profile).where(Profile.auth_id == auth_id))
        return result.scalar_one_or_none()

    async def get_or_create(self, auth_id: str, email: str | None = None) -> Profile:
        """
        Get the profile for an auth id, creating it on first sight.

        A changed email from the token is written back.
        """
        profile = await self.get_by_auth_id(auth_id)

        if profile:
            if email and profile.email != email:
                profile.email = email
                await self.session.flush()
                await self.session.refresh(profile)
            return profile

        profile = Profile(auth_id=auth_id, email=email, preferences={})
        self.session.add(profile)
        await self.session.flush()
        await self.session.refresh(profile)
        return profile

    async def consume_daily_images(
        self,
        profile_id: UUID,
        count: int,
        limit: int,
        today: date,
    ) -> int | None:
        """
        Atomically add `count` to today's image counter if it stays within `limit`.

        A counter last reset on another day restarts from zero. Runs as one
        conditional UPDATE, so concurrent requests cannot both slip under the
        ceiling.

        Returns:
            The new count, or None if the limit would be exceeded
        """
        new_count = case(
            (Profile.last_image_reset == today, Profile.daily_image_count + count),
            else_=count,
        )
        stmt = (
            update(Profile)
            .where(Profile.id == profile_id, new_count <= limit)
            .values(daily_image_count=new_count, last_image_reset=today)
            .returning(Profile.daily_image_count, Profile.updated_at)
            .execution_options(synchronize_session=False)
        )
        row = (await self.session.execute(stmt)).one_or_none()
        if row is None:
            return None

        # Copy the new values onto the loaded instance without marking it dirty
        profile = await self.session.get(Profile, profile_id)
        if profile is not None:
            set_committed_value(profile, "daily_image_count", row.daily_image_count)
            set_committed_value(profile, "last_image_reset", today)
            set_committed_value(profile, "updated_at", row.updated_at)
        return row.daily_image_count

    async def update_preferences(self, profile_id: UUID, preferences: dict) -> Profile | None:
        """Replace the stored preferences."""
        profile = await self.get_by_id(profile_id)
        if not profile:
            return None
        profile.preferences = preferences
        await self.session.flush()
        await self.session.refresh(profile)
        return profile

    async def delete(self, profile_id: UUID) -> bool:
        """Delete a profile row."""
        result = await self.session.execute(delete(Profile).where(Profile.id == profile_id))
        return result.rowcount > 0
