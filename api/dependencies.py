"""
FastAPI dependency injection for database sessions, repositories and services.
"""

import logging
from collections.abc import AsyncGenerator
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import AppUser, require_current_user
from core.exceptions import DatabaseUnavailableError, InvalidIdError
from core.redis import get_redis_optional
from database import get_session, is_database_available
from database.models import Profile
from database.repositories import MessageRepository, ProfileRepository, ProjectRepository
from services.project_generator import ProjectGenerator, get_project_generator
from services.project_service import ProjectService
from services.quota_service import QuotaService, get_quota_service

logger = logging.getLogger(__name__)


async def get_db_session() -> AsyncGenerator[AsyncSession | None, None]:
    """
    Get database session dependency.

    Returns None if database is not configured/available.
    """
    if not is_database_available():
        yield None
        return

    async for session in get_session():
        yield session


async def get_profile_repository(
    session: AsyncSession | None = Depends(get_db_session),
) -> ProfileRepository | None:
    """Get ProfileRepository dependency."""
    if session is None:
        return None
    return ProfileRepository(session)


async def get_project_repository(
    session: AsyncSession | None = Depends(get_db_session),
) -> ProjectRepository | None:
    """Get ProjectRepository dependency."""
    if session is None:
        return None
    return ProjectRepository(session)


async def get_message_repository(
    session: AsyncSession | None = Depends(get_db_session),
) -> MessageRepository | None:
    """Get MessageRepository dependency."""
    if session is None:
        return None
    return MessageRepository(session)


async def get_quota() -> QuotaService:
    """Get QuotaService wired to Redis when Redis is up."""
    return get_quota_service(redis_client=await get_redis_optional())


def get_generator() -> ProjectGenerator:
    """Get the shared ProjectGenerator."""
    return get_project_generator()


async def ensure_profile(
    user: AppUser = Depends(require_current_user),
    profile_repo: ProfileRepository | None = Depends(get_profile_repository),
) -> Profile:
    """
    Ensure the authenticated user has a profile row (login required).

    The row is created on the first request from a new auth id.
    """
    if not profile_repo:
        raise DatabaseUnavailableError()
    return await profile_repo.get_or_create(auth_id=user.id, email=user.email)


async def get_project_service(
    project_repo: ProjectRepository | None = Depends(get_project_repository),
    message_repo: MessageRepository | None = Depends(get_message_repository),
    profile_repo: ProfileRepository | None = Depends(get_profile_repository),
    generator: ProjectGenerator = Depends(get_generator),
    quota: QuotaService = Depends(get_quota),
) -> ProjectService:
    """Get ProjectService bound to the request's session."""
    if not project_repo or not message_repo or not profile_repo:
        raise DatabaseUnavailableError()
    return ProjectService(
        project_repo=project_repo,
        message_repo=message_repo,
        profile_repo=profile_repo,
        generator=generator,
        quota=quota,
    )


def parse_project_id(project_id: str) -> UUID:
    """Parse a path project id, raising 400 on malformed input."""
    try:
        return UUID(project_id)
    except ValueError:
        raise InvalidIdError(message="Invalid project ID")
