"""
Project repository for project CRUD operations.
"""

from uuid import UUID

from sqlalchemy import delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Project


class ProjectRepository:
    """Repository for Project model operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, project_id: UUID) -> Project | None:
        """Get project by ID."""
        result = await self.session.execute(select(Project).where(Project.id == project_id))
        return result.scalar_one_or_none()

    async def get_owned(self, project_id: UUID, user_id: UUID) -> Project | None:
        """Get a project only if it belongs to the given user."""
        result = await self.session.execute(
            select(Project).where(
                Project.id == project_id,
                Project.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def create(
        self,
        user_id: UUID,
        title: str,
        prompt: str,
        generated_code: dict[str, str] | None = None,
    ) -> Project:
        """Create a new project."""
        project = Project(
            user_id=user_id,
            title=title,
            prompt=prompt,
            generated_code=generated_code,
            is_pinned=False,
            is_favorite=False,
        )
        self.session.add(project)
        await self.session.flush()
        await self.session.refresh(project)
        return project

    async def list_by_user(
        self,
        user_id: UUID,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Project]:
        """List projects for a user, newest first."""
        result = await self.session.execute(
            select(Project)
            .where(Project.user_id == user_id)
            .order_by(desc(Project.created_at))
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    async def list_ids_by_user(self, user_id: UUID) -> list[UUID]:
        """List the IDs of every project a user owns."""
        result = await self.session.execute(select(Project.id).where(Project.user_id == user_id))
        return list(result.scalars().all())

    async def count_by_user(self, user_id: UUID) -> int:
        """Count projects for a user."""
        result = await self.session.execute(
            select(func.count()).select_from(Project).where(Project.user_id == user_id)
        )
        return result.scalar_one()

    async def update(
        self,
        project: Project,
        title: str | None = None,
        is_pinned: bool | None = None,
        is_favorite: bool | None = None,
        generated_code: dict[str, str] | None = None,
    ) -> Project:
        """Update the given fields of a loaded project."""
        if title is not None:
            project.title = title
        if is_pinned is not None:
            project.is_pinned = is_pinned
        if is_favorite is not None:
            project.is_favorite = is_favorite
        if generated_code is not None:
            project.generated_code = generated_code

        await self.session.flush()
        # updated_at is set by the database; load it before the session is left
        await self.session.refresh(project)
        return project

    async def delete_by_user(self, user_id: UUID, project_id: UUID) -> int:
        """Delete one project owned by a user. Returns the deleted row count."""
        result = await self.session.execute(
            delete(Project).where(
                Project.id == project_id,
                Project.user_id == user_id,
            )
        )
        return result.rowcount

    async def delete_all_by_user(self, user_id: UUID) -> int:
        """Delete every project of a user. Returns the deleted row count."""
        result = await self.session.execute(delete(Project).where(Project.user_id == user_id))
        return result.rowcount
