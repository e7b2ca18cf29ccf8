"""
Message repository for project conversation history.
"""

from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Project, ProjectMessage


class MessageRepository:
    """Repository for ProjectMessage model operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        project_id: UUID,
        role: str,
        text: str,
        image: str | None = None,
    ) -> ProjectMessage:
        """Append a message to a project."""
        message = ProjectMessage(
            project_id=project_id,
            role=role,
            text=text,
            image=image,
        )
        self.session.add(message)
        await self.session.flush()
        await self.session.refresh(message)
        return message

    async def list_by_project(self, project_id: UUID) -> list[ProjectMessage]:
        """List a project's messages, oldest first."""
        result = await self.session.execute(
            select(ProjectMessage)
            .where(ProjectMessage.project_id == project_id)
            .order_by(ProjectMessage.created_at)
        )
        return list(result.scalars().all())

    async def count_by_user(self, user_id: UUID) -> int:
        """Count messages across all projects of a user."""
        result = await self.session.execute(
            select(func.count())
            .select_from(ProjectMessage)
            .join(Project, Project.id == ProjectMessage.project_id)
            .where(Project.user_id == user_id)
        )
        return result.scalar_one()

    async def delete_by_project(self, project_id: UUID) -> int:
        """Delete all messages of one project."""
        result = await self.session.execute(
            delete(ProjectMessage).where(ProjectMessage.project_id == project_id)
        )
        return result.rowcount

    async def delete_by_projects(self, project_ids: list[UUID]) -> int:
        """Delete all messages of several projects."""
        if not project_ids:
            return 0
        result = await self.session.execute(
            delete(ProjectMessage).where(ProjectMessage.project_id.in_(project_ids))
        )
        return result.rowcount
