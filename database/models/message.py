"""
Conversation messages attached to a project.
"""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, func
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from .project import Project


class ProjectMessage(Base, UUIDPrimaryKeyMixin):
    """
    A single user or model turn.

    Append-only: rows are never updated, only removed together with their
    project or by a history clear.
    """

    __tablename__ = "project_messages"

    project_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # "user" or "model"
    role: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
    )
    text: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    # Data URI or URL of the attached image
    image: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )

    # clock_timestamp keeps turns inserted in one transaction in insert order
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.clock_timestamp(),
        nullable=False,
    )

    project: Mapped["Project"] = relationship(
        "Project",
        back_populates="messages",
    )

    def __repr__(self) -> str:
        return f"<ProjectMessage(id={self.id}, role={self.role})>"


Index("idx_project_messages_project_created", ProjectMessage.project_id, ProjectMessage.created_at)
