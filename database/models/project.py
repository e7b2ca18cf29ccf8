"""
Project model: one generated app plus its current file set.
"""

from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, JSONType, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from .message import ProjectMessage
    from .profile import Profile


class Project(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """
    Project owned by a profile.

    generated_code maps relative file paths to file contents and is NULL
    until the first successful generation.
    """

    __tablename__ = "projects"

    # Owner
    user_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )

    # The prompt the project was created from
    prompt: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    generated_code: Mapped[dict[str, str] | None] = mapped_column(
        JSONType,
        nullable=True,
    )

    is_pinned: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        server_default="false",
    )
    is_favorite: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        server_default="false",
    )

    # Relationships
    owner: Mapped["Profile"] = relationship(
        "Profile",
        back_populates="projects",
    )
    messages: Mapped[list["ProjectMessage"]] = relationship(
        "ProjectMessage",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ProjectMessage.created_at",
    )

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, title={self.title})>"


Index("idx_projects_user_created", Project.user_id, Project.created_at)
