"""
Profile model: the local record of an authenticated user.
"""

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, JSONType, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from .project import Project


class Profile(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """
    User profile with plan flag and daily image usage.

    Created the first time a verified token for a new auth id is seen.
    """

    __tablename__ = "profiles"

    # Auth provider user id (JWT sub claim)
    auth_id: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )
    email: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    # Plan
    is_pro: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        server_default="false",
    )

    # Daily image quota; the count is only meaningful for last_image_reset's date
    daily_image_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        server_default="0",
    )
    last_image_reset: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
    )

    # {"theme": "obsidian", "stream_responses": true, "code_highlight": true}
    preferences: Mapped[dict] = mapped_column(
        JSONType,
        default=dict,
        nullable=False,
        server_default="{}",
    )

    projects: Mapped[list["Project"]] = relationship(
        "Project",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, email={self.email}, is_pro={self.is_pro})>"


Index("idx_profiles_auth_id", Profile.auth_id)
