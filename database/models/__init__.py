"""
SQLAlchemy models for the Cenly API.
"""

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from .message import ProjectMessage
from .profile import Profile
from .project import Project

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    # Models
    "Profile",
    "Project",
    "ProjectMessage",
]
