"""
Repository layer for database access.

Provides async CRUD operations for all models.
"""

from .message_repo import MessageRepository
from .profile_repo import ProfileRepository
from .project_repo import ProjectRepository

__all__ = [
    "ProfileRepository",
    "ProjectRepository",
    "MessageRepository",
]
