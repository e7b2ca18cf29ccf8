"""
API routers for different endpoints.
"""

from .health import router as health_router
from .generate import router as generate_router
from .projects import router as projects_router
from .profile import router as profile_router

__all__ = [
    "health_router",
    "generate_router",
    "projects_router",
    "profile_router",
]
