"""
Core modules for the Cenly API.

This package contains fundamental utilities used across the application:
- config: Application settings and configuration
- security: JWT token verification
- auth: Authenticated-user dependencies
- redis: Redis connection management
- exceptions: Custom exception classes
"""

from .config import Settings, get_settings
from .exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    DatabaseUnavailableError,
    ExternalServiceError,
    GenerationError,
    GenerationInProgressError,
    InvalidIdError,
    InvalidJsonError,
    ModelResponseError,
    NoJsonFoundError,
    NotFoundError,
    PlanLimitError,
    ProjectNotFoundError,
    ValidationError,
)

__all__ = [
    # Config
    "get_settings",
    "Settings",
    # Exceptions
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ProjectNotFoundError",
    "ValidationError",
    "InvalidIdError",
    "PlanLimitError",
    "GenerationInProgressError",
    "ExternalServiceError",
    "DatabaseUnavailableError",
    "GenerationError",
    "ModelResponseError",
    "NoJsonFoundError",
    "InvalidJsonError",
]
