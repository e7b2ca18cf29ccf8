"""
Pydantic schemas for API request/response models.
"""

from .common import (
    ErrorDetail,
    ErrorResponse,
    HealthStatus,
    HealthCheckResponse,
    DetailedHealthCheckResponse,
    ComponentHealth,
    MessageResponse,
)

from .generate import (
    AssistantRequest,
    AutofixRequest,
    GenerateRequest,
    GenerateResponse,
)

from .profile import (
    ClearHistoryResponse,
    Preferences,
    PreferencesUpdate,
    ProfileResponse,
    ProfileStats,
    Theme,
    UsageInfo,
)

from .projects import (
    DeleteProjectResponse,
    DuplicateProjectResponse,
    GetProjectResponse,
    ListProjectsResponse,
    MessageInfo,
    PreviewResponse,
    ProjectFileEntry,
    ProjectFilesResponse,
    ProjectInfo,
    ProjectListItem,
    UpdateProjectRequest,
    UpdateProjectResponse,
)

__all__ = [
    # Common
    "ErrorDetail",
    "ErrorResponse",
    "HealthStatus",
    "HealthCheckResponse",
    "DetailedHealthCheckResponse",
    "ComponentHealth",
    "MessageResponse",
    # Generate
    "AssistantRequest",
    "AutofixRequest",
    "GenerateRequest",
    "GenerateResponse",
    # Profile
    "ClearHistoryResponse",
    "Preferences",
    "PreferencesUpdate",
    "ProfileResponse",
    "ProfileStats",
    "Theme",
    "UsageInfo",
    # Projects
    "DeleteProjectResponse",
    "DuplicateProjectResponse",
    "GetProjectResponse",
    "ListProjectsResponse",
    "MessageInfo",
    "PreviewResponse",
    "ProjectFileEntry",
    "ProjectFilesResponse",
    "ProjectInfo",
    "ProjectListItem",
    "UpdateProjectRequest",
    "UpdateProjectResponse",
]
