"""
Pydantic schemas for projects API.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class MessageInfo(BaseModel):
    """One conversation turn."""

    id: str = Field(..., description="Message ID")
    role: str = Field(..., description="'user' or 'model'")
    text: str = Field(..., description="Message text")
    image: str | None = Field(None, description="Attached image (data URI or URL)")
    created_at: datetime = Field(..., description="Creation timestamp")


class ProjectListItem(BaseModel):
    """Abbreviated project info for the sidebar."""

    id: str = Field(..., description="Project ID")
    title: str = Field(..., description="Project title")
    is_pinned: bool = Field(default=False)
    is_favorite: bool = Field(default=False)
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


class ProjectInfo(ProjectListItem):
    """Project information including its current files."""

    prompt: str = Field(..., description="Prompt the project was created from")
    generated_code: dict[str, str] | None = Field(
        None,
        description="Relative path to file content; null before the first generation",
    )


# ============ Request/Response Schemas ============


class ListProjectsResponse(BaseModel):
    """Response for listing projects."""

    projects: list[ProjectListItem] = Field(default_factory=list)
    total: int = Field(default=0)
    limit: int = Field(default=50)
    offset: int = Field(default=0)
    has_more: bool = Field(default=False)


class GetProjectResponse(BaseModel):
    """Project with its conversation, oldest message first."""

    project: ProjectInfo
    messages: list[MessageInfo] = Field(default_factory=list)


class UpdateProjectRequest(BaseModel):
    """Rename, pin or favorite a project."""

    title: str | None = Field(
        default=None,
        min_length=1,
        max_length=200,
        description="New title",
    )
    is_pinned: bool | None = None
    is_favorite: bool | None = None


class UpdateProjectResponse(BaseModel):
    success: bool = True
    project: ProjectInfo


class DuplicateProjectResponse(BaseModel):
    success: bool = True
    project: ProjectInfo


class DeleteProjectResponse(BaseModel):
    success: bool = True


class ProjectFileEntry(BaseModel):
    path: str
    content: str


class ProjectFilesResponse(BaseModel):
    """File listing for the code viewer, sorted by path."""

    files: list[ProjectFileEntry] = Field(default_factory=list)


class PreviewResponse(BaseModel):
    """Input bundle for the in-browser sandbox."""

    files: dict[str, str]
    dependencies: dict[str, str]
    external_resources: list[str]
    template: str
