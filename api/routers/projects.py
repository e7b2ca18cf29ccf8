"""
Projects router for managing generated projects.

Endpoints:
- GET /api/projects - List projects
- GET /api/projects/{id} - Get project with its conversation
- PUT /api/projects/{id} - Rename, pin or favorite
- POST /api/projects/{id}/duplicate - Duplicate project
- DELETE /api/projects/{id} - Delete project
- GET /api/projects/{id}/files - Sorted file listing
- GET /api/projects/{id}/preview - Sandbox bundle
- GET /api/projects/{id}/export - ZIP download (Pro)
"""

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from api.dependencies import (
    ensure_profile,
    get_project_repository,
    get_project_service,
    parse_project_id,
)
from api.schemas.projects import (
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
from core.exceptions import DatabaseUnavailableError, PlanLimitError
from database.models import Profile, Project, ProjectMessage
from database.repositories import ProjectRepository
from services.export import archive_filename, build_project_archive
from services.preview import build_preview_bundle
from services.project_service import ProjectService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["projects"])


# ============ Helpers ============


def project_to_info(project: Project) -> ProjectInfo:
    """Convert database project to response model."""
    return ProjectInfo(
        id=str(project.id),
        title=project.title,
        prompt=project.prompt,
        generated_code=project.generated_code,
        is_pinned=project.is_pinned,
        is_favorite=project.is_favorite,
        created_at=project.created_at,
        updated_at=project.updated_at,
    )


def project_to_list_item(project: Project) -> ProjectListItem:
    """Convert database project to list item."""
    return ProjectListItem(
        id=str(project.id),
        title=project.title,
        is_pinned=project.is_pinned,
        is_favorite=project.is_favorite,
        created_at=project.created_at,
        updated_at=project.updated_at,
    )


def message_to_info(message: ProjectMessage) -> MessageInfo:
    return MessageInfo(
        id=str(message.id),
        role=message.role,
        text=message.text,
        image=message.image,
        created_at=message.created_at,
    )


# ============ Endpoints ============


@router.get("", response_model=ListProjectsResponse)
async def list_projects(
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    profile: Profile = Depends(ensure_profile),
    project_repo: ProjectRepository | None = Depends(get_project_repository),
):
    """List projects for the current user, newest first."""
    if not project_repo:
        raise DatabaseUnavailableError()

    projects = await project_repo.list_by_user(profile.id, limit=limit + 1, offset=offset)

    has_more = len(projects) > limit
    projects = projects[:limit]

    total = await project_repo.count_by_user(profile.id)

    return ListProjectsResponse(
        projects=[project_to_list_item(p) for p in projects],
        total=total,
        limit=limit,
        offset=offset,
        has_more=has_more,
    )


@router.get("/{project_id}", response_model=GetProjectResponse)
async def get_project(
    project_id: str,
    profile: Profile = Depends(ensure_profile),
    service: ProjectService = Depends(get_project_service),
):
    """Get a project and its messages, oldest first."""
    project = await service.get_project(profile, parse_project_id(project_id))
    messages = await service.list_messages(project)

    return GetProjectResponse(
        project=project_to_info(project),
        messages=[message_to_info(m) for m in messages],
    )


@router.put("/{project_id}", response_model=UpdateProjectResponse)
async def update_project(
    project_id: str,
    request: UpdateProjectRequest,
    profile: Profile = Depends(ensure_profile),
    service: ProjectService = Depends(get_project_service),
):
    """Rename, pin or favorite a project."""
    project = await service.update_project_details(
        profile,
        parse_project_id(project_id),
        title=request.title,
        is_pinned=request.is_pinned,
        is_favorite=request.is_favorite,
    )
    return UpdateProjectResponse(success=True, project=project_to_info(project))


@router.post("/{project_id}/duplicate", response_model=DuplicateProjectResponse)
async def duplicate_project(
    project_id: str,
    profile: Profile = Depends(ensure_profile),
    service: ProjectService = Depends(get_project_service),
):
    """Copy a project's prompt and files into a new project."""
    copy = await service.duplicate_project(profile, parse_project_id(project_id))
    return DuplicateProjectResponse(success=True, project=project_to_info(copy))


@router.delete("/{project_id}", response_model=DeleteProjectResponse)
async def delete_project(
    project_id: str,
    profile: Profile = Depends(ensure_profile),
    service: ProjectService = Depends(get_project_service),
):
    """Delete a project and its messages."""
    await service.delete_project(profile, parse_project_id(project_id))
    return DeleteProjectResponse(success=True)


@router.get("/{project_id}/files", response_model=ProjectFilesResponse)
async def list_project_files(
    project_id: str,
    profile: Profile = Depends(ensure_profile),
    service: ProjectService = Depends(get_project_service),
):
    """List the current files, sorted by path."""
    project = await service.get_project(profile, parse_project_id(project_id))
    files = project.generated_code or {}

    return ProjectFilesResponse(
        files=[ProjectFileEntry(path=path, content=files[path]) for path in sorted(files)]
    )


@router.get("/{project_id}/preview", response_model=PreviewResponse)
async def get_project_preview(
    project_id: str,
    profile: Profile = Depends(ensure_profile),
    service: ProjectService = Depends(get_project_service),
):
    """Build the sandbox bundle for a project."""
    project = await service.get_project(profile, parse_project_id(project_id))
    bundle = build_preview_bundle(project.generated_code)

    return PreviewResponse(
        files=bundle.files,
        dependencies=bundle.dependencies,
        external_resources=bundle.external_resources,
        template=bundle.template,
    )


@router.get("/{project_id}/export")
async def export_project(
    project_id: str,
    profile: Profile = Depends(ensure_profile),
    service: ProjectService = Depends(get_project_service),
):
    """Download the project files as a ZIP archive."""
    if not profile.is_pro:
        raise PlanLimitError(message="Exporting projects is a Pro feature. Upgrade to Pro to download code.")

    project = await service.get_project(profile, parse_project_id(project_id))
    content = build_project_archive(project.generated_code, project.title)
    filename = archive_filename(project.title)

    logger.info(f"Exported project {project.id} ({len(content)} bytes)")
    return Response(
        content=content,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{filename}.zip"'},
    )
