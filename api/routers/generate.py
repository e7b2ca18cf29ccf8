"""
Project generation router.

Endpoints:
- POST /api/generate - Generate a new project from a prompt
- POST /api/projects/{id}/messages - Update a project from a prompt
- POST /api/projects/{id}/autofix - Send a preview error back to the model
- POST /api/assistant/stream - Streamed plain-text assistant answer
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from api.dependencies import ensure_profile, get_generator, get_project_service, parse_project_id
from api.routers.projects import message_to_info, project_to_info
from api.schemas.common import GENERATION_ERROR_RESPONSES
from api.schemas.generate import (
    AssistantRequest,
    AutofixRequest,
    GenerateRequest,
    GenerateResponse,
)
from core.auth import AppUser, require_current_user
from core.exceptions import AppException, GenerationError
from database.models import Profile
from services.images import decode_data_uri
from services.project_generator import ProjectGenerator
from services.project_service import ProjectService, WorkflowResult

logger = logging.getLogger(__name__)

router = APIRouter(tags=["generate"])

GENERATE_FAILED_MESSAGE = "Failed to generate project. Please try again."
UPDATE_FAILED_MESSAGE = "Failed to update project. The AI might be busy."


def _to_response(outcome: WorkflowResult) -> GenerateResponse:
    return GenerateResponse(
        success=True,
        project=project_to_info(outcome.project),
        description=outcome.result.description,
        messages=[message_to_info(m) for m in outcome.messages],
    )


@router.post("/generate", response_model=GenerateResponse, responses=GENERATION_ERROR_RESPONSES)
async def generate_project(
    request: GenerateRequest,
    profile: Profile = Depends(ensure_profile),
    service: ProjectService = Depends(get_project_service),
):
    """
    Generate a new project.

    On success one project and two messages (user, then model) are stored.
    On failure nothing is stored.
    """
    try:
        outcome = await service.create_project_from_prompt(profile, request.prompt, request.images)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Project generation failed: {e}")
        raise GenerationError(message=GENERATE_FAILED_MESSAGE)

    return _to_response(outcome)


@router.post(
    "/projects/{project_id}/messages",
    response_model=GenerateResponse,
    responses=GENERATION_ERROR_RESPONSES,
)
async def update_project(
    project_id: str,
    request: GenerateRequest,
    profile: Profile = Depends(ensure_profile),
    service: ProjectService = Depends(get_project_service),
):
    """Apply a change request; the model returns the complete new file set."""
    project_uuid = parse_project_id(project_id)
    try:
        outcome = await service.update_project_from_prompt(
            profile, project_uuid, request.prompt, request.images
        )
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Project update failed for {project_uuid}: {e}")
        raise GenerationError(message=UPDATE_FAILED_MESSAGE)

    return _to_response(outcome)


@router.post(
    "/projects/{project_id}/autofix",
    response_model=GenerateResponse,
    responses=GENERATION_ERROR_RESPONSES,
)
async def autofix_project(
    project_id: str,
    request: AutofixRequest,
    profile: Profile = Depends(ensure_profile),
    service: ProjectService = Depends(get_project_service),
):
    """Ask the model to fix an error reported by the preview."""
    project_uuid = parse_project_id(project_id)
    try:
        outcome = await service.autofix_project(profile, project_uuid, request.error)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Autofix failed for {project_uuid}: {e}")
        raise GenerationError(message=UPDATE_FAILED_MESSAGE)

    return _to_response(outcome)


@router.post("/assistant/stream")
async def stream_assistant(
    request: AssistantRequest,
    user: AppUser = Depends(require_current_user),
    generator: ProjectGenerator = Depends(get_generator),
):
    """Stream a plain-text answer from the coding assistant."""
    image = decode_data_uri(request.image) if request.image else None
    logger.info(f"Assistant stream for {user.display_name}")

    return StreamingResponse(
        generator.stream_response(request.prompt, image),
        media_type="text/plain; charset=utf-8",
    )
