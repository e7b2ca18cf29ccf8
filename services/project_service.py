"""
Project workflows.

Each workflow runs inside the caller's database session. Nothing is written
before the model call succeeds, so a failed generation leaves the session
clean and the request's rollback discards any quota change.
"""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from core.exceptions import ProjectNotFoundError, ValidationError
from database.models import Profile, Project, ProjectMessage
from database.repositories import MessageRepository, ProfileRepository, ProjectRepository

from .images import ImageAttachment, decode_data_uri
from .normalizer import GeneratedResult, merge_for_update
from .project_generator import ProjectGenerator, get_project_generator
from .prompts import build_autofix_prompt
from .quota_service import QuotaService, get_quota_service

logger = logging.getLogger(__name__)

MAX_IMAGES_PER_MESSAGE = 5
TITLE_MAX_LENGTH = 200
TITLE_PROMPT_CHARS = 30

GENERATED_MESSAGE = "Project generated successfully! I've set up the basic structure for you."
UPDATE_FALLBACK = "Applied changes based on your request."


def project_title(prompt: str, description: str = "") -> str:
    """Title for a new project: the model's description, else the start of the prompt."""
    title = description or f"{prompt[:TITLE_PROMPT_CHARS]}..."
    return title[:TITLE_MAX_LENGTH]


def update_message(description: str) -> str:
    return f"Project updated: {description or UPDATE_FALLBACK}"


@dataclass
class WorkflowResult:
    """Outcome of a generate or update call."""

    project: Project
    result: GeneratedResult
    messages: list[ProjectMessage] = field(default_factory=list)


@dataclass
class UsageStats:
    project_count: int
    message_count: int
    account_age_days: int


class ProjectService:
    """Orchestrates model calls, plan limits and persistence for projects."""

    def __init__(
        self,
        project_repo: ProjectRepository,
        message_repo: MessageRepository,
        profile_repo: ProfileRepository,
        generator: ProjectGenerator | None = None,
        quota: QuotaService | None = None,
    ):
        self.project_repo = project_repo
        self.message_repo = message_repo
        self.profile_repo = profile_repo
        self.generator = generator or get_project_generator()
        self.quota = quota or get_quota_service()

    @staticmethod
    def _decode_images(prompt: str, images: list[str] | None) -> ImageAttachment | None:
        """Validate attachments and return the one sent to the model (the first)."""
        images = images or []
        if not prompt.strip() and not images:
            raise ValidationError(message="A prompt or an image is required")
        if len(images) > MAX_IMAGES_PER_MESSAGE:
            raise ValidationError(
                message=f"Maximum {MAX_IMAGES_PER_MESSAGE} images per message",
                details={"max_images": MAX_IMAGES_PER_MESSAGE},
            )

        attachments = [decode_data_uri(image) for image in images]
        return attachments[0] if attachments else None

    async def get_project(self, profile: Profile, project_id: UUID) -> Project:
        project = await self.project_repo.get_owned(project_id, profile.id)
        if not project:
            raise ProjectNotFoundError()
        return project

    async def create_project_from_prompt(
        self,
        profile: Profile,
        prompt: str,
        images: list[str] | None = None,
    ) -> WorkflowResult:
        """
        Generate a new project and persist it with its first two messages.

        Order: plan check, image quota, model call, then one project insert
        followed by the user message and the model message.
        """
        attachment = self._decode_images(prompt, images)

        async with self.quota.generation_slot(profile.id):
            await self.quota.check_project_limit(profile, self.project_repo)
            await self.quota.consume_images(profile, len(images or []), self.profile_repo)
            result = await self.generator.generate_project(prompt, attachment)

        project = await self.project_repo.create(
            user_id=profile.id,
            title=project_title(prompt, result.description),
            prompt=prompt,
            generated_code=dict(result.files),
        )
        user_message = await self.message_repo.create(
            project.id,
            role="user",
            text=prompt,
            image=images[0] if images else None,
        )
        model_message = await self.message_repo.create(
            project.id,
            role="model",
            text=GENERATED_MESSAGE,
        )

        logger.info(f"Generated project {project.id} with {len(result.files)} files")
        return WorkflowResult(project=project, result=result, messages=[user_message, model_message])

    async def update_project_from_prompt(
        self,
        profile: Profile,
        project_id: UUID,
        prompt: str,
        images: list[str] | None = None,
    ) -> WorkflowResult:
        """
        Apply a change request to an existing project.

        The model sees the current files and the conversation so far. On
        success the user message, the new file set and the model message are
        written in that order.
        """
        project = await self.get_project(profile, project_id)
        attachment = self._decode_images(prompt, images)
        previous = project.generated_code or {}

        async with self.quota.generation_slot(profile.id):
            await self.quota.consume_images(profile, len(images or []), self.profile_repo)
            history = [
                {"role": m.role, "text": m.text}
                for m in await self.message_repo.list_by_project(project.id)
            ]
            result = await self.generator.update_project(prompt, previous, history, attachment)

        files = merge_for_update(previous, result)

        user_message = await self.message_repo.create(
            project.id,
            role="user",
            text=prompt,
            image=images[0] if images else None,
        )
        await self.project_repo.update(project, generated_code=files)
        model_message = await self.message_repo.create(
            project.id,
            role="model",
            text=update_message(result.description),
        )

        logger.info(f"Updated project {project.id}: {len(previous)} -> {len(files)} files")
        return WorkflowResult(project=project, result=result, messages=[user_message, model_message])

    async def autofix_project(self, profile: Profile, project_id: UUID, error: str) -> WorkflowResult:
        """Send a preview error back to the model as a regular update."""
        if not error.strip():
            raise ValidationError(message="Error text is required")
        return await self.update_project_from_prompt(profile, project_id, build_autofix_prompt(error))

    async def update_project_details(
        self,
        profile: Profile,
        project_id: UUID,
        title: str | None = None,
        is_pinned: bool | None = None,
        is_favorite: bool | None = None,
    ) -> Project:
        """Rename, pin or favorite a project. None leaves a field unchanged."""
        project = await self.get_project(profile, project_id)
        if title is not None and not title.strip():
            raise ValidationError(message="Title cannot be empty")

        return await self.project_repo.update(
            project,
            title=title.strip() if title is not None else None,
            is_pinned=is_pinned,
            is_favorite=is_favorite,
        )

    async def list_messages(self, project: Project) -> list[ProjectMessage]:
        return await self.message_repo.list_by_project(project.id)

    async def duplicate_project(self, profile: Profile, project_id: UUID) -> Project:
        source = await self.get_project(profile, project_id)
        await self.quota.check_project_limit(profile, self.project_repo)

        copy = await self.project_repo.create(
            user_id=profile.id,
            title=f"Copy of {source.title}"[:TITLE_MAX_LENGTH],
            prompt=source.prompt,
            generated_code=dict(source.generated_code) if source.generated_code is not None else None,
        )
        logger.info(f"Duplicated project {source.id} as {copy.id}")
        return copy

    async def delete_project(self, profile: Profile, project_id: UUID) -> None:
        """Delete a project's messages, then the project itself."""
        await self.get_project(profile, project_id)

        await self.message_repo.delete_by_project(project_id)
        deleted = await self.project_repo.delete_by_user(profile.id, project_id)
        if deleted == 0:
            raise ProjectNotFoundError()

        logger.info(f"Deleted project {project_id}")

    async def clear_history(self, profile: Profile) -> int:
        """
        Delete every message and project of a profile.

        Returns:
            Number of deleted projects
        """
        project_ids = await self.project_repo.list_ids_by_user(profile.id)
        await self.message_repo.delete_by_projects(project_ids)
        deleted = await self.project_repo.delete_all_by_user(profile.id)

        logger.info(f"Cleared history for profile {profile.id}: {deleted} projects")
        return deleted

    async def delete_account(self, profile: Profile) -> None:
        """Clear the history, then remove the profile row."""
        await self.clear_history(profile)
        await self.profile_repo.delete(profile.id)
        logger.info(f"Deleted profile {profile.id}")

    async def usage_stats(self, profile: Profile, now: datetime | None = None) -> UsageStats:
        now = now or datetime.now(UTC)
        age = (now - profile.created_at).days if profile.created_at else 0
        return UsageStats(
            project_count=await self.project_repo.count_by_user(profile.id),
            message_count=await self.message_repo.count_by_user(profile.id),
            account_age_days=max(0, age),
        )
