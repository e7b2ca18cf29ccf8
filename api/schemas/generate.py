"""
Project generation-related Pydantic schemas.
"""

from pydantic import BaseModel, Field

from .projects import MessageInfo, ProjectInfo


class GenerateRequest(BaseModel):
    """Request for generating or updating a project."""

    prompt: str = Field(
        default="",
        max_length=20000,
        description="What to build or change",
    )
    images: list[str] = Field(
        default_factory=list,
        description="Attached images as base64 data URIs; the first one is sent to the model",
    )


class AutofixRequest(BaseModel):
    """A runtime error reported by the preview."""

    error: str = Field(
        ...,
        min_length=1,
        max_length=10000,
        description="Error text shown in the preview",
    )


class AssistantRequest(BaseModel):
    """Plain question for the coding assistant."""

    prompt: str = Field(..., min_length=1, max_length=20000)
    image: str | None = Field(None, description="Optional image as base64 data URI")


class GenerateResponse(BaseModel):
    """Result of a generate, update or autofix call."""

    success: bool = True
    project: ProjectInfo
    description: str = Field(default="", description="Model's summary of the change")
    messages: list[MessageInfo] = Field(
        default_factory=list,
        description="The user and model messages written by this call",
    )
