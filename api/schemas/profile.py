"""
Pydantic schemas for the profile API.
"""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class Theme(StrEnum):
    """Editor color themes."""

    OBSIDIAN = "obsidian"
    MIDNIGHT = "midnight"
    DEEP_SPACE = "deep-space"


class Preferences(BaseModel):
    """Stored user preferences with defaults for missing keys."""

    model_config = ConfigDict(extra="ignore")

    theme: Theme = Field(default=Theme.OBSIDIAN)
    stream_responses: bool = Field(default=True)
    code_highlight: bool = Field(default=True)


class PreferencesUpdate(BaseModel):
    """Partial preferences update; omitted fields keep their value."""

    model_config = ConfigDict(extra="forbid")

    theme: Theme | None = None
    stream_responses: bool | None = None
    code_highlight: bool | None = None


class UsageInfo(BaseModel):
    """Plan usage. Null limits mean unlimited."""

    project_count: int
    project_limit: int | None = None
    daily_image_count: int
    daily_image_limit: int | None = None
    images_remaining: int | None = None


class ProfileStats(BaseModel):
    project_count: int
    message_count: int
    account_age_days: int


class ProfileResponse(BaseModel):
    id: str
    email: str | None = None
    is_pro: bool = False
    plan: str = Field(..., description="'pro' or 'free'")
    usage: UsageInfo
    stats: ProfileStats
    preferences: Preferences
    created_at: datetime


class ClearHistoryResponse(BaseModel):
    success: bool = True
    deleted_projects: int = 0
