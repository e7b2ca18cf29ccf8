"""
Services module for the Cenly API.
"""
from .normalizer import (
    GeneratedResult,
    ProjectFileSet,
    adapt_for_preview,
    merge_for_update,
    parse_model_response,
)
from .project_generator import ProjectGenerator, get_project_generator
from .project_service import ProjectService
from .quota_service import QuotaService, get_quota_service

__all__ = [
    "GeneratedResult",
    "ProjectFileSet",
    "parse_model_response",
    "adapt_for_preview",
    "merge_for_update",
    "ProjectGenerator",
    "get_project_generator",
    "ProjectService",
    "QuotaService",
    "get_quota_service",
]
