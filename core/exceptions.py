"""
Custom exception classes for the application.

All exceptions inherit from AppException and include:
- error_code: Machine-readable error code for i18n
- message: Human-readable error message
- status_code: HTTP status code to return
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors."""

    error_code: str = "internal_error"
    message: str = "An unexpected error occurred"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API response."""
        result = {
            "code": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class AuthenticationError(AppException):
    """Raised when authentication fails."""

    error_code = "authentication_failed"
    message = "Authentication failed"
    status_code = 401


class AuthorizationError(AppException):
    """Raised when user lacks permission."""

    error_code = "authorization_failed"
    message = "You do not have permission to perform this action"
    status_code = 403


class NotFoundError(AppException):
    """Raised when a resource is not found."""

    error_code = "not_found"
    message = "Resource not found"
    status_code = 404


class ProjectNotFoundError(NotFoundError):
    """Raised when a project does not exist or belongs to someone else."""

    error_code = "project_not_found"
    message = "Project not found"


class ValidationError(AppException):
    """Raised when input validation fails."""

    error_code = "validation_error"
    message = "Invalid input"
    status_code = 422


class InvalidIdError(ValidationError):
    """Raised when a path identifier is not a valid UUID."""

    error_code = "invalid_id"
    message = "Invalid ID"
    status_code = 400


class PlanLimitError(AppException):
    """Raised when a free-plan limit blocks the request."""

    error_code = "plan_limit"
    message = "Plan limit reached. Upgrade to Pro to continue."
    status_code = 403


class GenerationInProgressError(AppException):
    """Raised when the user already has a generation running."""

    error_code = "generation_in_progress"
    message = "A generation is already running. Please wait for it to finish."
    status_code = 409


class ExternalServiceError(AppException):
    """Raised when an external service fails."""

    error_code = "external_service_error"
    message = "External service unavailable"
    status_code = 503


class DatabaseUnavailableError(ExternalServiceError):
    """Raised when an endpoint needs the database and none is configured."""

    error_code = "database_unavailable"
    message = "Database not configured"


class GenerationError(AppException):
    """Raised when the model call behind a generation or update fails."""

    error_code = "generation_failed"
    message = "Failed to generate project. Please try again."
    status_code = 502


# ============ Model response parsing ============


class ModelResponseError(AppException):
    """Raised when the model answer cannot be turned into a project."""

    error_code = "invalid_model_response"
    message = "AI returned invalid project structure"
    status_code = 502


class NoJsonFoundError(ModelResponseError):
    """The model answer contains no JSON object at all."""

    error_code = "no_json_found"


class InvalidJsonError(ModelResponseError):
    """The JSON candidate does not parse or lacks the files mapping."""

    error_code = "invalid_json"
