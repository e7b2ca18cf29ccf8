"""
Unit tests for error handler middleware.
"""

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from pydantic import BaseModel

from api.middleware.error_handler import setup_exception_handlers
from api.schemas.common import ErrorResponse
from core.exceptions import (
    AppException,
    GenerationError,
    GenerationInProgressError,
    InvalidIdError,
    NoJsonFoundError,
    PlanLimitError,
    ProjectNotFoundError,
    ValidationError,
)


class _Strict(BaseModel):
    count: int


def _create_test_app() -> FastAPI:
    """Create a minimal FastAPI app with exception handlers for testing."""
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/raise-app-exception")
    async def raise_app_exception():
        raise AppException(message="Something broke", error_code="test_error")

    @app.get("/raise-generation-error")
    async def raise_generation_error():
        raise GenerationError()

    @app.get("/raise-no-json")
    async def raise_no_json():
        raise NoJsonFoundError()

    @app.get("/raise-project-not-found")
    async def raise_project_not_found():
        raise ProjectNotFoundError()

    @app.get("/raise-plan-limit")
    async def raise_plan_limit():
        raise PlanLimitError(
            message="Free plan is limited to 5 projects.",
            details={"used": 5, "limit": 5},
        )

    @app.get("/raise-in-progress")
    async def raise_in_progress():
        raise GenerationInProgressError()

    @app.get("/raise-invalid-id")
    async def raise_invalid_id():
        raise InvalidIdError(message="Invalid project ID")

    @app.get("/raise-validation-error")
    async def raise_validation_error():
        raise ValidationError(message="Invalid prompt")

    @app.get("/raise-pydantic")
    async def raise_pydantic():
        _Strict.model_validate({"count": "many"})

    @app.get("/query")
    async def query(limit: int):
        return {"limit": limit}

    @app.get("/raise-http-400")
    async def raise_http_400():
        raise HTTPException(status_code=400, detail="Bad input")

    @app.get("/raise-unexpected")
    async def raise_unexpected():
        raise RuntimeError("Something unexpected")

    return app


@pytest.fixture
def test_client():
    app = _create_test_app()
    return TestClient(app, raise_server_exceptions=False)


class TestAppExceptionHandler:
    """Test that AppException subclasses produce structured responses."""

    def test_app_exception(self, test_client):
        resp = test_client.get("/raise-app-exception")
        assert resp.status_code == 500
        assert resp.json() == {
            "success": False,
            "error": {"code": "test_error", "message": "Something broke"},
        }

    def test_generation_error(self, test_client):
        resp = test_client.get("/raise-generation-error")
        assert resp.status_code == 502
        body = resp.json()
        assert body["error"]["code"] == "generation_failed"
        assert body["error"]["message"] == "Failed to generate project. Please try again."

    def test_no_json_found(self, test_client):
        resp = test_client.get("/raise-no-json")
        assert resp.status_code == 502
        body = resp.json()
        assert body["error"]["code"] == "no_json_found"
        assert body["error"]["message"] == "AI returned invalid project structure"

    def test_project_not_found(self, test_client):
        resp = test_client.get("/raise-project-not-found")
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "project_not_found"

    def test_plan_limit_with_details(self, test_client):
        resp = test_client.get("/raise-plan-limit")
        assert resp.status_code == 403
        body = resp.json()
        assert body["error"]["code"] == "plan_limit"
        assert body["error"]["details"]["used"] == 5
        assert ErrorResponse.model_validate(body).error.code == "plan_limit"

    def test_generation_in_progress(self, test_client):
        resp = test_client.get("/raise-in-progress")
        assert resp.status_code == 409
        assert resp.json()["error"]["code"] == "generation_in_progress"

    def test_invalid_id(self, test_client):
        resp = test_client.get("/raise-invalid-id")
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "invalid_id"

    def test_validation_error(self, test_client):
        resp = test_client.get("/raise-validation-error")
        assert resp.status_code == 422
        assert resp.json()["error"]["code"] == "validation_error"


class TestValidationHandlers:
    def test_request_validation(self, test_client):
        resp = test_client.get("/query?limit=abc")
        assert resp.status_code == 422
        body = resp.json()
        assert body["success"] is False
        assert body["error"]["message"] == "Request validation failed"
        assert body["error"]["details"]["errors"][0]["field"] == "query -> limit"

    def test_pydantic_validation(self, test_client):
        resp = test_client.get("/raise-pydantic")
        assert resp.status_code == 422
        assert resp.json()["error"]["message"] == "Data validation failed"


class TestHTTPExceptionFallbackHandler:
    """Test that HTTPException is wrapped in structured format."""

    def test_http_400(self, test_client):
        resp = test_client.get("/raise-http-400")
        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert body["error"]["code"] == "bad_request"
        assert body["error"]["message"] == "Bad input"

    def test_unknown_route(self, test_client):
        resp = test_client.get("/does-not-exist")
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "not_found"


class TestGeneralExceptionHandler:
    def test_unexpected_error_shows_type_outside_production(self, test_client):
        resp = test_client.get("/raise-unexpected")
        assert resp.status_code == 500
        body = resp.json()
        assert body["error"]["code"] == "internal_error"
        assert body["error"]["details"]["type"] == "RuntimeError"
