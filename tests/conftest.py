"""
Pytest configuration and fixtures.
"""

import os
from datetime import UTC, date, datetime
from typing import Any
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

# Set test environment before importing app
os.environ["ENVIRONMENT"] = "testing"
os.environ["DEBUG"] = "true"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-32chars!"
os.environ["REDIS_URL"] = "redis://localhost:6379/15"
os.environ["DATABASE_ENABLED"] = "false"
os.environ.pop("GOOGLE_API_KEY", None)

from core.auth import AppUser  # noqa: E402
from database.models import Profile, Project, ProjectMessage  # noqa: E402
from services.normalizer import GeneratedResult  # noqa: E402
from services.quota_service import QuotaService  # noqa: E402


# ============ Mock Redis ============


class MockRedis:
    """Mock Redis client for testing."""

    def __init__(self):
        self._data: dict[str, Any] = {}
        self._expiry: dict[str, int] = {}

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str, ex: int = None, nx: bool = False) -> bool | None:
        if nx and key in self._data:
            return None
        self._data[key] = value
        if ex:
            self._expiry[key] = ex
        return True

    async def delete(self, key: str) -> int:
        if key in self._data:
            del self._data[key]
            self._expiry.pop(key, None)
            return 1
        return 0

    async def exists(self, key: str) -> int:
        return 1 if key in self._data else 0

    async def eval(self, script: str, numkeys: int, *keys_and_args) -> int:
        # Only the compare-and-delete script is used by the app
        key, token = keys_and_args[0], keys_and_args[numkeys]
        if self._data.get(key) == token:
            return await self.delete(key)
        return 0

    async def expire(self, key: str, seconds: int) -> bool:
        self._expiry[key] = seconds
        return True

    async def ping(self) -> bool:
        return True

    async def close(self):
        pass


@pytest.fixture
def mock_redis():
    """Create a mock Redis instance."""
    return MockRedis()


# ============ In-memory repositories ============


class FakeStore:
    """
    Shared in-memory tables for the fake repositories.

    Every write is appended to `log` as (operation, detail) so tests can
    assert on statement order.
    """

    def __init__(self):
        self.profiles: dict[UUID, Profile] = {}
        self.projects: dict[UUID, Project] = {}
        self.messages: list[ProjectMessage] = []
        self.log: list[tuple[str, Any]] = []

    def writes(self, prefix: str = "") -> list[str]:
        return [op for op, _ in self.log if op.startswith(prefix)]


def _now() -> datetime:
    return datetime.now(UTC)


def make_profile(store: FakeStore, auth_id: str = "auth-user-1", is_pro: bool = False, **fields) -> Profile:
    """Insert a profile directly into the fake store."""
    profile = Profile(
        id=uuid4(),
        auth_id=auth_id,
        email=fields.pop("email", "dev@example.com"),
        is_pro=is_pro,
        daily_image_count=fields.pop("daily_image_count", 0),
        last_image_reset=fields.pop("last_image_reset", None),
        preferences=fields.pop("preferences", {}),
        created_at=fields.pop("created_at", _now()),
        updated_at=_now(),
    )
    store.profiles[profile.id] = profile
    return profile


class FakeProfileRepository:
    def __init__(self, store: FakeStore):
        self.store = store

    async def get_by_id(self, profile_id):
        return self.store.profiles.get(profile_id)

    async def get_by_auth_id(self, auth_id):
        return next((p for p in self.store.profiles.values() if p.auth_id == auth_id), None)

    async def get_or_create(self, auth_id, email=None):
        profile = await self.get_by_auth_id(auth_id)
        if profile:
            return profile
        profile = Profile(
            id=uuid4(),
            auth_id=auth_id,
            email=email,
            is_pro=False,
            daily_image_count=0,
            last_image_reset=None,
            preferences={},
            created_at=_now(),
            updated_at=_now(),
        )
        self.store.profiles[profile.id] = profile
        self.store.log.append(("profile.create", profile.id))
        return profile

    async def consume_daily_images(self, profile_id, count, limit, today: date):
        profile = self.store.profiles[profile_id]
        current = profile.daily_image_count if profile.last_image_reset == today else 0
        new_count = current + count
        if new_count > limit:
            return None
        profile.daily_image_count = new_count
        profile.last_image_reset = today
        self.store.log.append(("profile.images", new_count))
        return new_count

    async def update_preferences(self, profile_id, preferences):
        profile = self.store.profiles.get(profile_id)
        if not profile:
            return None
        profile.preferences = preferences
        self.store.log.append(("profile.preferences", preferences))
        return profile

    async def delete(self, profile_id):
        self.store.log.append(("profile.delete", profile_id))
        return self.store.profiles.pop(profile_id, None) is not None


class FakeProjectRepository:
    def __init__(self, store: FakeStore):
        self.store = store

    async def get_by_id(self, project_id):
        return self.store.projects.get(project_id)

    async def get_owned(self, project_id, user_id):
        project = self.store.projects.get(project_id)
        if project and project.user_id == user_id:
            return project
        return None

    async def create(self, user_id, title, prompt, generated_code=None):
        project = Project(
            id=uuid4(),
            user_id=user_id,
            title=title,
            prompt=prompt,
            generated_code=generated_code,
            is_pinned=False,
            is_favorite=False,
            created_at=_now(),
            updated_at=_now(),
        )
        self.store.projects[project.id] = project
        self.store.log.append(("project.create", project.id))
        return project

    async def list_by_user(self, user_id, limit=50, offset=0):
        owned = [p for p in self.store.projects.values() if p.user_id == user_id]
        owned.sort(key=lambda p: p.created_at, reverse=True)
        return owned[offset:offset + limit]

    async def list_ids_by_user(self, user_id):
        return [p.id for p in self.store.projects.values() if p.user_id == user_id]

    async def count_by_user(self, user_id):
        return len([p for p in self.store.projects.values() if p.user_id == user_id])

    async def update(self, project, title=None, is_pinned=None, is_favorite=None, generated_code=None):
        if title is not None:
            project.title = title
        if is_pinned is not None:
            project.is_pinned = is_pinned
        if is_favorite is not None:
            project.is_favorite = is_favorite
        if generated_code is not None:
            project.generated_code = generated_code
        project.updated_at = _now()
        self.store.log.append(("project.update", project.id))
        return project

    async def delete_by_user(self, user_id, project_id):
        self.store.log.append(("project.delete", project_id))
        project = self.store.projects.get(project_id)
        if project and project.user_id == user_id:
            del self.store.projects[project_id]
            return 1
        return 0

    async def delete_all_by_user(self, user_id):
        ids = await self.list_ids_by_user(user_id)
        for project_id in ids:
            del self.store.projects[project_id]
        self.store.log.append(("project.delete_all", len(ids)))
        return len(ids)


class FakeMessageRepository:
    def __init__(self, store: FakeStore):
        self.store = store

    async def create(self, project_id, role, text, image=None):
        message = ProjectMessage(
            id=uuid4(),
            project_id=project_id,
            role=role,
            text=text,
            image=image,
            created_at=_now(),
        )
        self.store.messages.append(message)
        self.store.log.append((f"message.create.{role}", project_id))
        return message

    async def list_by_project(self, project_id):
        return [m for m in self.store.messages if m.project_id == project_id]

    async def count_by_user(self, user_id):
        owned = {p.id for p in self.store.projects.values() if p.user_id == user_id}
        return len([m for m in self.store.messages if m.project_id in owned])

    async def delete_by_project(self, project_id):
        before = len(self.store.messages)
        self.store.messages = [m for m in self.store.messages if m.project_id != project_id]
        self.store.log.append(("message.delete", project_id))
        return before - len(self.store.messages)

    async def delete_by_projects(self, project_ids):
        ids = set(project_ids)
        before = len(self.store.messages)
        self.store.messages = [m for m in self.store.messages if m.project_id not in ids]
        self.store.log.append(("message.delete_many", len(ids)))
        return before - len(self.store.messages)


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def profile_repo(store) -> FakeProfileRepository:
    return FakeProfileRepository(store)


@pytest.fixture
def project_repo(store) -> FakeProjectRepository:
    return FakeProjectRepository(store)


@pytest.fixture
def message_repo(store) -> FakeMessageRepository:
    return FakeMessageRepository(store)


@pytest.fixture
def profile(store) -> Profile:
    """A free-plan profile stored in the fake store, matching auth_user."""
    return make_profile(store)


# ============ Fake generator ============


class FakeGenerator:
    """Stands in for ProjectGenerator; returns canned results or raises."""

    def __init__(self):
        self.result = GeneratedResult(
            files={"page.tsx": "export default function Page() { return <h1>Hi</h1>; }"},
            description="Landing page",
        )
        self.error: Exception | None = None
        self.calls: list[tuple[str, dict]] = []
        self.chunks = ["Hello", " world"]

    async def generate_project(self, prompt, image=None):
        self.calls.append(("generate", {"prompt": prompt, "image": image}))
        if self.error:
            raise self.error
        return self.result

    async def update_project(self, prompt, current_files, history=None, image=None):
        self.calls.append(
            (
                "update",
                {"prompt": prompt, "current_files": current_files, "history": history, "image": image},
            )
        )
        if self.error:
            raise self.error
        return self.result

    async def stream_response(self, prompt, image=None):
        self.calls.append(("stream", {"prompt": prompt, "image": image}))
        for chunk in self.chunks:
            yield chunk


@pytest.fixture
def fake_generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def quota(mock_redis) -> QuotaService:
    return QuotaService(redis_client=mock_redis, project_limit=5, daily_image_limit=5, slot_ttl=300)


# ============ App Fixtures ============


@pytest.fixture
def auth_user() -> AppUser:
    return AppUser(id="auth-user-1", email="dev@example.com")


@pytest.fixture
def client(store, fake_generator, quota, auth_user):
    """
    Test client with auth, repositories, generator and quota overridden.

    Lifespan is not run, so no Redis or database connection is attempted.
    """
    from api.dependencies import (
        get_generator,
        get_message_repository,
        get_profile_repository,
        get_project_repository,
        get_quota,
    )
    from api.main import app
    from core.auth import require_current_user

    app.dependency_overrides[require_current_user] = lambda: auth_user
    app.dependency_overrides[get_profile_repository] = lambda: FakeProfileRepository(store)
    app.dependency_overrides[get_project_repository] = lambda: FakeProjectRepository(store)
    app.dependency_overrides[get_message_repository] = lambda: FakeMessageRepository(store)
    app.dependency_overrides[get_generator] = lambda: fake_generator
    app.dependency_overrides[get_quota] = lambda: quota

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client():
    """Test client without any overrides."""
    from api.main import app

    app.dependency_overrides.clear()
    return TestClient(app)


# ============ Test Settings ============


@pytest.fixture
def test_settings(monkeypatch):
    """Override settings for testing."""
    monkeypatch.setenv("ENVIRONMENT", "testing")
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/15")
    monkeypatch.setenv("SECRET_KEY", "test-secret-key-for-testing-only-32chars!")
    monkeypatch.setenv("GOOGLE_API_KEY", "test-api-key")

    # Clear cached settings
    from core.config import get_settings

    get_settings.cache_clear()

    yield

    # Restore cached settings
    get_settings.cache_clear()


# ============ Test Data Fixtures ============


@pytest.fixture
def png_data_uri() -> str:
    """A tiny real PNG as a data URI."""
    import base64
    from io import BytesIO

    from PIL import Image

    buffer = BytesIO()
    Image.new("RGB", (4, 4), color="red").save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode()


@pytest.fixture
def sample_files() -> dict[str, str]:
    return {
        "src/components/Button.tsx": "import { cn } from '@/lib/utils';\nexport function Button() {}",
        "src/lib/utils.ts": "export const cn = (...a: string[]) => a.join(' ');",
    }
