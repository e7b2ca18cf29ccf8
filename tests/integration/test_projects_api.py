"""
Integration tests for project management endpoints.
"""

import asyncio
import io
import zipfile
from uuid import uuid4

import pytest

from services.normalizer import APP_PATH, MOUNT_PATH


@pytest.fixture
def project(project_repo, profile):
    """A project owned by the test profile with two files."""
    return asyncio.run(
        project_repo.create(
            profile.id,
            "Landing Page",
            "Build a landing page",
            {"page.tsx": "export default function Page() {}", "components/Hero.tsx": "hero"},
        )
    )


class TestListAndGet:
    def test_list_projects(self, client, project):
        response = client.get("/api/projects")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["has_more"] is False
        assert data["projects"][0]["id"] == str(project.id)
        assert "generated_code" not in data["projects"][0]

    def test_list_pagination(self, client, project_repo, profile):
        for i in range(3):
            asyncio.run(project_repo.create(profile.id, f"p{i}", "prompt"))

        data = client.get("/api/projects?limit=2").json()

        assert len(data["projects"]) == 2
        assert data["has_more"] is True
        assert data["total"] == 3

    def test_get_project_with_messages(self, client, profile):
        created = client.post("/api/generate", json={"prompt": "Build a page"}).json()

        response = client.get(f"/api/projects/{created['project']['id']}")

        assert response.status_code == 200
        data = response.json()
        assert data["project"]["prompt"] == "Build a page"
        assert [m["role"] for m in data["messages"]] == ["user", "model"]

    def test_other_users_project_is_not_found(self, client, project_repo, profile):
        theirs = asyncio.run(project_repo.create(uuid4(), "Theirs", "prompt"))

        response = client.get(f"/api/projects/{theirs.id}")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "project_not_found"

    def test_malformed_id(self, client, profile):
        response = client.get("/api/projects/123")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "invalid_id"


class TestModify:
    def test_rename_and_pin(self, client, project):
        response = client.put(
            f"/api/projects/{project.id}", json={"title": "New name", "is_pinned": True}
        )

        assert response.status_code == 200
        data = response.json()["project"]
        assert data["title"] == "New name"
        assert data["is_pinned"] is True
        assert data["is_favorite"] is False

    def test_duplicate(self, client, store, project):
        response = client.post(f"/api/projects/{project.id}/duplicate")

        assert response.status_code == 200
        data = response.json()["project"]
        assert data["id"] != str(project.id)
        assert data["title"] == "Copy of Landing Page"
        assert data["generated_code"] == project.generated_code
        assert len(store.projects) == 2

    def test_delete(self, client, store, project):
        response = client.delete(f"/api/projects/{project.id}")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert store.projects == {}

    def test_delete_twice(self, client, project):
        client.delete(f"/api/projects/{project.id}")

        response = client.delete(f"/api/projects/{project.id}")

        assert response.status_code == 404


class TestFilesPreviewExport:
    def test_files_sorted_by_path(self, client, project):
        response = client.get(f"/api/projects/{project.id}/files")

        assert response.status_code == 200
        paths = [f["path"] for f in response.json()["files"]]
        assert paths == ["components/Hero.tsx", "page.tsx"]

    def test_preview_bundle(self, client, project):
        response = client.get(f"/api/projects/{project.id}/preview")

        assert response.status_code == 200
        data = response.json()
        assert data["template"] == "react-ts"
        assert "lucide-react" in data["dependencies"]
        assert data["external_resources"] == ["https://cdn.tailwindcss.com"]
        assert "import Page from './page'" in data["files"][APP_PATH]
        assert MOUNT_PATH in data["files"]
        assert "/components/Hero.tsx" in data["files"]

    def test_export_requires_pro(self, client, project):
        response = client.get(f"/api/projects/{project.id}/export")

        assert response.status_code == 403
        assert "Pro feature" in response.json()["error"]["message"]

    def test_export_zip_for_pro(self, client, profile, project):
        profile.is_pro = True

        response = client.get(f"/api/projects/{project.id}/export")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/zip"
        assert 'filename="landing-page.zip"' in response.headers["content-disposition"]
        with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
            assert sorted(archive.namelist()) == [
                "landing-page/components/Hero.tsx",
                "landing-page/page.tsx",
            ]
