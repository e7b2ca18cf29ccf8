"""
Integration tests for health check endpoints.
"""


class TestHealthEndpoints:
    """Tests for /api/health endpoints."""

    def test_basic_health(self, anonymous_client):
        response = anonymous_client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data

    def test_liveness(self, anonymous_client):
        response = anonymous_client.get("/api/health/live")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_detailed_reports_components(self, anonymous_client):
        response = anonymous_client.get("/api/health/detailed")

        assert response.status_code == 200
        data = response.json()
        assert set(data["components"]) == {"database", "redis", "gemini_api"}
        assert data["components"]["database"]["status"] == "unhealthy"
        assert data["components"]["database"]["error"] == "Database not configured"
        assert data["components"]["redis"]["status"] == "degraded"
        assert data["status"] == "unhealthy"

    def test_readiness_follows_database(self, anonymous_client):
        response = anonymous_client.get("/api/health/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "unhealthy"

    def test_root(self, anonymous_client):
        response = anonymous_client.get("/")

        assert response.status_code == 200
        assert response.json()["name"] == "Cenly"

    def test_detailed_with_gemini_key(self, test_settings, anonymous_client):
        data = anonymous_client.get("/api/health/detailed").json()

        gemini = data["components"]["gemini_api"]
        assert gemini["status"] == "healthy"
        assert gemini["details"] == {"model": "gemini-2.5-flash"}
