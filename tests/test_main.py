from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from app.main import app, lifespan


class TestAppConfiguration:
    """Test FastAPI app configuration."""

    def test_app_title(self):
        assert app.title == "Volunteer Hub API"

    def test_app_has_lifespan(self):
        assert app.router.lifespan_context is not None

    def test_cors_middleware_configured(self):
        middleware_types = [m.cls.__name__ for m in app.user_middleware]
        assert "CORSMiddleware" in middleware_types

    def test_application_routes_registered(self):
        paths = {route.path for route in app.routes}
        assert "/applications/" in paths
        assert "/applications/{application_id}/approve" in paths
        assert "/applications/{application_id}/withdraw" in paths

    def test_exception_handlers_registered(self):
        from app.exceptions import AppException, ProjectUnavailableError

        assert AppException in app.exception_handlers
        assert ProjectUnavailableError in app.exception_handlers
        assert Exception in app.exception_handlers


class TestHealthCheck:
    def test_health_check(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestLifespan:
    @pytest.mark.asyncio
    @patch("app.main.setup_telemetry")
    @patch("app.main.create_db_and_tables")
    @patch("app.main.setup_logging")
    async def test_lifespan_runs_startup_tasks(
        self, mock_setup_logging, mock_create_tables, mock_setup_telemetry
    ):
        async with lifespan(app):
            mock_setup_logging.assert_called_once()
            mock_create_tables.assert_called_once()
            mock_setup_telemetry.assert_called_once_with(app)
