# This project was developed with assistance from AI tools.
"""Unauthenticated endpoints, profile and health."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from db import get_db, get_db_service
from db.enums import ApplicationStatus
from fastapi.testclient import TestClient

from src.core.config import settings

from .data_factory import make_application, make_decision
from .personas import approval_committee, relationship_manager

pytestmark = pytest.mark.functional


def _public_client(app, *results) -> TestClient:
    """Client whose session answers successive queries with ``results``."""
    session = AsyncMock()
    execute_results = []
    for value in results:
        result = MagicMock()
        result.scalar_one_or_none.return_value = value
        execute_results.append(result)
    session.execute = AsyncMock(side_effect=execute_results)

    async def fake_db():
        yield session

    app.dependency_overrides[get_db] = fake_db
    return TestClient(app)


class TestPublicStatus:
    def test_in_progress_application(self, app):
        client = _public_client(
            app, make_application(102, application_status=ApplicationStatus.UNDER_REVIEW)
        )

        resp = client.get("/api/public/status/DASHEN-202601-1002")

        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "UNDER_REVIEW"
        assert body["status_info"]["label"] == "Under Review"
        assert body["decision"] is None
        assert "customer_number" not in body

    def test_approved_application_shows_decision(self, app):
        client = _public_client(
            app,
            make_application(105, application_status=ApplicationStatus.APPROVED),
            make_decision(105),
        )

        resp = client.get("/api/public/status/DASHEN-202601-1005")

        body = resp.json()
        assert body["status"] == "APPROVED"
        assert body["decision"] == "APPROVED"
        assert body["decision_reason"] == "Strong collateral coverage"

    def test_unknown_reference(self, app):
        client = _public_client(app, None)

        resp = client.get("/api/public/status/DASHEN-202601-9999")

        assert resp.status_code == 404
        assert resp.json()["detail"] == "Application not found with this reference number"

    def test_malformed_reference(self, app):
        client = _public_client(app)

        resp = client.get("/api/public/status/12345", headers={"X-Request-ID": "req-42"})

        assert resp.status_code == 422
        body = resp.json()
        assert body["status"] == 422
        assert body["instance"] == "/api/public/status/12345"
        assert body["request_id"] == "req-42"
        assert body["errors"][0]["loc"] == ["path", "reference"]
        assert resp.headers["X-Request-ID"] == "req-42"

    def test_catalog(self, app):
        resp = TestClient(app).get("/api/public/catalog")

        assert resp.status_code == 200
        body = resp.json()
        assert body["loan_types"]
        assert "Export" in body["economic_sectors"]


class TestProfile:
    def test_profile_echoes_token_identity(self, make_client):
        client = make_client(approval_committee(), AsyncMock())

        resp = client.get("/api/profile")

        assert resp.status_code == 200
        assert resp.json() == {
            "user_id": "tigist-worku-ac",
            "role": "approval_committe",
            "email": "tigist-worku-ac@credit-workflow.local",
            "name": "Tigist Worku",
            "phone": "+251911000000",
        }

    def test_profile_without_phone(self, make_client):
        client = make_client(relationship_manager(), AsyncMock())

        assert client.get("/api/profile").json()["phone"] is None

    def test_profile_requires_token(self, app, monkeypatch):
        monkeypatch.setattr(settings, "AUTH_DISABLED", False)

        resp = TestClient(app).get("/api/profile")

        assert resp.status_code == 401


class TestHealth:
    def test_health_reports_api_and_database(self, app):
        db_service = MagicMock()
        db_service.health_check = AsyncMock(
            return_value={
                "name": "Database",
                "status": "healthy",
                "message": "PostgreSQL connection successful",
            }
        )
        app.dependency_overrides[get_db_service] = lambda: db_service

        resp = TestClient(app).get("/health/")

        assert resp.status_code == 200
        api, database = resp.json()
        assert api["name"] == "API"
        assert api["version"] == "0.1.0"
        assert database["status"] == "healthy"

    def test_health_is_200_when_database_down(self, app):
        db_service = MagicMock()
        db_service.health_check = AsyncMock(
            return_value={
                "name": "Database",
                "status": "unhealthy",
                "message": "PostgreSQL unreachable: OSError",
            }
        )
        app.dependency_overrides[get_db_service] = lambda: db_service

        resp = TestClient(app).get("/health/")

        assert resp.status_code == 200
        assert resp.json()[1]["status"] == "unhealthy"
