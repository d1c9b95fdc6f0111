# This project was developed with assistance from AI tools.
"""Fixtures for functional tests.

The real app from ``src.main`` is a module singleton. ``_clean_overrides``
ensures dependency_overrides are cleared after every test so persona
configuration from one test never leaks into the next.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from src.main import app as real_app
from src.schemas.auth import UserContext
from src.services.storage import StorageService

from .mock_db import configure_app_for_persona

_AUDIT_WRITERS = (
    "src.services.workflow.write_audit_event",
    "src.services.application.write_audit_event",
    "src.services.decision.write_audit_event",
)


@pytest.fixture(autouse=True)
def _clean_overrides():
    """Clear app dependency overrides after each test."""
    yield
    real_app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def audit_writer():
    """Replace audit writes; the hash chain needs a real database.

    Yields the mock shared by every service module so tests can assert on
    the recorded events.
    """
    mock_write = AsyncMock()
    patchers = [patch(target, mock_write) for target in _AUDIT_WRITERS]
    for p in patchers:
        p.start()
    yield mock_write
    for p in patchers:
        p.stop()


@pytest.fixture
def app():
    """Return the real FastAPI app with all routers mounted."""
    return real_app


@pytest.fixture
def make_client(app):
    """Factory fixture: configure persona + mock DB, return TestClient."""

    def _make(user: UserContext, session: AsyncMock) -> TestClient:
        configure_app_for_persona(app, user, session)
        return TestClient(app)

    return _make


@pytest.fixture
def make_upload_client(app):
    """Factory fixture: configure persona + mock DB + mock object storage.

    Returns (TestClient, mock_storage). The storage patch is stopped after
    each test.
    """
    patchers = []

    def _make(user: UserContext, session: AsyncMock) -> tuple[TestClient, MagicMock]:
        configure_app_for_persona(app, user, session)

        mock_storage = MagicMock()
        mock_storage.build_object_key.side_effect = StorageService.build_object_key
        mock_storage.upload_file = AsyncMock(side_effect=lambda data, key, content_type: key)
        mock_storage.get_upload_url = AsyncMock(return_value="https://s3.test/put-signed")
        mock_storage.get_download_url = AsyncMock(return_value="https://s3.test/get-signed")
        mock_storage.object_exists = AsyncMock(return_value=True)

        patcher = patch("src.services.document.get_storage_service", return_value=mock_storage)
        patcher.start()
        patchers.append(patcher)

        return TestClient(app), mock_storage

    yield _make

    for p in patchers:
        p.stop()
